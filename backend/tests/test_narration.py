import base64

import pytest

from lesson_gateway.errors import ThrottlingError, ValidationError
from lesson_gateway.services.narration import NarrationService, truncate_narration


@pytest.fixture
def service(ctx):
	return NarrationService(ctx)


@pytest.mark.unit
class TestTruncation:
	def test_short_text_untouched(self):
		assert truncate_narration("hello", 10) == ("hello", False)

	def test_long_text_truncated_with_marker(self):
		text, truncated = truncate_narration("x" * 3500, 3000)

		assert truncated is True
		assert text == "x" * 3000 + "..."


@pytest.mark.unit
class TestStandaloneAudio:
	@pytest.mark.asyncio
	async def test_synthesize_and_cache(self, service, synthesizer):
		first = await service.synthesize("Hello class", "English", None)
		second = await service.synthesize("hello class", None, None)

		assert first["cached"] is False
		assert second["cached"] is True
		assert len(synthesizer.calls) == 1
		assert base64.b64decode(first["audio"]["audioBase64"]) == synthesizer.audio
		assert first["audio"]["voiceUsed"] == "en-IN-Standard-A"
		assert second["stats"]["cacheHits"] == 1

	@pytest.mark.asyncio
	async def test_voice_is_part_of_the_key(self, service, synthesizer):
		await service.synthesize("Hello class", "English", None)
		await service.synthesize("Hello class", "English", "en-IN-Wavenet-B")

		assert len(synthesizer.calls) == 2
		assert synthesizer.calls[1][1].voice_id == "en-IN-Wavenet-B"

	@pytest.mark.asyncio
	async def test_long_text_is_truncated_before_synthesis(self, service, synthesizer, ctx):
		result = await service.synthesize("word " * 700, "English", None)

		ssml, _ = synthesizer.calls[0]
		assert result["audio"]["truncated"] is True
		assert len(ssml) < ctx.settings.max_narration_chars + 100

	@pytest.mark.asyncio
	async def test_upstream_errors_propagate(self, service, synthesizer, ctx):
		synthesizer.error = ThrottlingError()

		with pytest.raises(ThrottlingError):
			await service.synthesize("Hello class", "English", None)
		assert ctx.standalone_audio.store.keys() == 0

	@pytest.mark.asyncio
	async def test_invalid_request(self, service, synthesizer):
		with pytest.raises(ValidationError):
			await service.synthesize("", "English", None)
		assert synthesizer.calls == []


@pytest.mark.unit
class TestNarrateSafely:
	@pytest.mark.asyncio
	async def test_failure_returns_error_text(self, service, synthesizer, ctx):
		synthesizer.error = RuntimeError("credentials missing")

		result = await service.narrate_safely("Hello", "English", ctx.lesson_audio, "audio_x_6_english")

		assert result.audio is None
		assert "credentials missing" in result.error

	@pytest.mark.asyncio
	async def test_production_hides_error_details(self, ctx, synthesizer):
		from fakes import make_settings

		ctx.settings = make_settings(APP_ENV="production")
		synthesizer.error = RuntimeError("credentials missing")

		result = await NarrationService(ctx).narrate_safely("Hello", "English", ctx.lesson_audio, "k")

		assert "credentials" not in result.error
