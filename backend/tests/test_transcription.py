import base64

import pytest

from lesson_gateway.errors import ThrottlingError, ValidationError
from lesson_gateway.services.transcription import TranscriptionService

AUDIO = base64.b64encode(b"RIFF....WAVEfmt ").decode()


@pytest.fixture
def service(ctx):
	return TranscriptionService(ctx)


@pytest.mark.unit
class TestTranscription:
	@pytest.mark.asyncio
	async def test_transcribes_and_trims(self, service, recognizer):
		result = await service.transcribe(AUDIO, "Hindi")

		assert result == {"success": True, "transcription": "what is gravity", "languageCode": "hi-IN"}
		assert recognizer.calls[0][0] == b"RIFF....WAVEfmt "

	@pytest.mark.asyncio
	async def test_language_defaults_and_unknowns(self, service, recognizer):
		await service.transcribe(AUDIO)
		await service.transcribe(AUDIO, "Klingon")
		await service.transcribe(AUDIO, "Marathi")

		assert [code for _, code in recognizer.calls] == ["en-US", "en-US", "hi-IN"]

	@pytest.mark.asyncio
	async def test_results_are_not_cached(self, service, recognizer):
		await service.transcribe(AUDIO)
		await service.transcribe(AUDIO)

		assert len(recognizer.calls) == 2

	@pytest.mark.asyncio
	async def test_missing_audio(self, service, recognizer):
		with pytest.raises(ValidationError):
			await service.transcribe(None)
		assert recognizer.calls == []

	@pytest.mark.asyncio
	async def test_recognizer_errors_propagate(self, service, recognizer):
		recognizer.error = ThrottlingError()

		with pytest.raises(ThrottlingError):
			await service.transcribe(AUDIO)
