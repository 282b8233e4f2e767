"""Tests for lesson generation, caching and narration attachment."""

import pytest

from fakes import LESSON_TEXT, FakeTextModel, RoutingTextModel
from lesson_gateway.errors import ThrottlingError, UpstreamError, ValidationError
from lesson_gateway.services.lesson import GenerationState, LessonGeneration, LessonService


@pytest.fixture
def routed_model():
	return RoutingTextModel([LESSON_TEXT], quiz_reply="Question 1: Plants need sunlight. True or False?")


@pytest.fixture
def service(ctx):
	return LessonService(ctx)


def _use_model(ctx, model):
	ctx.text_model = model
	return LessonService(ctx)


@pytest.mark.unit
class TestLessonGeneration:
	def test_starts_untried(self):
		generation = LessonGeneration(max_attempts=2)

		assert generation.state is GenerationState.NOT_TRIED
		assert generation.can_attempt

	def test_attempts_are_bounded(self):
		generation = LessonGeneration(max_attempts=2)
		generation.begin_attempt()
		generation.begin_attempt()

		assert generation.state is GenerationState.ATTEMPTING
		assert generation.attempt == 2
		assert generation.is_last_attempt
		with pytest.raises(RuntimeError):
			generation.begin_attempt()

	def test_terminal_states(self):
		generation = LessonGeneration(max_attempts=2)
		generation.begin_attempt()
		generation.succeed("text")

		assert generation.state is GenerationState.SUCCEEDED
		assert not generation.can_attempt

		fallback = LessonGeneration(max_attempts=1)
		fallback.fall_back("canned")
		assert fallback.used_fallback


@pytest.mark.unit
class TestGetLesson:
	@pytest.mark.asyncio
	async def test_second_request_is_served_from_cache(self, ctx, routed_model, synthesizer):
		service = _use_model(ctx, routed_model)

		first = await service.get_lesson("Photosynthesis", 6, "English")
		second = await service.get_lesson("  photosynthesis ", "6", "English")

		assert first["cached"] is False
		assert second["cached"] is True
		assert second["lesson"] == first["lesson"]
		# One lesson prompt and one quiz prompt, nothing on the second request
		assert len(routed_model.prompts) == 1
		assert len(routed_model.quiz_prompts) == 1
		assert len(synthesizer.calls) == 1
		assert second["stats"]["apiCalls"] == 1
		assert second["stats"]["cacheHits"] == 1
		assert second["stats"]["audio"]["cacheHits"] == 1

	@pytest.mark.asyncio
	async def test_lesson_hit_with_expired_narration_regenerates_audio(self, ctx, routed_model, synthesizer, clock):
		service = _use_model(ctx, routed_model)

		await service.get_lesson("Photosynthesis", 6, "English")
		clock.advance(ctx.settings.narration_audio_ttl_seconds + 1)
		result = await service.get_lesson("Photosynthesis", 6, "English")

		assert result["cached"] is True
		assert result["audio"]["cached"] is False
		assert len(synthesizer.calls) == 2
		assert len(routed_model.prompts) == 1

	@pytest.mark.asyncio
	async def test_lesson_shape(self, ctx, routed_model):
		service = _use_model(ctx, routed_model)

		result = await service.get_lesson("Photosynthesis", 6, "English")
		lesson = result["lesson"]

		assert lesson["title"] == "Photosynthesis - Grade 6"
		assert lesson["grade"] == 6
		assert lesson["language"] == "English"
		assert lesson["source"] == "model"
		assert lesson["quiz"].startswith("Question 1")
		assert all(lesson[name] for name in ("introduction", "explanation", "analogy", "recap"))
		assert result["audio"]["audioBase64"]
		assert result["audio"]["cached"] is False
		assert result["audioError"] is None

	@pytest.mark.asyncio
	async def test_retries_once_after_unusable_text(self, ctx):
		model = RoutingTextModel(["too short", LESSON_TEXT])
		service = _use_model(ctx, model)

		result = await service.get_lesson("Photosynthesis", 6, "English")

		assert len(model.prompts) == 2
		assert result["lesson"]["source"] == "model"

	@pytest.mark.asyncio
	async def test_fallback_after_two_unusable_responses(self, ctx):
		model = RoutingTextModel(["too short", "I'm sorry, I cannot write that lesson. " * 4])
		service = _use_model(ctx, model)

		result = await service.get_lesson("Gravity", 6, "English")

		assert len(model.prompts) == 2
		assert result["lesson"]["source"] == "fallback"
		assert "Gravity" in result["lesson"]["introduction"]
		assert ctx.lessons.counters.fallbacks == 1
		# Fallback lessons are cached like any other
		again = await service.get_lesson("Gravity", 6, "English")
		assert again["cached"] is True

	@pytest.mark.asyncio
	async def test_error_on_earlier_attempt_is_retried(self, ctx):
		model = RoutingTextModel([UpstreamError(detail="boom"), LESSON_TEXT])
		service = _use_model(ctx, model)

		result = await service.get_lesson("Photosynthesis", 6, "English")

		assert result["lesson"]["source"] == "model"

	@pytest.mark.asyncio
	async def test_throttling_on_final_attempt_propagates(self, ctx):
		model = RoutingTextModel(["too short", ThrottlingError()])
		service = _use_model(ctx, model)

		with pytest.raises(ThrottlingError):
			await service.get_lesson("Photosynthesis", 6, "English")
		assert ctx.lessons.store.keys() == 0

	@pytest.mark.asyncio
	async def test_quiz_failure_uses_fallback_quiz(self, ctx):
		model = RoutingTextModel([LESSON_TEXT], quiz_reply=UpstreamError())
		service = _use_model(ctx, model)

		result = await service.get_lesson("Photosynthesis", 6, "English")

		assert "Photosynthesis is important. True or False?" in result["lesson"]["quiz"]

	@pytest.mark.asyncio
	async def test_narration_failure_does_not_fail_lesson(self, ctx, routed_model, synthesizer):
		synthesizer.error = UpstreamError(detail="tts down")
		service = _use_model(ctx, routed_model)

		result = await service.get_lesson("Photosynthesis", 6, "English")

		assert result["lesson"]["title"] == "Photosynthesis - Grade 6"
		assert result["audio"] is None
		assert "unavailable" in result["audioError"]

	@pytest.mark.asyncio
	async def test_narration_text_is_title_intro_and_explanation(self, ctx, routed_model, synthesizer):
		service = _use_model(ctx, routed_model)

		await service.get_lesson("Photosynthesis", 6, "English")

		ssml, voice = synthesizer.calls[0]
		assert "Photosynthesis - Grade 6. Let&apos;s learn about photosynthesis" in ssml
		assert "To summarize" not in ssml
		assert voice.language_code == "en-IN"

	@pytest.mark.asyncio
	async def test_expired_lesson_is_regenerated(self, ctx, routed_model, clock):
		service = _use_model(ctx, routed_model)

		await service.get_lesson("Photosynthesis", 6, "English")
		clock.advance(ctx.settings.lesson_ttl_seconds + 1)
		result = await service.get_lesson("Photosynthesis", 6, "English")

		assert result["cached"] is False
		assert len(routed_model.prompts) == 2

	@pytest.mark.asyncio
	async def test_validation_happens_before_any_upstream_call(self, service, text_model):
		with pytest.raises(ValidationError):
			await service.get_lesson("", 20, "Klingon")

		assert text_model.prompts == []


@pytest.mark.unit
class TestLessonStats:
	@pytest.mark.asyncio
	async def test_stats_and_clear(self, ctx):
		service = _use_model(ctx, RoutingTextModel([LESSON_TEXT]))
		await service.get_lesson("Photosynthesis", 6, "English")

		stats = service.stats()
		assert stats["lessons"]["apiCalls"] == 1
		assert stats["audio"]["apiCalls"] == 1
		assert stats["modelUsed"] == "fake/fake-text"

		cleared = service.clear_cache()
		assert cleared["cleared"] == {"lessons": 1, "audio": 1}
		assert ctx.lessons.store.keys() == 0
