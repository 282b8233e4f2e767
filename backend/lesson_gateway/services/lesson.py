"""
Lesson Service
==============

Serves grade-appropriate lessons from the lesson cache, generating them on a
miss with a bounded number of text-model attempts and a locally synthesized
fallback. Every lesson response also carries narration audio for the title,
introduction and explanation, looked up in its own cache.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..context import GatewayContext
from ..errors import GatewayError
from ..lesson_text import (
	build_lesson_prompt,
	build_quiz_prompt,
	fallback_lesson_text,
	fallback_quiz,
	is_usable_lesson,
	parse_lesson,
)
from ..models import LessonRecord
from ..validation import validate_topic_request
from .narration import NarrationService

logger = logging.getLogger(__name__)

QUIZ_MAX_TOKENS = 1024


class GenerationState(str, Enum):
	NOT_TRIED = "not_tried"
	ATTEMPTING = "attempting"
	SUCCEEDED = "succeeded"
	FALLBACK_USED = "fallback_used"


@dataclass
class LessonGeneration:
	"""Tracks one lesson generation: NOT_TRIED -> ATTEMPTING(n) -> SUCCEEDED | FALLBACK_USED."""

	max_attempts: int
	state: GenerationState = GenerationState.NOT_TRIED
	attempt: int = 0
	text: Optional[str] = None

	@property
	def can_attempt(self) -> bool:
		return self.state in (GenerationState.NOT_TRIED, GenerationState.ATTEMPTING) and self.attempt < self.max_attempts

	@property
	def is_last_attempt(self) -> bool:
		return self.attempt >= self.max_attempts

	@property
	def used_fallback(self) -> bool:
		return self.state is GenerationState.FALLBACK_USED

	def begin_attempt(self) -> None:
		if not self.can_attempt:
			raise RuntimeError(f"No attempts left (state={self.state.value}, attempt={self.attempt})")
		self.state = GenerationState.ATTEMPTING
		self.attempt += 1

	def succeed(self, text: str) -> None:
		self.state = GenerationState.SUCCEEDED
		self.text = text

	def fall_back(self, text: str) -> None:
		self.state = GenerationState.FALLBACK_USED
		self.text = text


class LessonService:
	def __init__(self, ctx: GatewayContext, narration: Optional[NarrationService] = None) -> None:
		self.ctx = ctx
		self.narration = narration or NarrationService(ctx)

	async def generate_text(self, topic: str, grade: int, language: str) -> LessonGeneration:
		"""Run the bounded generation loop and return its final state.

		An error on the last attempt propagates to the caller; throttling on
		the final attempt therefore surfaces as a 429.
		"""
		generation = LessonGeneration(max_attempts=max(1, self.ctx.settings.lesson_max_attempts))
		prompt = build_lesson_prompt(topic, grade, language)
		while generation.can_attempt:
			generation.begin_attempt()
			try:
				text = await self.ctx.text_model.generate(prompt)
			except GatewayError as exc:
				if generation.is_last_attempt:
					raise
				logger.warning("Lesson attempt %d failed: %s", generation.attempt, exc)
				continue
			if is_usable_lesson(text):
				generation.succeed(text)
				return generation
			logger.warning("Lesson attempt %d returned unusable text (%d chars)", generation.attempt, len(text or ""))
		logger.warning("Using fallback lesson for '%s' (grade %d)", topic, grade)
		generation.fall_back(fallback_lesson_text(topic, grade))
		return generation

	async def generate_quiz(self, topic: str, grade: int, language: str) -> str:
		try:
			quiz = await self.ctx.text_model.generate(build_quiz_prompt(topic, grade, language), max_tokens=QUIZ_MAX_TOKENS)
		except GatewayError as exc:
			logger.warning("Quiz generation failed, using fallback quiz: %s", exc)
			return fallback_quiz(topic)
		return quiz.strip() or fallback_quiz(topic)

	async def build_lesson(self, topic: str, grade: int, language: str) -> LessonRecord:
		generation = await self.generate_text(topic, grade, language)
		sections = parse_lesson(generation.text, topic, grade)
		quiz = await self.generate_quiz(topic, grade, language)
		return LessonRecord(
			title=f"{topic} - Grade {grade}",
			quiz=quiz,
			language=language,
			grade=grade,
			source="fallback" if generation.used_fallback else "model",
			**sections,
		)

	async def get_lesson(self, topic: Optional[str], grade: Any, language: Optional[str]) -> Dict[str, Any]:
		topic, grade, language = validate_topic_request(topic, grade, language)
		key = self.ctx.keys.lesson(topic, grade, language)
		lesson = self.ctx.lessons.lookup(key)
		cached = lesson is not None
		if not cached:
			lesson = await self.build_lesson(topic, grade, language)
			self.ctx.lessons.remember(key, lesson)
			if lesson.source == "fallback":
				self.ctx.lessons.counters.record_fallback()

		narration = await self.narration.narrate_safely(
			lesson.narration_text(),
			language,
			self.ctx.lesson_audio,
			self.ctx.keys.lesson_audio(topic, grade, language),
		)
		return {
			"lesson": lesson.model_dump(by_alias=True, mode="json"),
			"audio": narration.audio,
			"audioError": narration.error,
			"cached": cached,
			"stats": self.stats_summary(),
		}

	def stats_summary(self) -> Dict[str, Any]:
		return {**self.ctx.lessons.counters.snapshot(), "audio": self.ctx.lesson_audio.counters.snapshot()}

	def stats(self) -> Dict[str, Any]:
		return {
			"lessons": self.ctx.lessons.counters.snapshot(),
			"audio": self.ctx.lesson_audio.counters.snapshot(),
			"fallbacks": self.ctx.lessons.counters.fallbacks,
			"modelUsed": self.ctx.text_model.label,
		}

	def clear_cache(self) -> Dict[str, Any]:
		cleared = {"lessons": self.ctx.lessons.store.flush(), "audio": self.ctx.lesson_audio.store.flush()}
		logger.info("Lesson caches cleared: %s", cleared)
		return {"message": "All caches cleared", "cleared": cleared}
