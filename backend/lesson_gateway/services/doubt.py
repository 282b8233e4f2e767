from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..context import GatewayContext
from ..errors import UpstreamFormatError
from ..lesson_text import MIN_ANSWER_CHARS, build_doubt_prompt
from ..validation import validate_doubt_request
from .narration import NarrationService

logger = logging.getLogger(__name__)

ANSWER_MAX_TOKENS = 1024


class DoubtService:
	"""Answers free-form student questions, caching answers by question digest."""

	def __init__(self, ctx: GatewayContext, narration: Optional[NarrationService] = None) -> None:
		self.ctx = ctx
		self.narration = narration or NarrationService(ctx)

	async def fetch_answer(self, question: str, grade: int, language: str, topic: Optional[str]) -> str:
		prompt = build_doubt_prompt(question, grade, language, topic)
		answer = (await self.ctx.text_model.generate(prompt, max_tokens=ANSWER_MAX_TOKENS) or "").strip()
		if len(answer) < MIN_ANSWER_CHARS:
			raise UpstreamFormatError(
				"Failed to answer question",
				detail=f"Generated answer too short or empty ({len(answer)} chars)",
			)
		return answer

	async def answer(
		self,
		question: Optional[str],
		grade: Any,
		language: Optional[str],
		topic: Optional[str] = None,
	) -> Dict[str, Any]:
		question, grade, language = validate_doubt_request(question, grade, language)
		topic = topic.strip() if topic and topic.strip() else None
		key = self.ctx.keys.doubt(question, grade, language)
		answer = self.ctx.doubts.lookup(key)
		cached = answer is not None
		if not cached:
			answer = await self.fetch_answer(question, grade, language, topic)
			self.ctx.doubts.remember(key, answer)

		narration = await self.narration.narrate_safely(
			answer, language, self.ctx.doubt_audio, self.ctx.keys.doubt_audio(answer, language)
		)
		return {
			"answer": answer,
			"audio": narration.audio,
			"audioError": narration.error,
			"cached": cached,
			"stats": {**self.ctx.doubts.counters.snapshot(), "audio": self.ctx.doubt_audio.counters.snapshot()},
		}

	def stats(self) -> Dict[str, Any]:
		return {
			"doubts": self.ctx.doubts.counters.snapshot(),
			"audio": self.ctx.doubt_audio.counters.snapshot(),
			"modelUsed": self.ctx.text_model.label,
		}

	def clear_cache(self) -> Dict[str, Any]:
		cleared = {"doubts": self.ctx.doubts.store.flush(), "audio": self.ctx.doubt_audio.store.flush()}
		logger.info("Doubt caches cleared: %s", cleared)
		return {"message": "Doubt caches cleared", "cleared": cleared}
