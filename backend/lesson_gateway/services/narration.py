"""Narration audio: truncate, mark up, pick a voice, synthesize, cache."""
from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..context import GatewayContext, ResourceCache
from ..markup import build_markup
from ..models import AudioRecord
from ..validation import validate_audio_request
from ..voices import estimate_duration_seconds, voice_for_language

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "..."


def truncate_narration(text: str, max_chars: int) -> Tuple[str, bool]:
	if len(text) <= max_chars:
		return text, False
	logger.warning("Audio text truncated from %d to %d chars", len(text), max_chars)
	return text[:max_chars] + TRUNCATION_MARKER, True


def dump_audio(record: AudioRecord, cached: bool) -> Dict[str, Any]:
	return {**record.model_dump(by_alias=True, mode="json"), "cached": cached}


@dataclass
class NarrationResult:
	"""Outcome of a narration attached to a lesson or doubt answer."""

	audio: Optional[Dict[str, Any]] = None
	error: Optional[str] = None


class NarrationService:
	def __init__(self, ctx: GatewayContext) -> None:
		self.ctx = ctx

	async def fetch(self, text: str, language: str, voice_id: Optional[str] = None) -> AudioRecord:
		"""Synthesize narration for text without touching any cache."""
		voice = voice_for_language(language, voice_id)
		spoken, truncated = truncate_narration(text, self.ctx.settings.max_narration_chars)
		if voice.using_fallback:
			logger.info("No native voice for %s, using %s", language, voice.language_code)
		logger.info(
			"Generating audio: voice=%s language=%s chars=%d",
			voice.voice_id,
			voice.language_code,
			len(spoken),
		)
		audio = await self.ctx.synthesizer.synthesize(build_markup(spoken), voice)
		return AudioRecord(
			audio_base64=base64.b64encode(audio).decode("ascii"),
			voice_used=voice.voice_id,
			language_code=voice.language_code,
			using_fallback=voice.using_fallback,
			fallback_message=voice.fallback_message,
			duration_seconds=estimate_duration_seconds(spoken),
			truncated=truncated,
		)

	async def narrate(
		self,
		text: str,
		language: str,
		resource: ResourceCache,
		key: str,
		voice_id: Optional[str] = None,
	) -> Tuple[AudioRecord, bool]:
		cached = resource.lookup(key)
		if cached is not None:
			return cached, True
		record = await self.fetch(text, language, voice_id)
		resource.remember(key, record)
		return record, False

	async def narrate_safely(self, text: str, language: str, resource: ResourceCache, key: str) -> NarrationResult:
		"""Narrate for a parent resource; failures are logged, never raised."""
		try:
			record, cached = await self.narrate(text, language, resource, key)
		except Exception as exc:
			logger.warning("Auto-audio generation failed for %s: %s", key, exc)
			message = "Audio narration is unavailable right now."
			if not self.ctx.settings.is_production:
				message = f"{message} {exc}"
			return NarrationResult(error=message)
		return NarrationResult(audio=dump_audio(record, cached))

	async def synthesize(self, text: Optional[str], language: Optional[str], voice_id: Optional[str]) -> Dict[str, Any]:
		"""Standalone narration request; upstream errors reach the caller."""
		text, lang = validate_audio_request(text, language, voice_id)
		voice = voice_for_language(lang, voice_id)
		key = self.ctx.keys.standalone_audio(text, lang, voice.voice_id)
		record, cached = await self.narrate(text, lang, self.ctx.standalone_audio, key, voice_id)
		return {
			"audio": dump_audio(record, cached),
			"cached": cached,
			"stats": self.ctx.standalone_audio.counters.snapshot(),
		}
