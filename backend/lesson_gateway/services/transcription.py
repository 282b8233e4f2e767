from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..context import GatewayContext
from ..validation import decode_audio, resolve_language
from ..voices import recognition_code

logger = logging.getLogger(__name__)


class TranscriptionService:
	"""Speech-to-text for spoken questions. Results are not cached."""

	def __init__(self, ctx: GatewayContext) -> None:
		self.ctx = ctx

	async def transcribe(self, audio_data: Optional[str], language: Optional[str] = None) -> Dict[str, Any]:
		audio = decode_audio(audio_data)
		language = resolve_language(language)
		code = recognition_code(language)
		logger.info("Transcribing %d bytes as %s", len(audio), code)
		text = await self.ctx.recognizer.transcribe(audio, code)
		return {"success": True, "transcription": (text or "").strip(), "languageCode": code}
