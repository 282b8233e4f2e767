"""Google Cloud speech collaborators: SSML synthesis and recognition."""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

from google.api_core.exceptions import GoogleAPICallError, InvalidArgument, ResourceExhausted
from google.cloud import speech_v1p1beta1 as speech
from google.cloud import texttospeech
from google.oauth2 import service_account

from .errors import ThrottlingError, UpstreamError, UpstreamFormatError
from .settings import Settings, settings as default_settings
from .voices import VoiceConfig

logger = logging.getLogger(__name__)


def _load_credentials(credentials_path: Optional[str]):
	"""Service-account credentials from a file, or None for default detection."""
	if not credentials_path:
		return None
	candidate = Path(credentials_path).expanduser()
	if candidate.is_file():
		logger.info("Using GCP credentials from configured path: %s", candidate)
		return service_account.Credentials.from_service_account_file(str(candidate))
	logger.warning(
		"Configured GCP credentials path %s is not a file. "
		"Falling back to default credential detection.",
		credentials_path,
	)
	return None


def _translate_google_error(exc: GoogleAPICallError, service: str) -> Exception:
	if isinstance(exc, ResourceExhausted):
		return ThrottlingError(detail=f"{service} quota exhausted: {exc.message}")
	if isinstance(exc, InvalidArgument):
		return UpstreamError("The speech service rejected the request", detail=f"{service}: {exc.message}")
	return UpstreamError(detail=f"{service} failed: {exc}")


class SpeechSynthesizer:
	async def synthesize(self, ssml: str, voice: VoiceConfig) -> bytes:
		raise NotImplementedError


class SpeechRecognizer:
	async def transcribe(self, audio: bytes, language_code: str) -> str:
		raise NotImplementedError


class GoogleSpeechSynthesizer(SpeechSynthesizer):
	"""Wrapper around the Google Cloud Text-to-Speech client (MP3 output)."""

	def __init__(self, cfg: Optional[Settings] = None) -> None:
		self._cfg = cfg or default_settings
		self._client: Optional[texttospeech.TextToSpeechClient] = None

	def _get_client(self) -> texttospeech.TextToSpeechClient:
		if self._client is None:
			credentials = _load_credentials(self._cfg.gcp_credentials_path)
			self._client = texttospeech.TextToSpeechClient(credentials=credentials)
		return self._client

	async def synthesize(self, ssml: str, voice: VoiceConfig) -> bytes:
		loop = asyncio.get_running_loop()
		return await loop.run_in_executor(None, self._synthesize_blocking, ssml, voice)

	def _synthesize_blocking(self, ssml: str, voice: VoiceConfig) -> bytes:
		try:
			response = self._get_client().synthesize_speech(
				input=texttospeech.SynthesisInput(ssml=ssml),
				voice=texttospeech.VoiceSelectionParams(
					language_code=voice.language_code,
					name=voice.voice_id,
				),
				audio_config=texttospeech.AudioConfig(
					audio_encoding=texttospeech.AudioEncoding.MP3
				),
			)
		except GoogleAPICallError as exc:
			raise _translate_google_error(exc, "Text-to-Speech") from exc
		if not response.audio_content:
			raise UpstreamFormatError(detail="Text-to-Speech returned no audio_content")
		return response.audio_content


class GoogleSpeechRecognizer(SpeechRecognizer):
	def __init__(self, cfg: Optional[Settings] = None) -> None:
		self._cfg = cfg or default_settings
		self._client: Optional[speech.SpeechClient] = None

	def _get_client(self) -> speech.SpeechClient:
		if self._client is None:
			credentials = _load_credentials(self._cfg.gcp_credentials_path)
			self._client = speech.SpeechClient(credentials=credentials)
		return self._client

	async def transcribe(self, audio: bytes, language_code: str) -> str:
		loop = asyncio.get_running_loop()
		return await loop.run_in_executor(None, self._transcribe_blocking, audio, language_code)

	def _transcribe_blocking(self, audio: bytes, language_code: str) -> str:
		config = speech.RecognitionConfig(
			language_code=language_code,
			model="default",
			enable_automatic_punctuation=True,
		)
		try:
			response = self._get_client().recognize(config=config, audio=speech.RecognitionAudio(content=audio))
		except GoogleAPICallError as exc:
			raise _translate_google_error(exc, "Speech-to-Text") from exc
		parts = [result.alternatives[0].transcript for result in response.results if result.alternatives]
		return " ".join(p.strip() for p in parts if p).strip()
