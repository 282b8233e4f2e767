from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

SUPPORTED_LANGUAGES: List[str] = [
	"English", "Hindi", "Marathi", "Tamil", "Telugu", "Kannada", "Bengali", "Gujarati", "Malayalam",
]
DEFAULT_LANGUAGE = "English"
FALLBACK_LANGUAGE = "Hindi"

WORDS_PER_MINUTE = 150


@dataclass(frozen=True)
class VoiceConfig:
	voice_id: str
	language_code: str
	using_fallback: bool = False
	fallback_message: Optional[str] = None


# Languages with a native narration voice
NATIVE_VOICES: Dict[str, VoiceConfig] = {
	"English": VoiceConfig(voice_id="en-IN-Standard-A", language_code="en-IN"),
	"Hindi": VoiceConfig(voice_id="hi-IN-Standard-A", language_code="hi-IN"),
}

# Speech recognition supports more languages than narration
RECOGNITION_CODES: Dict[str, str] = {
	"English": "en-US",
	"Hindi": "hi-IN",
	"Marathi": "hi-IN",
	"Tamil": "ta-IN",
	"Telugu": "te-IN",
	"Bengali": "bn-IN",
	"Gujarati": "gu-IN",
	"Kannada": "kn-IN",
	"Malayalam": "ml-IN",
}


def voice_for_language(language: str, voice_id: Optional[str] = None) -> VoiceConfig:
	"""Resolve the narration voice, flagging any substitution of language.

	An explicit voice id replaces the voice name only; the language code (and
	the fallback flag) still follow the requested language.
	"""
	native = NATIVE_VOICES.get(language)
	if native is not None:
		config = native
	else:
		base = NATIVE_VOICES[FALLBACK_LANGUAGE]
		config = VoiceConfig(
			voice_id=base.voice_id,
			language_code=base.language_code,
			using_fallback=True,
			fallback_message=(
				f"Narration is not available in {language}; the {FALLBACK_LANGUAGE} voice was used instead."
			),
		)
	if voice_id:
		config = VoiceConfig(
			voice_id=voice_id,
			language_code=config.language_code,
			using_fallback=config.using_fallback,
			fallback_message=config.fallback_message,
		)
	return config


def recognition_code(language: str) -> str:
	return RECOGNITION_CODES.get(language, "en-US")


def estimate_duration_seconds(text: str) -> float:
	words = max(1, len(text.split()))
	return round(words / WORDS_PER_MINUTE * 60, 1)
