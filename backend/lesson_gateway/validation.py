"""Request validation shared by the orchestrators.

Each validator collects every violation before raising a single
`ValidationError`, so a caller fixing a request sees all problems at once.
"""
from __future__ import annotations

import base64
import binascii
import math
import re
from typing import Any, List, Optional, Tuple

from .errors import ValidationError
from .relevance import DIAGRAM_STYLES
from .voices import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES

MIN_GRADE = 1
MAX_GRADE = 12
DEFAULT_GRADE = 6
MAX_TOPIC_LENGTH = 200
MAX_QUESTION_LENGTH = 500
MAX_TEXT_LENGTH = 5000
MAX_VOICE_ID_LENGTH = 100

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_grade(grade: Any) -> int:
	"""Read a grade leniently: leading integer of a string, 6 when absent or zero.

	Raises ValueError for infinite or NaN numbers, which have no integer value.
	"""
	if isinstance(grade, bool) or grade is None:
		return DEFAULT_GRADE
	if isinstance(grade, float) and not math.isfinite(grade):
		raise ValueError(f"Grade {grade} is not a finite number")
	if isinstance(grade, (int, float)):
		value = int(grade)
	else:
		match = _LEADING_INT.match(str(grade))
		if not match:
			return DEFAULT_GRADE
		value = int(match.group(1))
	return value or DEFAULT_GRADE


def resolve_language(language: Optional[str]) -> str:
	return language or DEFAULT_LANGUAGE


def _read_grade(grade: Any, errors: List[str]) -> int:
	try:
		grade_level = parse_grade(grade)
	except ValueError:
		errors.append(f"Grade must be between {MIN_GRADE} and {MAX_GRADE}")
		return DEFAULT_GRADE
	_check_grade(grade_level, errors)
	return grade_level


def _check_grade(grade: int, errors: List[str]) -> None:
	if grade < MIN_GRADE or grade > MAX_GRADE:
		errors.append(f"Grade must be between {MIN_GRADE} and {MAX_GRADE}")


def _check_language(language: str, errors: List[str]) -> None:
	if language not in SUPPORTED_LANGUAGES:
		errors.append(f"Language must be one of: {', '.join(SUPPORTED_LANGUAGES)}")


def _check_required_text(value: Optional[str], label: str, max_length: int, errors: List[str]) -> None:
	if not value or not value.strip():
		errors.append(f"{label} is required")
	elif len(value) > max_length:
		errors.append(f"{label} too long (max {max_length} characters)")


def validate_topic_request(topic: Optional[str], grade: Any, language: Optional[str]) -> Tuple[str, int, str]:
	errors: List[str] = []
	_check_required_text(topic, "Topic", MAX_TOPIC_LENGTH, errors)
	grade_level = _read_grade(grade, errors)
	lang = resolve_language(language)
	_check_language(lang, errors)
	if errors:
		raise ValidationError(errors)
	return topic.strip(), grade_level, lang


def validate_doubt_request(question: Optional[str], grade: Any, language: Optional[str]) -> Tuple[str, int, str]:
	errors: List[str] = []
	_check_required_text(question, "Question", MAX_QUESTION_LENGTH, errors)
	grade_level = _read_grade(grade, errors)
	lang = resolve_language(language)
	_check_language(lang, errors)
	if errors:
		raise ValidationError(errors)
	return question.strip(), grade_level, lang


def validate_audio_request(text: Optional[str], language: Optional[str], voice_id: Optional[str]) -> Tuple[str, str]:
	errors: List[str] = []
	_check_required_text(text, "Text", MAX_TEXT_LENGTH, errors)
	lang = resolve_language(language)
	_check_language(lang, errors)
	if voice_id is not None and len(voice_id) > MAX_VOICE_ID_LENGTH:
		errors.append(f"Voice id too long (max {MAX_VOICE_ID_LENGTH} characters)")
	if errors:
		raise ValidationError(errors)
	return text, lang


def validate_style(style: Optional[str], errors: List[str]) -> None:
	if style is not None and style not in DIAGRAM_STYLES:
		errors.append(f"Style must be one of: {', '.join(DIAGRAM_STYLES)}")


def validate_diagram_request(
	topic: Optional[str], grade: Any, language: Optional[str], style: Optional[str]
) -> Tuple[str, int, str]:
	errors: List[str] = []
	_check_required_text(topic, "Topic", MAX_TOPIC_LENGTH, errors)
	grade_level = _read_grade(grade, errors)
	lang = resolve_language(language)
	_check_language(lang, errors)
	validate_style(style, errors)
	if errors:
		raise ValidationError(errors)
	return topic.strip(), grade_level, lang


def decode_audio(audio_data: Optional[str]) -> bytes:
	errors: List[str] = []
	audio = b""
	if not audio_data:
		errors.append("No audio data provided")
	else:
		try:
			audio = base64.b64decode(audio_data, validate=True)
		except (binascii.Error, ValueError):
			errors.append("Audio data must be base64 encoded")
		else:
			if not audio:
				errors.append("Audio data is empty")
	if errors:
		raise ValidationError(errors)
	return audio
