"""Cache key derivation.

Structured requests use their normalized fields verbatim; free-text inputs
(questions, narration text) are reduced to a short digest so keys stay
bounded. The rolling hash reproduces the 32-bit string hash already used for
existing cached keys; FNV-1a is offered behind the same interface for
deployments that do not need that compatibility.
"""
from __future__ import annotations

from typing import Callable, Dict

SEPARATOR = "_"

LESSON = "lesson"
LESSON_AUDIO = "audio"
DOUBT = "doubt"
DOUBT_AUDIO = "doubt_audio"
STANDALONE_AUDIO = "tts"
DIAGRAM = "diagram"

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"
_FNV_OFFSET = 0xCBF29CE484222325
_FNV_PRIME = 0x100000001B3


def normalize(text: str) -> str:
	return text.strip().lower()


def to_base36(value: int) -> str:
	if value == 0:
		return "0"
	digits = []
	while value:
		value, rem = divmod(value, 36)
		digits.append(_BASE36[rem])
	return "".join(reversed(digits))


def _utf16_units(text: str):
	data = text.encode("utf-16-le")
	for i in range(0, len(data), 2):
		yield data[i] | (data[i + 1] << 8)


def rolling_hash(text: str) -> str:
	"""Polynomial string hash (h*31 + c) over UTF-16 code units, base-36 encoded.

	The accumulator wraps at 32 bits and is read back as a signed integer
	before taking the absolute value. Not collision resistant.
	"""
	h = 0
	for unit in _utf16_units(text):
		h = (h * 31 + unit) & 0xFFFFFFFF
	if h >= 0x80000000:
		h -= 0x100000000
	return to_base36(abs(h))


def fnv1a_hash(text: str) -> str:
	h = _FNV_OFFSET
	for byte in text.encode("utf-8"):
		h ^= byte
		h = (h * _FNV_PRIME) & 0xFFFFFFFFFFFFFFFF
	return to_base36(h)


HASHES: Dict[str, Callable[[str], str]] = {
	"rolling": rolling_hash,
	"fnv1a": fnv1a_hash,
}


def derive_key(resource_type: str, *fields: object) -> str:
	return SEPARATOR.join([resource_type, *(str(f) for f in fields)])


class KeyBuilder:
	"""Builds the cache key for each resource type with one configured digest."""

	def __init__(self, hash_name: str = "rolling") -> None:
		try:
			self._digest = HASHES[hash_name]
		except KeyError:
			raise ValueError(f"Unknown cache key hash '{hash_name}', expected one of {sorted(HASHES)}") from None
		self.hash_name = hash_name

	def digest(self, text: str) -> str:
		return self._digest(normalize(text))

	def lesson(self, topic: str, grade: int, language: str) -> str:
		return derive_key(LESSON, normalize(topic), grade, language.lower())

	def lesson_audio(self, topic: str, grade: int, language: str) -> str:
		return derive_key(LESSON_AUDIO, normalize(topic), grade, language.lower())

	def doubt(self, question: str, grade: int, language: str) -> str:
		return derive_key(DOUBT, self.digest(question), grade, language.lower())

	def doubt_audio(self, answer: str, language: str) -> str:
		return derive_key(DOUBT_AUDIO, self.digest(answer), language.lower())

	def standalone_audio(self, text: str, language: str, voice_id: str) -> str:
		return derive_key(STANDALONE_AUDIO, self.digest(text), language.lower(), voice_id)

	def diagram(self, topic: str, grade: int, language: str, style: str) -> str:
		return derive_key(DIAGRAM, normalize(topic), grade, language.lower(), style)
