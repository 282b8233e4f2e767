"""SSML document builder for narration text."""
from __future__ import annotations

import re
from typing import List

BREAK_TAG = re.compile(r"<break[^>]*>")
# Private-use delimiters: escaping never produces them and input has them stripped
_OPEN = "\ue000"
_CLOSE = "\ue001"
_PLACEHOLDER_RE = re.compile(_OPEN + r"(\d+)" + _CLOSE)

_ESCAPES = (
	("&", "&amp;"),
	("<", "&lt;"),
	(">", "&gt;"),
	('"', "&quot;"),
	("'", "&apos;"),
)


def escape_ssml(text: str) -> str:
	for char, entity in _ESCAPES:
		text = text.replace(char, entity)
	return text


def build_markup(text: str) -> str:
	"""Wrap narration text in SSML, keeping any existing <break> directives.

	Break tags are swapped for placeholders before escaping and restored
	afterwards. Running this on already-escaped text escapes it again, so it
	must only be applied to raw narration.
	"""
	tags: List[str] = []

	def _protect(match: re.Match) -> str:
		tags.append(match.group(0))
		return f"{_OPEN}{len(tags) - 1}{_CLOSE}"

	protected = BREAK_TAG.sub(_protect, text.replace(_OPEN, "").replace(_CLOSE, ""))
	escaped = escape_ssml(protected)
	restored = _PLACEHOLDER_RE.sub(lambda m: tags[int(m.group(1))], escaped)
	return f'<speak><prosody rate="medium" pitch="medium">{restored}</prosody></speak>'.strip()
