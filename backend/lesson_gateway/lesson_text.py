"""
Lesson Text Helpers
===================

Prompt builders for lessons, quizzes and doubt answers, plus the parsing
that turns free-form generator output into the four lesson sections and the
canned content used when the generator gives nothing usable.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional

MIN_LESSON_CHARS = 100
MIN_PARAGRAPH_CHARS = 30
MIN_SECTION_CHARS = 20
MIN_ANSWER_CHARS = 20

SECTIONS = ("introduction", "explanation", "analogy", "recap")

REFUSAL_PHRASES = (
	"i'm sorry",
	"i am sorry",
	"i cannot",
	"i can't",
	"i am unable",
	"i'm unable",
	"as an ai",
	"i won't be able",
)

_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n+")
_SECTION_LABEL = re.compile(r"^(PARAGRAPH \d+|Introduction|Explanation|Example|Summary):?\s*", re.IGNORECASE)


# ============================================================================
# PROMPTS
# ============================================================================

def _language_note(language: str, scope: str = "ENTIRE response") -> str:
	if language == "English":
		return ""
	return f"CRITICAL: You MUST write your {scope} in {language} language."


def build_lesson_prompt(topic: str, grade: int, language: str) -> str:
	return f"""You are an expert teacher for grade {grade} students.
{_language_note(language)}

Create a complete lesson about: {topic}

Write exactly 4 paragraphs in {language} language:

Paragraph 1 - Introduction:
Start with "Let's learn about {topic}." Explain what it is in 2-3 simple sentences.

Paragraph 2 - Detailed Explanation:
Explain how {topic} works. Use simple words suitable for grade {grade}.

Paragraph 3 - Real-Life Example:
Give ONE clear example from daily life. Start with "For example,"

Paragraph 4 - Summary:
Summarize the 3 most important points. Start with "To summarize,"

Keep language simple for grade {grade} students.""".strip()


def build_quiz_prompt(topic: str, grade: int, language: str) -> str:
	return f"""{_language_note(language, "quiz")}
Create 3 quiz questions about {topic} for grade {grade} students in {language}.

Question 1 (Easy - True/False):
Simple true/false question.

Question 2 (Medium - Multiple Choice):
4 options (A, B, C, D). Mark correct answer.

Question 3 (Hard - Short Answer):
Application question.

Format clearly in {language}.""".strip()


def build_doubt_prompt(question: str, grade: int, language: str, topic: Optional[str] = None) -> str:
	related = f"Related Topic: {topic}" if topic else ""
	return f"""You are a helpful teacher for grade {grade} students.
{_language_note(language, "ENTIRE answer")}

Student's Question: {question}
{related}

Provide a clear, simple answer in {language} suitable for grade {grade} students.
- Break down complex concepts into easy steps
- Use examples they can relate to
- Keep the answer concise (2-3 paragraphs maximum)
- Be encouraging and supportive
- Don't mention that you're an AI or assistant""".strip()


# ============================================================================
# PARSING
# ============================================================================

def is_usable_lesson(text: Optional[str]) -> bool:
	"""False for empty, too short, or refusal-like generator output."""
	if not text or len(text.strip()) < MIN_LESSON_CHARS:
		return False
	lowered = text.lower()
	return not any(phrase in lowered for phrase in REFUSAL_PHRASES)


def placeholder_section(topic: str, grade: int) -> str:
	return f"Content about {topic} for grade {grade}."


def parse_lesson(raw_text: str, topic: str, grade: int) -> Dict[str, str]:
	"""Split generator output into the four lesson sections.

	Paragraphs are blank-line separated. Short paragraphs are treated as
	noise, generator labels such as "Paragraph 2:" or "Summary:" are removed,
	and missing sections are padded with a placeholder so none is empty.

	Args:
		raw_text: Free-form text returned by the text model
		topic: Lesson topic, used in placeholder text
		grade: Grade level, used in placeholder text

	Returns:
		Dict with keys introduction, explanation, analogy and recap
	"""
	paragraphs: List[str] = [p.strip() for p in _PARAGRAPH_SPLIT.split(raw_text or "")]
	paragraphs = [p for p in paragraphs if len(p) > MIN_PARAGRAPH_CHARS]
	paragraphs = [_SECTION_LABEL.sub("", p).strip() for p in paragraphs]
	paragraphs = [p for p in paragraphs if len(p) > MIN_SECTION_CHARS]
	while len(paragraphs) < len(SECTIONS):
		paragraphs.append(placeholder_section(topic, grade))
	return dict(zip(SECTIONS, paragraphs))


# ============================================================================
# FALLBACK CONTENT
# ============================================================================

def fallback_lesson_text(topic: str, grade: int) -> str:
	return (
		f"Let's learn about {topic}. It is one of the ideas you will meet again and again in school.\n\n"
		f"{topic} is an important concept for grade {grade}. We study it by looking at its parts and how they work together.\n\n"
		f"Think of {topic} in everyday life. Look around your home or school and try to find where it shows up.\n\n"
		f"In summary, {topic} helps students understand the world around them and connect new ideas to old ones."
	)


def fallback_quiz(topic: str) -> str:
	return (
		f"Question 1: {topic} is important. True or False?\nAnswer: True\n\n"
		f"Question 2: What describes {topic}?\nA) Important concept\nB) Unrelated\nC) Advanced only\nD) None\nAnswer: A\n\n"
		f"Question 3: How to apply {topic}?\nAnswer: Explain practical uses."
	)
