from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Record(BaseModel):
	# Cached values are shared between requests; never mutate them in place
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class LessonRecord(Record):
	title: str
	introduction: str = Field(min_length=1)
	explanation: str = Field(min_length=1)
	analogy: str = Field(min_length=1)
	recap: str = Field(min_length=1)
	quiz: str
	language: str
	grade: int
	timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
	# "model" when generated upstream, "fallback" when synthesized locally
	source: str = "model"

	def narration_text(self) -> str:
		return f"{self.title}. {self.introduction} {self.explanation}"


class AudioRecord(Record):
	audio_base64: str
	voice_used: str
	language_code: str
	using_fallback: bool = False
	fallback_message: Optional[str] = None
	duration_seconds: float
	truncated: bool = False


class DiagramRecord(Record):
	image_base64: str
	style: str
