from fastapi import Depends, Request
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..context import GatewayContext
from ..services.diagram import DiagramService
from ..services.doubt import DoubtService
from ..services.lesson import LessonService
from ..services.narration import NarrationService
from ..services.transcription import TranscriptionService


class CamelRequest(BaseModel):
	# Bodies arrive as camelCase JSON; snake_case is accepted too
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def get_context(request: Request) -> GatewayContext:
	return request.app.state.context


def get_lesson_service(ctx: GatewayContext = Depends(get_context)) -> LessonService:
	return LessonService(ctx)


def get_doubt_service(ctx: GatewayContext = Depends(get_context)) -> DoubtService:
	return DoubtService(ctx)


def get_narration_service(ctx: GatewayContext = Depends(get_context)) -> NarrationService:
	return NarrationService(ctx)


def get_diagram_service(ctx: GatewayContext = Depends(get_context)) -> DiagramService:
	return DiagramService(ctx)


def get_transcription_service(ctx: GatewayContext = Depends(get_context)) -> TranscriptionService:
	return TranscriptionService(ctx)
