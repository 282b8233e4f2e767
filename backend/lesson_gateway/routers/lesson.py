from typing import Any, Optional

from fastapi import APIRouter, Depends

from ..services.lesson import LessonService
from .deps import CamelRequest, get_lesson_service

router = APIRouter(prefix="/api/lesson", tags=["lesson"])


class LessonRequest(CamelRequest):
	topic: Optional[str] = None
	# Validated by the service so that "7th" or "" behave like the rest of the API
	grade: Any = None
	language: Optional[str] = None


@router.post("")
async def create_lesson(req: LessonRequest, service: LessonService = Depends(get_lesson_service)):
	return await service.get_lesson(req.topic, req.grade, req.language)


@router.get("/stats")
def lesson_stats(service: LessonService = Depends(get_lesson_service)):
	return service.stats()


@router.delete("/cache")
def clear_lesson_cache(service: LessonService = Depends(get_lesson_service)):
	return service.clear_cache()
