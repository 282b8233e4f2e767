from typing import Any, Optional

from fastapi import APIRouter, Depends

from ..services.doubt import DoubtService
from .deps import CamelRequest, get_doubt_service

router = APIRouter(prefix="/api/doubt", tags=["doubt"])


class DoubtRequest(CamelRequest):
	question: Optional[str] = None
	topic: Optional[str] = None
	grade: Any = None
	language: Optional[str] = None


@router.post("")
async def ask_doubt(req: DoubtRequest, service: DoubtService = Depends(get_doubt_service)):
	return await service.answer(req.question, req.grade, req.language, req.topic)


@router.get("/stats")
def doubt_stats(service: DoubtService = Depends(get_doubt_service)):
	return service.stats()


@router.delete("/cache")
def clear_doubt_cache(service: DoubtService = Depends(get_doubt_service)):
	return service.clear_cache()
