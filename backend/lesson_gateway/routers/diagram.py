from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from ..services.diagram import DiagramService
from .deps import CamelRequest, get_diagram_service

router = APIRouter(prefix="/api/diagram", tags=["diagram"])


class DiagramRequest(CamelRequest):
	topic: Optional[str] = None
	grade: Any = None
	language: Optional[str] = None
	style: Optional[str] = None


@router.post("")
async def create_diagram(req: DiagramRequest, service: DiagramService = Depends(get_diagram_service)):
	return await service.get_diagram(req.topic, req.grade, req.language, req.style)


@router.get("/styles")
def diagram_styles(service: DiagramService = Depends(get_diagram_service)):
	return service.styles()


@router.get("/stats")
def diagram_stats(service: DiagramService = Depends(get_diagram_service)):
	return service.stats()


@router.delete("/cache")
def clear_diagram_cache(
	key: Optional[str] = Query(default=None, description="Remove only this cache key"),
	service: DiagramService = Depends(get_diagram_service),
):
	return service.clear_cache(key)
