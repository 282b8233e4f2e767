from typing import Optional

from fastapi import APIRouter, Depends

from ..context import GatewayContext
from ..services.narration import NarrationService
from .deps import CamelRequest, get_context, get_narration_service

router = APIRouter(prefix="/api/audio", tags=["audio"])


class AudioRequest(CamelRequest):
	text: Optional[str] = None
	language: Optional[str] = None
	voice_id: Optional[str] = None


@router.post("")
async def synthesize(req: AudioRequest, service: NarrationService = Depends(get_narration_service)):
	return await service.synthesize(req.text, req.language, req.voice_id)


@router.get("/stats")
def audio_stats(ctx: GatewayContext = Depends(get_context)):
	return {"audio": ctx.standalone_audio.counters.snapshot(), "cachedEntries": ctx.standalone_audio.store.keys()}


@router.delete("/cache")
def clear_audio_cache(ctx: GatewayContext = Depends(get_context)):
	cleared = ctx.standalone_audio.store.flush()
	return {"message": "Audio cache cleared", "cleared": {"audio": cleared}}
