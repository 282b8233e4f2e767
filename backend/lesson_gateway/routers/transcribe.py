from typing import Optional

from fastapi import APIRouter, Depends

from ..services.transcription import TranscriptionService
from .deps import CamelRequest, get_transcription_service

router = APIRouter(prefix="/api/transcribe", tags=["transcribe"])


class TranscribeRequest(CamelRequest):
	audio_data: Optional[str] = None
	language: Optional[str] = None


@router.post("")
async def transcribe(req: TranscribeRequest, service: TranscriptionService = Depends(get_transcription_service)):
	return await service.transcribe(req.audio_data, req.language)
