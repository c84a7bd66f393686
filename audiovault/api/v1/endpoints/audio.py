# ============================================================================
# FILE: audiovault/api/v1/endpoints/audio.py
# ============================================================================
from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session
from audiovault.db.session import get_db
from audiovault.config import Settings, get_settings
from audiovault.api.dependencies import (
    get_blob_store,
    get_cascading_deleter,
    get_current_principal,
)
from audiovault.core.blob_store import LocalBlobStore
from audiovault.core.policy import Principal
from audiovault.schemas.audio import AudioFileResponse
from audiovault.services.audio_service import audio_service
from audiovault.services.cascade import CascadingDeleter
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("", response_model=AudioFileResponse)
def upload_audio(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    blob_store: LocalBlobStore = Depends(get_blob_store),
    settings: Settings = Depends(get_settings),
    principal: Principal = Depends(get_current_principal),
):
    """
    Upload an audio file (MP3/WAV/FLAC/AAC/OGG by default)
    The caller becomes its owner
    """
    return audio_service.upload_audio(
        db, blob_store, principal, file.filename, file.content_type, file.file,
        allowed_mime_types=settings.ALLOWED_MIME_TYPES,
    )

@router.get("/{audio_id}")
def stream_audio(
    audio_id: str,
    db: Session = Depends(get_db),
    blob_store: LocalBlobStore = Depends(get_blob_store),
    principal: Principal = Depends(get_current_principal),
):
    """
    Stream an audio file
    Requires ownership or admin
    """
    audio = audio_service.get_audio(db, principal, audio_id)
    path = audio_service.blob_path(blob_store, audio)
    return FileResponse(path, media_type=audio.mime_type)

@router.delete("/{audio_id}")
def delete_audio(
    audio_id: str,
    db: Session = Depends(get_db),
    deleter: CascadingDeleter = Depends(get_cascading_deleter),
    principal: Principal = Depends(get_current_principal),
):
    """
    Delete an audio file and remove it from every playlist
    Requires ownership or admin
    """
    audio_service.delete_audio(db, deleter, principal, audio_id)
    return {"message": "Audio deleted"}
