# ============================================================================
# FILE: audiovault/services/audio_service.py
# ============================================================================
import os
import uuid
from pathlib import Path
from typing import BinaryIO, Iterable, List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from audiovault.config import AUDIO_MIME_TYPES
from audiovault.core.blob_store import LocalBlobStore
from audiovault.core.exceptions import InternalError, NotFoundError, ValidationError
from audiovault.core.policy import Action, Principal, ResourceKind, authorize
from audiovault.db.models.audio import AudioFile
from audiovault.services.cascade import CascadingDeleter
import logging

logger = logging.getLogger(__name__)


def normalize_mime_type(content_type: Optional[str]) -> Optional[str]:
    """Strip parameters and case: 'Audio/MPEG; rate=44100' -> 'audio/mpeg'"""
    if not content_type:
        return None
    essence = content_type.split(";", 1)[0].strip().lower()
    return essence or None


def validate_mime_type(content_type: Optional[str], allowed: Iterable[str] = AUDIO_MIME_TYPES) -> str:
    """Return the normalized media type or raise ValidationError"""
    mime_type = normalize_mime_type(content_type)
    if mime_type is None:
        raise ValidationError("No content type specified")
    allowed_types = [normalize_mime_type(t) for t in allowed]
    if mime_type not in allowed_types:
        raise ValidationError(f"Invalid audio format (allowed: {', '.join(allowed_types)})")
    return mime_type


def safe_filename(filename: Optional[str]) -> str:
    """Base name only, so the blob path stays inside the owner folder"""
    name = os.path.basename((filename or "").replace("\\", "/")).strip()
    if name in ("", ".", ".."):
        return f"unknown_{uuid.uuid4()}.mp3"
    return name


class AudioService:
    """Service layer for audio file operations"""

    def upload_audio(
        self,
        db: Session,
        blob_store: LocalBlobStore,
        principal: Principal,
        filename: Optional[str],
        content_type: Optional[str],
        source: BinaryIO,
        allowed_mime_types: Iterable[str] = AUDIO_MIME_TYPES,
    ) -> AudioFile:
        """
        Store an uploaded file for the caller.

        The media type is checked before anything is written. The blob is
        written before the row is inserted; if the insert fails the blob is
        removed again so no half-created upload survives.
        """
        authorize(principal, ResourceKind.AUDIO_FILE, Action.CREATE)
        mime_type = validate_mime_type(content_type, allowed_mime_types)
        name = safe_filename(filename)
        audio_id = str(uuid.uuid4())

        try:
            path = blob_store.save(principal.id, audio_id, name, source)
        except OSError as e:
            logger.error(f"Error writing blob for upload {audio_id}: {e}")
            raise InternalError("Failed to store audio file") from e

        audio = AudioFile(
            id=audio_id,
            filename=name,
            user_id=principal.id,
            mime_type=mime_type,
            user_folder=str(blob_store.user_folder(principal.id)),
        )
        try:
            db.add(audio)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error saving audio record {audio_id}: {e}")
            self._discard_blob(blob_store, path)
            raise InternalError("Failed to store audio file") from e

        logger.info(f"Audio uploaded: {audio_id} ({name}, {mime_type}) by {principal.id}")
        return audio

    def _discard_blob(self, blob_store: LocalBlobStore, path: Path) -> None:
        try:
            blob_store.remove(path)
        except OSError as e:
            logger.warning(f"Could not remove orphaned blob {path}: {e}")

    def get_audio(self, db: Session, principal: Principal, audio_id: str) -> AudioFile:
        """Fetch one audio record the caller may read"""
        audio = db.get(AudioFile, audio_id)
        if audio is None:
            raise NotFoundError("Audio not found")
        authorize(principal, ResourceKind.AUDIO_FILE, Action.READ, owner_id=audio.user_id)
        return audio

    def blob_path(self, blob_store: LocalBlobStore, audio: AudioFile) -> Path:
        """
        Location of the stored blob.

        Raises:
            InternalError: the row exists but its blob is missing
        """
        path = blob_store.blob_path(audio.user_folder, audio.id, audio.filename)
        if not blob_store.exists(path):
            logger.error(f"Blob missing for audio {audio.id}: {path}")
            raise InternalError("Audio file is missing from storage")
        return path

    def list_user_audio(self, db: Session, principal: Principal, user_id: str) -> List[AudioFile]:
        """Audio owned by `user_id`, newest first"""
        authorize(principal, ResourceKind.AUDIO_FILE, Action.LIST, owner_id=user_id)
        return (
            db.query(AudioFile)
            .filter(AudioFile.user_id == user_id)
            .order_by(AudioFile.created_at.desc())
            .all()
        )

    def delete_audio(
        self,
        db: Session,
        deleter: CascadingDeleter,
        principal: Principal,
        audio_id: str,
    ) -> None:
        audio = db.get(AudioFile, audio_id)
        if audio is None:
            raise NotFoundError("Audio not found")
        authorize(principal, ResourceKind.AUDIO_FILE, Action.DELETE, owner_id=audio.user_id)
        deleter.delete_audio(db, audio)

# Create singleton instance
audio_service = AudioService()
