# ============================================================================
# FILE: audiovault/db/models/audio.py
# ============================================================================
from sqlalchemy import Column, DateTime, ForeignKey, Index, String
from audiovault.db.base import Base
from audiovault.db.models.user import new_id, utcnow


class AudioFile(Base):
    """Uploaded audio blob metadata; the blob itself lives in the BlobStore"""
    __tablename__ = "audio_files"

    id = Column(String(36), primary_key=True, default=new_id)
    filename = Column(String, nullable=False)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    mime_type = Column(String, nullable=False)
    user_folder = Column(String, nullable=False)  # owner storage folder

    __table_args__ = (
        Index("ix_audio_files_user_created", "user_id", "created_at"),
    )
