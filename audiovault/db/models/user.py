# ============================================================================
# FILE: audiovault/db/models/user.py
# ============================================================================
import uuid
from sqlalchemy import Boolean, Column, DateTime, String
from datetime import datetime, timezone
from audiovault.db.base import Base


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Account that owns audio files and playlists"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    username = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
