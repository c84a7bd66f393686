# ============================================================================
# FILE: audiovault/db/models/playlist.py
# ============================================================================
from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String
from audiovault.db.base import Base
from audiovault.db.models.user import new_id, utcnow


class Playlist(Base):
    """Playlist model for user-created playlists"""
    __tablename__ = "playlists"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_playlists_user_created", "user_id", "created_at"),
    )


class PlaylistItem(Base):
    """Ordered membership of an audio file in a playlist"""
    __tablename__ = "playlist_items"

    id = Column(String(36), primary_key=True, default=new_id)
    playlist_id = Column(String(36), ForeignKey("playlists.id"), nullable=False)
    audio_id = Column(String(36), ForeignKey("audio_files.id"), nullable=False)
    # Not unique: explicit positions are stored as given
    position = Column(Integer, nullable=False)

    __table_args__ = (
        Index("ix_playlist_items_playlist_position", "playlist_id", "position"),
        Index("ix_playlist_items_audio", "audio_id"),
    )
