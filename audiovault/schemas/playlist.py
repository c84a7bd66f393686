# ============================================================================
# FILE: audiovault/schemas/playlist.py
# ============================================================================
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

class PlaylistCreate(BaseModel):
    """Schema for creating a playlist"""
    name: str = Field(..., min_length=1)

class PlaylistUpdate(BaseModel):
    """Schema for renaming a playlist"""
    name: str = Field(..., min_length=1)

class PlaylistItemAdd(BaseModel):
    """Schema for adding an audio file to a playlist"""
    audio_id: str
    position: Optional[int] = Field(None, ge=0)

class PlaylistItemResponse(BaseModel):
    """Schema for a stored playlist item"""
    id: str
    playlist_id: str
    audio_id: str
    position: int

    class Config:
        from_attributes = True

class PlaylistAudioItem(BaseModel):
    """Playlist item joined with its audio metadata"""
    id: str
    audio_id: str
    position: int
    filename: str
    mime_type: str

class PlaylistResponse(BaseModel):
    """Schema for playlist response"""
    id: str
    name: str
    user_id: str
    created_at: datetime

    class Config:
        from_attributes = True

class PlaylistWithItems(PlaylistResponse):
    """Playlist with its items in position order"""
    items: List[PlaylistAudioItem] = []
