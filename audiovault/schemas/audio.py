# ============================================================================
# FILE: audiovault/schemas/audio.py
# ============================================================================
from pydantic import BaseModel
from datetime import datetime

class AudioFileResponse(BaseModel):
    """Schema for audio file metadata"""
    id: str
    filename: str
    user_id: str
    created_at: datetime
    mime_type: str

    class Config:
        from_attributes = True
