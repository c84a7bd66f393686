# ============================================================================
# FILE: audiovault/api/v1/router.py
# ============================================================================
from fastapi import APIRouter
from audiovault.api.v1.endpoints import audio, auth, playlist, user

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(audio.router, prefix="/audio", tags=["audio"])
api_router.include_router(playlist.router, prefix="/playlists", tags=["playlists"])
api_router.include_router(user.router, prefix="/users", tags=["users"])
