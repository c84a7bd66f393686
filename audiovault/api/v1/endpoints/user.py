# ============================================================================
# FILE: audiovault/api/v1/endpoints/user.py
# ============================================================================
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from audiovault.db.session import get_db
from audiovault.api.dependencies import (
    get_blob_store,
    get_cascading_deleter,
    get_current_principal,
)
from audiovault.core.blob_store import LocalBlobStore
from audiovault.core.policy import Principal
from audiovault.schemas.audio import AudioFileResponse
from audiovault.schemas.user import UserCreate, UserResponse
from audiovault.services.audio_service import audio_service
from audiovault.services.cascade import CascadingDeleter
from audiovault.services.user_service import user_service
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("", response_model=UserResponse)
def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    blob_store: LocalBlobStore = Depends(get_blob_store),
    principal: Principal = Depends(get_current_principal),
):
    """
    Create a new user account
    Admin only
    """
    return user_service.create_user(db, blob_store, principal, user_data)

@router.get("", response_model=List[UserResponse])
def list_users(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    List all users
    Admin only
    """
    return user_service.list_users(db, principal)

@router.get("/me", response_model=UserResponse)
def get_current_user_info(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    Get current user information
    """
    return user_service.get_user(db, principal.id)

@router.get("/{user_id}/audio", response_model=List[AudioFileResponse])
def get_user_audio(
    user_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    List a user's audio files, newest first
    Requires being that user or admin
    """
    return audio_service.list_user_audio(db, principal, user_id)

@router.delete("/{user_id}")
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    deleter: CascadingDeleter = Depends(get_cascading_deleter),
    principal: Principal = Depends(get_current_principal),
):
    """
    Delete a user together with their audio files, playlists and
    every playlist entry pointing at their audio
    Admin only; admins cannot delete themselves
    """
    user_service.delete_user(db, deleter, principal, user_id)
    return {"message": "User deleted"}
