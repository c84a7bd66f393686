# ============================================================================
# FILE: audiovault/api/v1/endpoints/playlist.py
# ============================================================================
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from audiovault.db.session import get_db
from audiovault.api.dependencies import get_cascading_deleter, get_current_principal
from audiovault.core.policy import Principal
from audiovault.schemas.playlist import (
    PlaylistCreate,
    PlaylistUpdate,
    PlaylistResponse,
    PlaylistWithItems,
    PlaylistItemAdd,
    PlaylistItemResponse,
)
from audiovault.services.cascade import CascadingDeleter
from audiovault.services.playlist_service import playlist_service
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("", response_model=PlaylistResponse)
def create_playlist(
    playlist_data: PlaylistCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    Create a new playlist owned by the caller
    """
    return playlist_service.create_playlist(db, principal, playlist_data)

@router.get("", response_model=List[PlaylistResponse])
def list_playlists(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    List playlists, newest first
    Admins see every playlist, other users their own
    """
    return playlist_service.list_playlists(db, principal)

@router.get("/{playlist_id}", response_model=PlaylistWithItems)
def get_playlist(
    playlist_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    Get a playlist with its items in position order
    Requires ownership or admin
    """
    return playlist_service.get_playlist_with_items(db, principal, playlist_id)

@router.put("/{playlist_id}", response_model=PlaylistResponse)
def rename_playlist(
    playlist_id: str,
    update_data: PlaylistUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    Rename a playlist
    Requires ownership
    """
    return playlist_service.rename_playlist(db, principal, playlist_id, update_data)

@router.delete("/{playlist_id}")
def delete_playlist(
    playlist_id: str,
    db: Session = Depends(get_db),
    deleter: CascadingDeleter = Depends(get_cascading_deleter),
    principal: Principal = Depends(get_current_principal),
):
    """
    Delete a playlist and all of its items
    Requires ownership or admin
    """
    playlist_service.delete_playlist(db, deleter, principal, playlist_id)
    return {"message": "Playlist deleted"}

@router.post("/{playlist_id}/items", response_model=PlaylistItemResponse)
def add_to_playlist(
    playlist_id: str,
    item_data: PlaylistItemAdd,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    Add an audio file to a playlist
    Without a position the item goes after the current last one
    Requires ownership (admins cannot edit other users' playlists)
    """
    return playlist_service.add_item(db, principal, playlist_id, item_data)

@router.delete("/{playlist_id}/items/{item_id}")
def remove_from_playlist(
    playlist_id: str,
    item_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    Remove an item from a playlist
    Requires ownership
    """
    playlist_service.remove_item(db, principal, playlist_id, item_id)
    return {"message": "Item removed from playlist"}
