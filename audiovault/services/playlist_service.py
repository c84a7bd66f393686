# ============================================================================
# FILE: audiovault/services/playlist_service.py
# ============================================================================
from typing import List
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from audiovault.core.exceptions import AudioVaultError, InternalError, NotFoundError
from audiovault.core.policy import Action, Principal, ResourceKind, authorize, is_allowed
from audiovault.db.models.audio import AudioFile
from audiovault.db.models.playlist import Playlist, PlaylistItem
from audiovault.schemas.playlist import (
    PlaylistAudioItem,
    PlaylistCreate,
    PlaylistItemAdd,
    PlaylistUpdate,
    PlaylistWithItems,
)
from audiovault.services.cascade import CascadingDeleter
from audiovault.services.positions import PositionAllocator, position_allocator
import logging

logger = logging.getLogger(__name__)

class PlaylistService:
    """Service layer for playlist operations"""

    def __init__(self, allocator: PositionAllocator = position_allocator):
        self.allocator = allocator

    def create_playlist(self, db: Session, principal: Principal, playlist_data: PlaylistCreate) -> Playlist:
        """Create a new playlist owned by the caller"""
        authorize(principal, ResourceKind.PLAYLIST, Action.CREATE)
        playlist = Playlist(name=playlist_data.name, user_id=principal.id)
        try:
            db.add(playlist)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error creating playlist: {e}")
            raise InternalError("Failed to create playlist") from e

        logger.info(f"Playlist created: {playlist.id} for user {principal.id}")
        return playlist

    def list_playlists(self, db: Session, principal: Principal) -> List[Playlist]:
        """Every playlist for admins, otherwise the caller's own; newest first"""
        query = db.query(Playlist)
        if not is_allowed(principal, ResourceKind.PLAYLIST, Action.LIST_ALL):
            authorize(principal, ResourceKind.PLAYLIST, Action.LIST)
            query = query.filter(Playlist.user_id == principal.id)
        return query.order_by(Playlist.created_at.desc()).all()

    def _get(self, db: Session, playlist_id: str) -> Playlist:
        playlist = db.get(Playlist, playlist_id)
        if playlist is None:
            raise NotFoundError("Playlist not found")
        return playlist

    def get_playlist(self, db: Session, principal: Principal, playlist_id: str) -> Playlist:
        """Get a playlist the caller may read (owner or admin)"""
        playlist = self._get(db, playlist_id)
        authorize(principal, ResourceKind.PLAYLIST, Action.READ, owner_id=playlist.user_id)
        return playlist

    def get_playlist_with_items(self, db: Session, principal: Principal, playlist_id: str) -> PlaylistWithItems:
        """Playlist plus its items in position order, joined with audio metadata"""
        playlist = self.get_playlist(db, principal, playlist_id)
        rows = (
            db.query(
                PlaylistItem.id,
                PlaylistItem.audio_id,
                PlaylistItem.position,
                AudioFile.filename,
                AudioFile.mime_type,
            )
            .join(AudioFile, PlaylistItem.audio_id == AudioFile.id)
            .filter(PlaylistItem.playlist_id == playlist_id)
            .order_by(PlaylistItem.position, PlaylistItem.id)
            .all()
        )

        return PlaylistWithItems(
            id=playlist.id,
            name=playlist.name,
            user_id=playlist.user_id,
            created_at=playlist.created_at,
            items=[
                PlaylistAudioItem(
                    id=row.id,
                    audio_id=row.audio_id,
                    position=row.position,
                    filename=row.filename,
                    mime_type=row.mime_type,
                )
                for row in rows
            ],
        )

    def rename_playlist(
        self,
        db: Session,
        principal: Principal,
        playlist_id: str,
        update_data: PlaylistUpdate,
    ) -> Playlist:
        """Rename a playlist (owner only)"""
        playlist = self._get(db, playlist_id)
        authorize(principal, ResourceKind.PLAYLIST, Action.UPDATE, owner_id=playlist.user_id)
        try:
            playlist.name = update_data.name
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error updating playlist: {e}")
            raise InternalError("Failed to update playlist") from e

        logger.info(f"Playlist renamed: {playlist_id}")
        return playlist

    def delete_playlist(
        self,
        db: Session,
        deleter: CascadingDeleter,
        principal: Principal,
        playlist_id: str,
    ) -> None:
        """Delete a playlist and its items (owner or admin)"""
        playlist = self._get(db, playlist_id)
        authorize(principal, ResourceKind.PLAYLIST, Action.DELETE, owner_id=playlist.user_id)
        deleter.delete_playlist(db, playlist_id)

    def add_item(
        self,
        db: Session,
        principal: Principal,
        playlist_id: str,
        item_data: PlaylistItemAdd,
    ) -> PlaylistItem:
        """
        Append (or place) an audio file in a playlist. Owner only.

        Locking the playlist, reading the current maximum position and
        inserting happen in one transaction.
        """
        try:
            playlist = self.allocator.lock_playlist(db, playlist_id)
            authorize(principal, ResourceKind.PLAYLIST_ITEM, Action.ADD, owner_id=playlist.user_id)

            if db.get(AudioFile, item_data.audio_id) is None:
                raise NotFoundError("Audio file not found")

            position = self.allocator.allocate(db, playlist_id, item_data.position)
            item = PlaylistItem(
                playlist_id=playlist_id,
                audio_id=item_data.audio_id,
                position=position,
            )
            db.add(item)
            db.commit()
        except AudioVaultError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error adding item to playlist {playlist_id}: {e}")
            raise InternalError("Failed to add item to playlist") from e

        logger.info(f"Item added to playlist {playlist_id}: {item.audio_id} at {position}")
        return item

    def remove_item(self, db: Session, principal: Principal, playlist_id: str, item_id: str) -> None:
        """Remove one item from a playlist (owner only)"""
        playlist = self._get(db, playlist_id)
        authorize(principal, ResourceKind.PLAYLIST_ITEM, Action.REMOVE, owner_id=playlist.user_id)

        item = db.query(PlaylistItem).filter(
            PlaylistItem.id == item_id,
            PlaylistItem.playlist_id == playlist_id,
        ).first()
        if item is None:
            raise NotFoundError("Item not found in playlist")

        try:
            db.delete(item)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error removing item from playlist: {e}")
            raise InternalError("Failed to remove item from playlist") from e

        logger.info(f"Item removed from playlist {playlist_id}: {item_id}")

# Create singleton instance
playlist_service = PlaylistService()
