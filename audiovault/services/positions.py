# ============================================================================
# FILE: audiovault/services/positions.py
# Ordering keys for playlist items
# ============================================================================
from typing import Optional
from sqlalchemy import func, update
from sqlalchemy.orm import Session
from audiovault.core.exceptions import NotFoundError
from audiovault.db.models.playlist import Playlist, PlaylistItem


class PositionAllocator:
    """
    Assigns playlist item positions.

    `lock_playlist` must be the first statement of the transaction that
    then calls `allocate` and inserts the item. It rewrites the playlist
    row in place, which takes a row lock on PostgreSQL/MySQL and the
    database write lock on SQLite. Two auto-positioned inserts into one
    playlist therefore cannot both read the same maximum, while plain
    readers are never blocked.
    """

    def lock_playlist(self, db: Session, playlist_id: str) -> Playlist:
        locked = db.execute(
            update(Playlist)
            .where(Playlist.id == playlist_id)
            .values(name=Playlist.name)
            .execution_options(synchronize_session=False)
        )
        if locked.rowcount == 0:
            raise NotFoundError("Playlist not found")
        return db.get(Playlist, playlist_id)

    def allocate(self, db: Session, playlist_id: str, requested: Optional[int] = None) -> int:
        """
        Explicit positions are returned as given, even if another item
        already holds them. Otherwise the next slot after the current
        maximum, starting at 1.
        """
        if requested is not None:
            return requested

        max_position = (
            db.query(func.max(PlaylistItem.position))
            .filter(PlaylistItem.playlist_id == playlist_id)
            .scalar()
        )
        return (max_position or 0) + 1


position_allocator = PositionAllocator()
