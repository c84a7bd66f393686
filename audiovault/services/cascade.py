# ============================================================================
# FILE: audiovault/services/cascade.py
# Multi-table deletes as explicit units of work
# ============================================================================
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Executable
from audiovault.core.blob_store import LocalBlobStore
from audiovault.core.exceptions import InternalError
from audiovault.db.models.audio import AudioFile
from audiovault.db.models.playlist import Playlist, PlaylistItem
from audiovault.db.models.user import User
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeletionStep:
    """One statement of a deletion plan. Selects keep their rows."""
    name: str
    statement: Executable
    returns_rows: bool = False


@dataclass(frozen=True)
class DeletionPlan:
    """
    Ordered statements that must commit or roll back together.
    Steps are listed in foreign-key dependency order: rows that
    reference others are always removed before what they reference.
    """
    name: str
    steps: Tuple[DeletionStep, ...]

    @property
    def step_names(self) -> List[str]:
        return [step.name for step in self.steps]


@dataclass
class DeletionResult:
    plan: str
    rows: Dict[str, Any] = field(default_factory=dict)
    blobs_removed: int = 0
    cleanup_failures: int = 0


def _delete(model, *criteria) -> Executable:
    return delete(model).where(*criteria).execution_options(synchronize_session=False)


def playlist_deletion_plan(playlist_id: str) -> DeletionPlan:
    return DeletionPlan(
        name="delete playlist",
        steps=(
            DeletionStep("delete_items", _delete(PlaylistItem, PlaylistItem.playlist_id == playlist_id)),
            DeletionStep("delete_playlist", _delete(Playlist, Playlist.id == playlist_id)),
        ),
    )


def audio_deletion_plan(audio_id: str) -> DeletionPlan:
    return DeletionPlan(
        name="delete audio file",
        steps=(
            DeletionStep("delete_items", _delete(PlaylistItem, PlaylistItem.audio_id == audio_id)),
            DeletionStep("delete_audio", _delete(AudioFile, AudioFile.id == audio_id)),
        ),
    )


def user_deletion_plan(user_id: str) -> DeletionPlan:
    """
    Seven steps: the user's audio (and every item pointing at it, even in
    other users' playlists), then the user's playlists and their items,
    then the user row.
    """
    user_audio_ids = select(AudioFile.id).where(AudioFile.user_id == user_id)
    user_playlist_ids = select(Playlist.id).where(Playlist.user_id == user_id)

    return DeletionPlan(
        name="delete user",
        steps=(
            DeletionStep(
                "select_audio",
                select(AudioFile.id, AudioFile.user_folder, AudioFile.filename)
                .where(AudioFile.user_id == user_id),
                returns_rows=True,
            ),
            DeletionStep(
                "delete_items_referencing_audio",
                _delete(PlaylistItem, PlaylistItem.audio_id.in_(user_audio_ids)),
            ),
            DeletionStep("delete_audio", _delete(AudioFile, AudioFile.user_id == user_id)),
            DeletionStep("select_playlists", user_playlist_ids, returns_rows=True),
            DeletionStep(
                "delete_playlist_items",
                _delete(PlaylistItem, PlaylistItem.playlist_id.in_(user_playlist_ids)),
            ),
            DeletionStep("delete_playlists", _delete(Playlist, Playlist.user_id == user_id)),
            DeletionStep("delete_user", _delete(User, User.id == user_id)),
        ),
    )


class CascadingDeleter:
    """Runs deletion plans in one transaction, then sweeps blobs best-effort"""

    def __init__(self, blob_store: LocalBlobStore):
        self.blob_store = blob_store

    def execute(self, db: Session, plan: DeletionPlan) -> DeletionResult:
        """
        Execute every step of `plan` and commit once.

        Raises:
            InternalError: any statement failed; nothing was committed
        """
        result = DeletionResult(plan=plan.name)
        try:
            for step in plan.steps:
                outcome = db.execute(step.statement)
                if step.returns_rows:
                    result.rows[step.name] = outcome.all()
                else:
                    result.rows[step.name] = outcome.rowcount
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"{plan.name} rolled back: {e}")
            raise InternalError(f"Failed to {plan.name}") from e
        return result

    def delete_playlist(self, db: Session, playlist_id: str) -> DeletionResult:
        result = self.execute(db, playlist_deletion_plan(playlist_id))
        logger.info(
            f"Playlist deleted: {playlist_id} "
            f"({result.rows['delete_items']} items)"
        )
        return result

    def delete_audio(self, db: Session, audio: AudioFile) -> DeletionResult:
        """Row first; the blob is only removed once the row is gone"""
        path = self.blob_store.blob_path(audio.user_folder, audio.id, audio.filename)
        result = self.execute(db, audio_deletion_plan(audio.id))
        logger.info(
            f"Audio deleted: {audio.id} "
            f"({result.rows['delete_items']} playlist items)"
        )
        self._sweep(result, [path])
        return result

    def delete_user(self, db: Session, user_id: str) -> DeletionResult:
        result = self.execute(db, user_deletion_plan(user_id))
        audio_rows = result.rows["select_audio"]
        logger.info(
            f"User deleted: {user_id} ({len(audio_rows)} audio files, "
            f"{len(result.rows['select_playlists'])} playlists)"
        )
        paths = [
            self.blob_store.blob_path(row.user_folder, row.id, row.filename)
            for row in audio_rows
        ]
        self._sweep(result, paths, user_id=user_id)
        return result

    def _sweep(self, result: DeletionResult, paths: List[Path], user_id: Optional[str] = None) -> None:
        # Database already committed; filesystem errors are only logged
        for path in paths:
            try:
                if self.blob_store.remove(path):
                    result.blobs_removed += 1
            except OSError as e:
                result.cleanup_failures += 1
                logger.warning(f"Could not remove blob {path}: {e}")

        if user_id is not None:
            try:
                self.blob_store.remove_user_folder(user_id)
            except OSError as e:
                result.cleanup_failures += 1
                logger.warning(f"Could not remove folder for user {user_id}: {e}")
