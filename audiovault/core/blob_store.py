# ============================================================================
# FILE: audiovault/core/blob_store.py
# Local filesystem persistence for uploaded audio
# ============================================================================
import os
import shutil
from pathlib import Path
from typing import BinaryIO, Union
import logging

logger = logging.getLogger(__name__)


class LocalBlobStore:
    """
    Stores blobs as `{upload_root}/{user_id}/{resource_id}_{filename}`.
    The path is rebuilt from stored fields on every read/delete, so
    ids and filenames must be persisted verbatim.
    """

    def __init__(self, upload_root: Union[str, Path]):
        self.upload_root = Path(upload_root)

    def user_folder(self, user_id: str) -> Path:
        return self.upload_root / user_id

    def ensure_user_folder(self, user_id: str) -> Path:
        """Create the owner folder if it does not exist yet"""
        folder = self.user_folder(user_id)
        folder.mkdir(parents=True, exist_ok=True)
        return folder

    @staticmethod
    def blob_path(user_folder: Union[str, Path], resource_id: str, filename: str) -> Path:
        return Path(user_folder) / f"{resource_id}_{filename}"

    def save(self, user_id: str, resource_id: str, filename: str, source: BinaryIO) -> Path:
        """
        Stream `source` to the blob location for a new resource.

        Raises:
            OSError: the folder or file could not be written
        """
        folder = self.ensure_user_folder(user_id)
        path = self.blob_path(folder, resource_id, filename)
        with open(path, "wb") as out:
            shutil.copyfileobj(source, out)
        logger.debug(f"Blob written: {path}")
        return path

    def exists(self, path: Union[str, Path]) -> bool:
        return Path(path).is_file()

    def remove(self, path: Union[str, Path]) -> bool:
        """
        Remove one blob. Returns False when it was already gone.

        Raises:
            OSError: any failure other than the file being absent
        """
        try:
            os.remove(path)
        except FileNotFoundError:
            return False
        logger.debug(f"Blob removed: {path}")
        return True

    def remove_user_folder(self, user_id: str) -> bool:
        """Remove an owner folder and anything left in it"""
        folder = self.user_folder(user_id)
        if not folder.exists():
            return False
        shutil.rmtree(folder)
        logger.debug(f"User folder removed: {folder}")
        return True
