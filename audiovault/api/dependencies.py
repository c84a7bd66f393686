# ============================================================================
# FILE: audiovault/api/dependencies.py
# ============================================================================
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from audiovault.config import Settings, get_settings
from audiovault.core.blob_store import LocalBlobStore
from audiovault.core.exceptions import UnauthenticatedError
from audiovault.core.policy import Principal
from audiovault.core.security import decode_access_token
from audiovault.db.models.user import User
from audiovault.db.session import get_db
from audiovault.services.cascade import CascadingDeleter
from typing import Optional

bearer_scheme = HTTPBearer(auto_error=False)

def get_blob_store(settings: Settings = Depends(get_settings)) -> LocalBlobStore:
    """Blob store rooted at the configured upload folder"""
    return LocalBlobStore(settings.UPLOAD_ROOT)

def get_cascading_deleter(blob_store: LocalBlobStore = Depends(get_blob_store)) -> CascadingDeleter:
    return CascadingDeleter(blob_store)

def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Principal:
    """
    Resolve the caller from the `Authorization: Bearer` header.
    Raises Unauthenticated before any resource is looked up when the
    header is missing or the token does not verify.
    """
    token = credentials.credentials if credentials else None
    claims = decode_access_token(token, settings.SECRET_KEY, settings.ALGORITHM)

    # Admin flag is read fresh on every request
    user = db.get(User, claims.subject)
    if user is None:
        raise UnauthenticatedError("Unknown user")
    principal = Principal(id=user.id, is_admin=user.is_admin)

    # End the lookup transaction so the endpoint starts a fresh one
    db.rollback()
    return principal
