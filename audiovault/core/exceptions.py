# ============================================================================
# FILE: audiovault/core/exceptions.py
# ============================================================================
from fastapi import status


class AudioVaultError(Exception):
    """Base class for errors surfaced to API callers"""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnauthenticatedError(AudioVaultError):
    """Missing, malformed, expired or forged credential"""
    status_code = status.HTTP_401_UNAUTHORIZED


class UnauthorizedError(AudioVaultError):
    """Identity is valid but the access policy denies the action"""
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AudioVaultError):
    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(AudioVaultError):
    """Malformed input, disallowed media type, duplicate username"""
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(AudioVaultError):
    """State-dependent rule violation, e.g. deleting your own account"""
    status_code = status.HTTP_409_CONFLICT


class InternalError(AudioVaultError):
    """
    Storage or filesystem failure.
    The message stays internal; callers only see an opaque detail.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
