# ============================================================================
# FILE: audiovault/core/security.py
# Bearer token issue/validation and password hashing
# ============================================================================
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, ExpiredSignatureError, jwt
from passlib.context import CryptContext
from audiovault.core.exceptions import UnauthenticatedError
import logging

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

DEFAULT_ALGORITHM = "HS256"
DEFAULT_EXPIRE = timedelta(days=1)


@dataclass(frozen=True)
class Claims:
    """Verified token payload. Lives for one request only."""
    subject: str
    expires_at: datetime


def get_password_hash(password: str) -> str:
    """Salted hash of a plain password"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against a stored hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Stored value is not a hash this context recognizes
        logger.warning("Stored credential has an unrecognized hash format")
        return False


def create_access_token(
    subject: str,
    secret_key: str,
    algorithm: str = DEFAULT_ALGORITHM,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Issue a signed token carrying `sub` and `exp`"""
    expire = datetime.now(timezone.utc) + (expires_delta or DEFAULT_EXPIRE)
    to_encode = {"sub": subject, "exp": expire}
    return jwt.encode(to_encode, secret_key, algorithm=algorithm)


def decode_access_token(
    token: Optional[str],
    secret_key: str,
    algorithm: str = DEFAULT_ALGORITHM,
) -> Claims:
    """
    Verify signature and expiry of a bearer token.

    Args:
        token: Raw token string (without the "Bearer " prefix)
        secret_key: Signing secret
        algorithm: Expected signing algorithm

    Returns:
        Claims with the subject id and expiry instant

    Raises:
        UnauthenticatedError: token missing, malformed, expired or forged
    """
    if not token:
        raise UnauthenticatedError("Authentication required")

    try:
        payload = jwt.decode(
            token,
            secret_key,
            algorithms=[algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except ExpiredSignatureError:
        raise UnauthenticatedError("Token has expired")
    except JWTError:
        raise UnauthenticatedError("Invalid token")

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise UnauthenticatedError("Invalid token")

    return Claims(
        subject=subject,
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
