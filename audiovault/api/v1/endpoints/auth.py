# ============================================================================
# FILE: audiovault/api/v1/endpoints/auth.py
# ============================================================================
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from datetime import timedelta
from audiovault.db.session import get_db
from audiovault.config import Settings, get_settings
from audiovault.core.exceptions import UnauthenticatedError
from audiovault.core.security import create_access_token
from audiovault.schemas.user import UserLogin, Token
from audiovault.services.user_service import user_service
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/login", response_model=Token)
def login(
    credentials: UserLogin,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Login with username and password
    Returns a signed bearer token
    """
    user = user_service.authenticate_user(db, credentials.username, credentials.password)
    if not user:
        logger.info(f"Failed login for '{credentials.username}'")
        raise UnauthenticatedError("Invalid credentials")

    access_token = create_access_token(
        user.id,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    return {"access_token": access_token, "token_type": "bearer"}
