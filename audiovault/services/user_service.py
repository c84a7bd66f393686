# ============================================================================
# FILE: audiovault/services/user_service.py
# ============================================================================
from typing import List, Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from audiovault.core.blob_store import LocalBlobStore
from audiovault.core.exceptions import InternalError, NotFoundError, ValidationError
from audiovault.core.policy import Action, Principal, ResourceKind, authorize
from audiovault.core.security import get_password_hash, verify_password
from audiovault.db.models.user import User
from audiovault.schemas.user import UserCreate
from audiovault.services.cascade import CascadingDeleter
import logging

logger = logging.getLogger(__name__)

class UserService:
    """Service layer for user operations"""

    def create_user(
        self,
        db: Session,
        blob_store: LocalBlobStore,
        principal: Principal,
        user_data: UserCreate,
    ) -> User:
        """Create a new account (admin only)"""
        authorize(principal, ResourceKind.USER, Action.CREATE)
        user = self._insert_user(db, user_data.username, user_data.password, user_data.is_admin)

        try:
            blob_store.ensure_user_folder(user.id)
        except OSError as e:
            # Uploads recreate the folder on demand
            logger.warning(f"Could not create folder for user {user.id}: {e}")

        return user

    def _insert_user(self, db: Session, username: str, password: str, is_admin: bool) -> User:
        if self.get_user_by_username(db, username):
            raise ValidationError("Username already exists")

        user = User(
            username=username,
            hashed_password=get_password_hash(password),
            is_admin=is_admin,
        )
        try:
            db.add(user)
            db.commit()
        except IntegrityError as e:
            # Lost a race against another insert of the same username
            db.rollback()
            raise ValidationError("Username already exists") from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error creating user: {e}")
            raise InternalError("Failed to create user") from e

        logger.info(f"User created: {user.username} ({user.id}, admin={user.is_admin})")
        return user

    def ensure_admin(self, db: Session, username: str, password: str) -> User:
        """Seed the first admin account; existing accounts are left untouched"""
        existing = self.get_user_by_username(db, username)
        if existing:
            if not existing.is_admin:
                logger.warning(f"Bootstrap admin '{username}' exists but is not an admin")
            return existing
        return self._insert_user(db, username, password, is_admin=True)

    def get_user(self, db: Session, user_id: str) -> User:
        """Get user by id"""
        user = db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def get_user_by_username(self, db: Session, username: str) -> Optional[User]:
        """Get user by username"""
        return db.query(User).filter(User.username == username).first()

    def list_users(self, db: Session, principal: Principal) -> List[User]:
        """All accounts (admin only)"""
        authorize(principal, ResourceKind.USER, Action.LIST)
        return db.query(User).order_by(User.created_at, User.username).all()

    def authenticate_user(self, db: Session, username: str, password: str) -> Optional[User]:
        """Authenticate user with username and password"""
        user = self.get_user_by_username(db, username)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    def delete_user(
        self,
        db: Session,
        deleter: CascadingDeleter,
        principal: Principal,
        user_id: str,
    ) -> None:
        """Remove an account with everything it owns (admin only, never self)"""
        authorize(principal, ResourceKind.USER, Action.DELETE, target_id=user_id)
        self.get_user(db, user_id)
        deleter.delete_user(db, user_id)

# Create singleton instance
user_service = UserService()
