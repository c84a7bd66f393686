"""Tests for account management and the bootstrap admin."""

import pytest
from conftest import principal_for

from audiovault.core.exceptions import (
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from audiovault.db.models.user import User
from audiovault.schemas.user import UserCreate
from audiovault.services.cascade import CascadingDeleter
from audiovault.services.user_service import user_service


@pytest.fixture
def admin(factory):
    return factory.user("root", is_admin=True)


class TestCreateUser:

    def test_admin_creates_user_with_hashed_password(self, db, blob_store, admin):
        user = user_service.create_user(
            db, blob_store, principal_for(admin), UserCreate(username="bob", password="pw")
        )

        assert user.username == "bob"
        assert not user.is_admin
        assert user.hashed_password != "pw"
        assert blob_store.user_folder(user.id).is_dir()

    def test_duplicate_username(self, db, blob_store, admin):
        with pytest.raises(ValidationError, match="already exists"):
            user_service.create_user(
                db, blob_store, principal_for(admin), UserCreate(username="root", password="pw")
            )

    def test_non_admin_cannot_create(self, db, blob_store, factory):
        bob = factory.user("bob")
        with pytest.raises(UnauthorizedError):
            user_service.create_user(
                db, blob_store, principal_for(bob), UserCreate(username="eve", password="pw")
            )
        assert factory.count(User) == 1


class TestAuthenticate:

    def test_valid_credentials(self, db, factory):
        bob = factory.user("bob", password="hunter2")
        assert user_service.authenticate_user(db, "bob", "hunter2").id == bob.id

    def test_wrong_password_or_unknown_user(self, db, factory):
        factory.user("bob", password="hunter2")
        assert user_service.authenticate_user(db, "bob", "wrong") is None
        assert user_service.authenticate_user(db, "nobody", "hunter2") is None


class TestEnsureAdmin:

    def test_creates_admin_once(self, db):
        first = user_service.ensure_admin(db, "boss", "pw")
        second = user_service.ensure_admin(db, "boss", "other")

        assert first.is_admin
        assert first.id == second.id
        assert db.query(User).filter(User.username == "boss").count() == 1

    def test_existing_non_admin_is_left_alone(self, db, factory):
        factory.user("boss")
        user = user_service.ensure_admin(db, "boss", "pw")
        assert not user.is_admin


class TestListAndDelete:

    def test_list_is_admin_only(self, db, factory, admin):
        bob = factory.user("bob")
        assert {u.username for u in user_service.list_users(db, principal_for(admin))} == {"root", "bob"}
        with pytest.raises(UnauthorizedError):
            user_service.list_users(db, principal_for(bob))

    def test_admin_cannot_delete_self(self, db, blob_store, factory, admin):
        with pytest.raises(ConflictError):
            user_service.delete_user(db, CascadingDeleter(blob_store), principal_for(admin), admin.id)
        assert factory.count(User) == 1

    def test_delete_unknown_user(self, db, blob_store, admin):
        with pytest.raises(NotFoundError):
            user_service.delete_user(db, CascadingDeleter(blob_store), principal_for(admin), "missing")

    def test_non_admin_cannot_delete(self, db, blob_store, factory):
        bob = factory.user("bob")
        eve = factory.user("eve")
        with pytest.raises(UnauthorizedError):
            user_service.delete_user(db, CascadingDeleter(blob_store), principal_for(bob), eve.id)

    def test_admin_deletes_user(self, db, blob_store, factory, admin):
        bob = factory.user("bob")
        factory.audio(bob)

        user_service.delete_user(db, CascadingDeleter(blob_store), principal_for(admin), bob.id)

        assert factory.count(User, User.id == bob.id) == 0
        assert not blob_store.user_folder(bob.id).exists()
