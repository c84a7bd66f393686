"""Shared fixtures: a file-backed SQLite database and upload root per test."""

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from audiovault.api.dependencies import get_blob_store
from audiovault.config import Settings, get_settings
from audiovault.core.blob_store import LocalBlobStore
from audiovault.core.policy import Principal
from audiovault.core.security import create_access_token, get_password_hash
from audiovault.db.base import Base, import_models
from audiovault.db.models.audio import AudioFile
from audiovault.db.models.playlist import Playlist, PlaylistItem
from audiovault.db.models.user import User
from audiovault.db.session import build_engine, build_sessionmaker, get_db
from audiovault.main import app

TEST_SECRET = "test-secret-key"


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        UPLOAD_ROOT=str(tmp_path / "uploads"),
        SECRET_KEY=TEST_SECRET,
    )


@pytest.fixture
def engine(test_settings):
    engine = build_engine(test_settings.DATABASE_URL)
    import_models()
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return build_sessionmaker(engine)


@pytest.fixture
def db(session_factory) -> Generator[Session, None, None]:
    """Session for service-level tests. Do not mix with `client`."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def blob_store(test_settings) -> LocalBlobStore:
    return LocalBlobStore(test_settings.UPLOAD_ROOT)


@pytest.fixture
def client(session_factory, test_settings, blob_store) -> Generator[TestClient, None, None]:
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


class Factory:
    """
    Creates rows in short-lived sessions so no transaction (and, on
    SQLite, no write lock) is left open between API calls.
    """

    def __init__(self, session_factory: sessionmaker, blob_store: LocalBlobStore):
        self.session_factory = session_factory
        self.blob_store = blob_store

    def _add(self, obj):
        with self.session_factory() as session:
            session.add(obj)
            session.commit()
        return obj

    def user(self, username: str, password: str = "secret", is_admin: bool = False) -> User:
        return self._add(User(
            username=username,
            hashed_password=get_password_hash(password),
            is_admin=is_admin,
        ))

    def audio(self, owner: User, filename: str = "song.mp3", content: bytes = b"ID3data", **kwargs) -> AudioFile:
        audio = AudioFile(
            filename=filename,
            user_id=owner.id,
            mime_type="audio/mpeg",
            user_folder=str(self.blob_store.user_folder(owner.id)),
            **kwargs,
        )
        self._add(audio)
        folder = self.blob_store.ensure_user_folder(owner.id)
        self.blob_store.blob_path(folder, audio.id, audio.filename).write_bytes(content)
        return audio

    def playlist(self, owner: User, name: str = "mix", **kwargs) -> Playlist:
        return self._add(Playlist(name=name, user_id=owner.id, **kwargs))

    def item(self, playlist: Playlist, audio: AudioFile, position: int) -> PlaylistItem:
        return self._add(PlaylistItem(playlist_id=playlist.id, audio_id=audio.id, position=position))

    def count(self, model, *criteria) -> int:
        with self.session_factory() as session:
            return session.query(model).filter(*criteria).count()


@pytest.fixture
def factory(session_factory, blob_store) -> Factory:
    return Factory(session_factory, blob_store)


def principal_for(user: User) -> Principal:
    return Principal(id=user.id, is_admin=user.is_admin)


def auth_headers(user: User) -> dict:
    token = create_access_token(user.id, TEST_SECRET)
    return {"Authorization": f"Bearer {token}"}
