"""
Tests for playlist operations and position allocation.

Covers:
- explicit positions are stored verbatim (duplicates included)
- automatic positions follow the current maximum, starting at 1
- concurrent automatic inserts never share a position
- owner-only item mutation and owner-or-admin reads
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest
from conftest import principal_for

from audiovault.core.exceptions import NotFoundError, UnauthorizedError
from audiovault.db.models.playlist import PlaylistItem
from audiovault.schemas.playlist import PlaylistCreate, PlaylistItemAdd, PlaylistUpdate
from audiovault.services.playlist_service import playlist_service
from audiovault.services.positions import position_allocator


@pytest.fixture
def owner(factory):
    return factory.user("owner")


@pytest.fixture
def audio(factory, owner):
    return factory.audio(owner)


@pytest.fixture
def playlist(factory, owner):
    return factory.playlist(owner)


class TestPositionAllocator:

    def test_empty_playlist_starts_at_one(self, db, playlist):
        assert position_allocator.allocate(db, playlist.id) == 1

    def test_next_after_maximum(self, db, factory, playlist, audio):
        factory.item(playlist, audio, 3)
        factory.item(playlist, audio, 7)
        assert position_allocator.allocate(db, playlist.id) == 8

    def test_explicit_position_is_returned_verbatim(self, db, factory, playlist, audio):
        factory.item(playlist, audio, 5)
        assert position_allocator.allocate(db, playlist.id, 5) == 5
        assert position_allocator.allocate(db, playlist.id, 0) == 0

    def test_zero_maximum_gives_one(self, db, factory, playlist, audio):
        factory.item(playlist, audio, 0)
        assert position_allocator.allocate(db, playlist.id) == 1

    def test_lock_unknown_playlist(self, db):
        with pytest.raises(NotFoundError):
            position_allocator.lock_playlist(db, "missing")


class TestAddItem:

    def test_auto_positions_append(self, db, owner, playlist, audio):
        principal = principal_for(owner)
        first = playlist_service.add_item(db, principal, playlist.id, PlaylistItemAdd(audio_id=audio.id))
        second = playlist_service.add_item(db, principal, playlist.id, PlaylistItemAdd(audio_id=audio.id))
        assert (first.position, second.position) == (1, 2)

    def test_explicit_duplicate_position_is_kept(self, db, factory, owner, playlist, audio):
        principal = principal_for(owner)
        for _ in range(2):
            playlist_service.add_item(db, principal, playlist.id, PlaylistItemAdd(audio_id=audio.id, position=4))
        assert factory.count(PlaylistItem, PlaylistItem.position == 4) == 2

    def test_unknown_audio(self, db, owner, playlist):
        with pytest.raises(NotFoundError, match="Audio"):
            playlist_service.add_item(db, principal_for(owner), playlist.id, PlaylistItemAdd(audio_id="nope"))

    def test_unknown_playlist(self, db, owner, audio):
        with pytest.raises(NotFoundError, match="Playlist"):
            playlist_service.add_item(db, principal_for(owner), "nope", PlaylistItemAdd(audio_id=audio.id))

    def test_admin_cannot_add_to_other_users_playlist(self, db, factory, playlist, audio):
        admin = factory.user("root", is_admin=True)
        with pytest.raises(UnauthorizedError):
            playlist_service.add_item(db, principal_for(admin), playlist.id, PlaylistItemAdd(audio_id=audio.id))
        assert factory.count(PlaylistItem) == 0

    def test_concurrent_auto_inserts_get_distinct_positions(self, session_factory, owner, playlist, audio):
        principal = principal_for(owner)

        def insert(_):
            with session_factory() as session:
                item = playlist_service.add_item(
                    session, principal, playlist.id, PlaylistItemAdd(audio_id=audio.id)
                )
                return item.position

        with ThreadPoolExecutor(max_workers=8) as pool:
            positions = list(pool.map(insert, range(40)))

        assert sorted(positions) == list(range(1, 41))


class TestRemoveItem:

    def test_owner_removes_item(self, db, factory, owner, playlist, audio):
        item = factory.item(playlist, audio, 1)
        playlist_service.remove_item(db, principal_for(owner), playlist.id, item.id)
        assert factory.count(PlaylistItem) == 0

    def test_item_from_another_playlist(self, db, factory, owner, playlist, audio):
        other = factory.playlist(owner, "other")
        item = factory.item(other, audio, 1)
        with pytest.raises(NotFoundError, match="Item"):
            playlist_service.remove_item(db, principal_for(owner), playlist.id, item.id)

    def test_admin_cannot_remove(self, db, factory, playlist, audio):
        admin = factory.user("root", is_admin=True)
        item = factory.item(playlist, audio, 1)
        with pytest.raises(UnauthorizedError):
            playlist_service.remove_item(db, principal_for(admin), playlist.id, item.id)


class TestReadAndList:

    def test_items_come_back_in_position_order(self, db, factory, owner, playlist, audio):
        other_audio = factory.audio(owner, "b.flac")
        factory.item(playlist, other_audio, 9)
        factory.item(playlist, audio, 2)

        result = playlist_service.get_playlist_with_items(db, principal_for(owner), playlist.id)

        assert [item.position for item in result.items] == [2, 9]
        assert result.items[1].filename == "b.flac"
        assert result.items[0].mime_type == "audio/mpeg"

    def test_admin_reads_other_users_playlist(self, db, factory, playlist):
        admin = factory.user("root", is_admin=True)
        assert playlist_service.get_playlist(db, principal_for(admin), playlist.id).id == playlist.id

    def test_stranger_cannot_read(self, db, factory, playlist):
        stranger = factory.user("eve")
        with pytest.raises(UnauthorizedError):
            playlist_service.get_playlist(db, principal_for(stranger), playlist.id)

    def test_list_newest_first_and_scoped(self, db, factory, owner):
        now = datetime.now(timezone.utc)
        older = factory.playlist(owner, "older", created_at=now - timedelta(days=1))
        newer = factory.playlist(owner, "newer", created_at=now)
        factory.playlist(factory.user("eve"), "not mine", created_at=now)

        result = playlist_service.list_playlists(db, principal_for(owner))

        assert [p.id for p in result] == [newer.id, older.id]

    def test_admin_lists_everything(self, db, factory, owner):
        factory.playlist(owner, "mine")
        factory.playlist(factory.user("eve"), "hers")
        admin = factory.user("root", is_admin=True)
        assert len(playlist_service.list_playlists(db, principal_for(admin))) == 2


class TestMutations:

    def test_create_sets_owner(self, db, owner):
        playlist = playlist_service.create_playlist(db, principal_for(owner), PlaylistCreate(name="road trip"))
        assert playlist.user_id == owner.id
        assert playlist.created_at is not None

    def test_rename_owner_only(self, db, factory, owner, playlist):
        renamed = playlist_service.rename_playlist(db, principal_for(owner), playlist.id, PlaylistUpdate(name="new"))
        assert renamed.name == "new"

        admin = factory.user("root", is_admin=True)
        with pytest.raises(UnauthorizedError):
            playlist_service.rename_playlist(db, principal_for(admin), playlist.id, PlaylistUpdate(name="x"))
