import pytest

from artist_organizer.config import CATEGORY_PREFIX, DATA_PLAYLIST_PREFIX
from artist_organizer.core.errors import RemoteError


async def test_list_by_prefix_filters_name_and_owner(fake, registry):
    mine = fake.add_playlist(f"{CATEGORY_PREFIX}Rock")
    fake.add_playlist(f"{CATEGORY_PREFIX}Jazz", owner="someone-else")
    fake.add_playlist("Road trip")
    data = fake.add_playlist(DATA_PLAYLIST_PREFIX)

    categories = await registry.list_by_prefix(CATEGORY_PREFIX, "owner")
    data_playlists = await registry.list_by_prefix(DATA_PLAYLIST_PREFIX, "owner")

    assert [p.id for p in categories] == [mine]
    assert [p.id for p in data_playlists] == [data]


async def test_create_category_playlist_is_private_with_description(fake, registry):
    playlist = await registry.create_category_playlist("owner", "Post-punk")

    stored = fake.playlists[playlist.id]
    assert stored["name"] == f"{CATEGORY_PREFIX}Post-punk"
    assert stored["public"] is False
    assert stored["description"] == 'Artists categorized as "Post-punk" - managed by Artist Organizer'
    assert playlist.owner_id == "owner"


async def test_get_category_playlists_maps_names_to_ids(fake, registry):
    rock = fake.add_playlist(f"{CATEGORY_PREFIX}Rock")
    fake.add_playlist(f"{CATEGORY_PREFIX}Ignored", owner="stranger")

    assert await registry.get_category_playlists("owner") == {"Rock": rock}


async def test_delete_is_idempotent(fake, registry):
    playlist_id = fake.add_playlist("temp")

    assert await registry.delete(playlist_id) is True
    assert await registry.delete(playlist_id) is False
    assert playlist_id not in fake.playlists


async def test_delete_category_playlist_without_id_does_nothing(fake, registry):
    await registry.delete_category_playlist("")

    assert fake.calls == []


async def test_get_details_returns_untruncated_description(fake, registry):
    fake.listing_description_limit = 5
    playlist_id = fake.add_playlist("notes", description="a long description")

    listed = (await registry.list_playlists())[0]
    detail = await registry.get_details(playlist_id)

    assert listed.description == "a lon"
    assert detail.description == "a long description"


async def test_create_for_another_user_raises_remote_error(registry):
    with pytest.raises(RemoteError) as excinfo:
        await registry.create("not-me", "x", "y")

    assert excinfo.value.status_code == 403


async def test_followed_artists_and_current_user(fake, registry):
    fake.follow("a1", "a2", "a3", "a4", "a5")

    assert (await registry.current_user())["id"] == "owner"
    assert [a["id"] for a in await registry.followed_artists()] == ["a1", "a2", "a3", "a4", "a5"]
