"""Spotify catalog adapter: playlist and track mapping."""

import pytest
import requests
from spotipy.exceptions import SpotifyException

from songguess.adapters.spotify.catalog_adapter import SpotifyCatalogAdapter, track_from_api
from songguess.domain.errors import CatalogError

YESTERDAY = {
    "id": "3BQHpFgAp4l80e1XslIjNI",
    "name": "Yesterday",
    "type": "track",
    "uri": "spotify:track:3BQHpFgAp4l80e1XslIjNI",
    "artists": [{"id": "3WrFJ7ztbogyGnTHbHJFl2", "name": "The Beatles"}],
    "album": {
        "id": "0PT5m6hwPRrpBwIHVnvbFX",
        "name": "Help!",
        "images": [{"url": "https://cdn.example/help.jpg"}],
    },
    "preview_url": "https://p.scdn.example/yesterday.mp3",
}


class FakeSpotify:
    def __init__(self, fail=None):
        self.fail = fail
        self.calls = []

    def current_user_playlists(self, limit: int, offset: int):
        self.calls.append(("playlists", offset))
        if self.fail:
            raise self.fail
        if offset == 0:
            items = [{"id": f"p{i}", "name": f"List {i}", "tracks": {"total": i}, "images": []} for i in range(50)]
            return {"items": items, "total": 51}
        return {"items": [{"id": "p50", "name": "Last", "tracks": {"total": 1}, "images": None}], "total": 51}

    def playlist_items(self, playlist_id: str, limit: int, offset: int):
        self.calls.append(("items", offset))
        if self.fail:
            raise self.fail
        return {
            "total": 4,
            "items": [
                {"track": YESTERDAY},
                {"track": None},
                {"track": {"id": None, "name": "local file"}},
                {"track": {"id": "ep1", "name": "Podcast", "type": "episode"}},
            ],
        }

    def track(self, track_id: str):
        if self.fail:
            raise self.fail
        return dict(YESTERDAY, id=track_id)


def test_track_mapping_keeps_links_and_cover():
    track = track_from_api(YESTERDAY)

    assert track.name == "Yesterday"
    assert track.primary_artist == "The Beatles"
    assert track.cover_url == "https://cdn.example/help.jpg"
    assert track.uri == "spotify:track:3BQHpFgAp4l80e1XslIjNI"
    assert track.external_url.endswith("/track/3BQHpFgAp4l80e1XslIjNI")
    assert track.artist_url.endswith("/artist/3WrFJ7ztbogyGnTHbHJFl2")
    assert track.album_url.endswith("/album/0PT5m6hwPRrpBwIHVnvbFX")


def test_track_mapping_tolerates_missing_album():
    track = track_from_api({"id": "x", "name": "Bare", "artists": []})

    assert track.cover_url == ""
    assert track.primary_artist == ""
    assert track.uri == "spotify:track:x"


def test_playlists_are_paginated():
    sp = FakeSpotify()

    playlists = SpotifyCatalogAdapter(sp).list_playlists()

    assert len(playlists) == 51
    assert playlists[-1].name == "Last"
    assert sp.calls == [("playlists", 0), ("playlists", 50)]


def test_tracks_skip_local_files_and_episodes():
    tracks = SpotifyCatalogAdapter(FakeSpotify()).list_tracks("mix")

    assert [t.name for t in tracks] == ["Yesterday"]


def test_get_track_by_id():
    track = SpotifyCatalogAdapter(FakeSpotify()).get_track("abc")

    assert track.id == "abc"


@pytest.mark.parametrize(
    "failure",
    [SpotifyException(500, -1, "server error"), requests.ConnectionError("offline")],
)
def test_api_failures_become_catalog_errors(failure):
    adapter = SpotifyCatalogAdapter(FakeSpotify(fail=failure))

    with pytest.raises(CatalogError, match="Failed to load playlists"):
        adapter.list_playlists()
    with pytest.raises(CatalogError, match="Failed to load tracks"):
        adapter.list_tracks("mix")
    with pytest.raises(CatalogError, match="Failed to load challenge track"):
        adapter.get_track("abc")
