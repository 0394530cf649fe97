"""Spotify adapter for playlists and tracks."""

import logging
from typing import Optional

import requests
import spotipy
from spotipy.exceptions import SpotifyException

from songguess.domain.errors import CatalogError
from songguess.domain.model import Album, Artist, Playlist, Track
from songguess.domain.ports import CatalogPort

logger = logging.getLogger("songguess.spotify.catalog")


def _first_image(images: Optional[list]) -> Optional[str]:
    if images and isinstance(images[0], dict):
        return images[0].get("url")
    return None


def track_from_api(t: dict) -> Track:
    album = t.get("album") or {}
    return Track(
        id=t["id"],
        name=t.get("name", ""),
        artists=tuple(Artist(id=a.get("id") or "", name=a.get("name", "")) for a in t.get("artists", [])),
        album=Album(
            id=album.get("id") or "",
            name=album.get("name", ""),
            image_url=_first_image(album.get("images")),
        ),
        preview_url=t.get("preview_url"),
        uri=t.get("uri") or f"spotify:track:{t['id']}",
    )


class SpotifyCatalogAdapter(CatalogPort):

    def __init__(self, sp: spotipy.Spotify):
        self.sp = sp

    def list_playlists(self) -> list[Playlist]:
        playlists: list[Playlist] = []
        offset = 0
        limit = 50

        try:
            while True:
                results = self.sp.current_user_playlists(limit=limit, offset=offset)
                items = results.get("items", [])
                if not items:
                    break
                for pl in items:
                    if not pl:
                        continue
                    playlists.append(
                        Playlist(
                            id=pl["id"],
                            name=pl.get("name", ""),
                            track_count=(pl.get("tracks") or {}).get("total", 0),
                            image_url=_first_image(pl.get("images")),
                        )
                    )
                offset += limit
                if offset >= results.get("total", 0):
                    break
        except (SpotifyException, requests.RequestException) as exc:
            logger.warning("Listing playlists failed: %s", exc)
            raise CatalogError("Failed to load playlists. Please try again.") from exc

        return playlists

    def list_tracks(self, playlist_id: str) -> list[Track]:
        tracks: list[Track] = []
        offset = 0
        limit = 100

        try:
            while True:
                results = self.sp.playlist_items(playlist_id, limit=limit, offset=offset)
                items = results.get("items", [])
                if not items:
                    break
                for item in items:
                    t = item.get("track")
                    # Local files and removed tracks come back without an id.
                    if not t or not t.get("id") or t.get("type", "track") != "track":
                        continue
                    tracks.append(track_from_api(t))
                offset += limit
                if offset >= results.get("total", 0):
                    break
        except (SpotifyException, requests.RequestException) as exc:
            logger.warning("Listing tracks of %s failed: %s", playlist_id, exc)
            raise CatalogError("Failed to load tracks. Please try again.") from exc

        return tracks

    def get_track(self, track_id: str) -> Track:
        try:
            t = self.sp.track(track_id)
        except (SpotifyException, requests.RequestException) as exc:
            logger.warning("Fetching track %s failed: %s", track_id, exc)
            raise CatalogError("Failed to load challenge track") from exc
        if not t or not t.get("id"):
            raise CatalogError("Failed to load challenge track")
        return track_from_api(t)
