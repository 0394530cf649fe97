"""Spotify sign-in for SongGuess: read the player's playlists and drive their devices."""

import spotipy
from spotipy.oauth2 import SpotifyOAuth

from songguess.config import SPOTIFY_CACHE_PATH, SPOTIFY_SCOPE


def get_spotify_client(
    client_id: str,
    client_secret: str,
    redirect_uri: str = "http://127.0.0.1:8888/callback",
) -> spotipy.Spotify:
    """Client authorised for SPOTIFY_SCOPE. The token is cached in SPOTIFY_CACHE_PATH
    so the browser consent step only runs on first launch."""
    auth_manager = SpotifyOAuth(
        client_id=client_id,
        client_secret=client_secret,
        redirect_uri=redirect_uri,
        scope=SPOTIFY_SCOPE,
        cache_path=SPOTIFY_CACHE_PATH,
    )
    return spotipy.Spotify(auth_manager=auth_manager)
