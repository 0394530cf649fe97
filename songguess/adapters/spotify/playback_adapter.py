"""Spotify Connect playback: drive the user's active Spotify device."""

import logging
import threading
from typing import Optional

import requests
import spotipy
from spotipy.exceptions import SpotifyException

from songguess.domain.errors import PlaybackError
from songguess.domain.model import Track
from songguess.domain.ports import PlaybackCallback, PlaybackPort

logger = logging.getLogger("songguess.spotify.playback")

NO_DEVICE_MESSAGE = "No available Spotify devices. Open Spotify on any device and try again."


def _message(exc: Exception) -> str:
    if isinstance(exc, SpotifyException) and exc.http_status == 403:
        return "Spotify Premium is required to control playback."
    if isinstance(exc, SpotifyException) and exc.http_status == 404:
        return NO_DEVICE_MESSAGE
    return "Playback failed. Please try again."


class SpotifyPlaybackAdapter(PlaybackPort):
    """Commands run one at a time. A start that ``stop()`` or a newer start
    has superseded is skipped, or paused again if its command was already
    in flight."""

    def __init__(self, sp: spotipy.Spotify, device_id: Optional[str] = None, asynchronous: bool = True):
        self.sp = sp
        self.device_id = device_id
        self.asynchronous = asynchronous
        self._playing = False
        self._initialized = False
        self._error: Optional[str] = None
        self._command_lock = threading.Lock()
        self._request = 0

    def start(self, track: Track, on_done: PlaybackCallback) -> None:
        self._request += 1
        request = self._request

        def _run():
            with self._command_lock:
                if request != self._request:
                    logger.debug("Skipping superseded start for %s", track.id)
                    return
                error = self._start_track(track)
                if request != self._request:
                    logger.info("Start for %s was superseded while in flight, pausing it", track.id)
                    self._pause_quietly()
                    return
            on_done(error)

        self._dispatch(_run)

    def _start_track(self, track: Track) -> Optional[str]:
        try:
            device_id = self._resolve_device()
            if not device_id:
                self._error = NO_DEVICE_MESSAGE
                return self._error
            self.sp.start_playback(device_id=device_id, uris=[track.uri or f"spotify:track:{track.id}"])
        except (SpotifyException, requests.RequestException) as exc:
            logger.warning("start_playback failed for %s: %s", track.id, exc)
            self._error = _message(exc)
            return self._error
        self._playing = True
        self._error = None
        return None

    def _pause_quietly(self) -> None:
        try:
            self.sp.pause_playback(device_id=self.device_id)
        except (SpotifyException, requests.RequestException) as exc:
            logger.warning("Pausing a superseded track failed: %s", exc)
        self._playing = False

    def toggle(self, on_done: Optional[PlaybackCallback] = None) -> None:
        def _run():
            with self._command_lock:
                try:
                    if self._playing:
                        self.sp.pause_playback(device_id=self.device_id)
                    else:
                        self.sp.start_playback(device_id=self.device_id)
                except (SpotifyException, requests.RequestException) as exc:
                    logger.warning("Toggling playback failed: %s", exc)
                    self._error = _message(exc)
                    error = self._error
                else:
                    self._playing = not self._playing
                    error = None
            if on_done:
                on_done(error)

        self._dispatch(_run)

    def stop(self) -> None:
        self._request += 1
        if not self._playing:
            return
        try:
            self.sp.pause_playback(device_id=self.device_id)
        except (SpotifyException, requests.RequestException) as exc:
            raise PlaybackError(_message(exc)) from exc
        finally:
            self._playing = False

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def error(self) -> Optional[str]:
        return self._error

    def _resolve_device(self) -> Optional[str]:
        devices = self.sp.devices().get("devices", [])
        self._initialized = True
        ids = [d.get("id") for d in devices if d.get("id") and not d.get("is_restricted")]
        if self.device_id in ids:
            return self.device_id
        active = [d["id"] for d in devices if d.get("is_active") and d.get("id") in ids]
        self.device_id = active[0] if active else (ids[0] if ids else None)
        return self.device_id

    def _dispatch(self, target) -> None:
        if self.asynchronous:
            threading.Thread(target=target, daemon=True).start()
        else:
            target()
