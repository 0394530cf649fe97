"""Play 30s Spotify preview clips locally with pygame."""

import io
import logging
import threading
import urllib.request
from typing import Optional

import pygame

from songguess.domain.errors import PlaybackError
from songguess.domain.model import Track
from songguess.domain.ports import PlaybackCallback, PlaybackPort

logger = logging.getLogger("songguess.playback.preview")

DOWNLOAD_TIMEOUT = 10.0


class PygamePreviewPlayback(PlaybackPort):

    def __init__(self, asynchronous: bool = True):
        self.asynchronous = asynchronous
        self._lock = threading.Lock()
        self._playing = False
        self._error: Optional[str] = None
        self._request = 0
        try:
            pygame.mixer.init()
            self._initialized = True
        except pygame.error as exc:
            logger.warning("Audio device unavailable: %s", exc)
            self._initialized = False
            self._error = "Audio output is not available on this machine."

    def start(self, track: Track, on_done: PlaybackCallback) -> None:
        if not self._initialized:
            raise PlaybackError(self._error or "Audio output is not initialized.")
        if not track.preview_url:
            raise PlaybackError(f'"{track.name}" has no audio preview.')
        with self._lock:
            self._request += 1
            request = self._request

        def _run():
            try:
                with urllib.request.urlopen(track.preview_url, timeout=DOWNLOAD_TIMEOUT) as response:
                    data = response.read()
                with self._lock:
                    if request != self._request:
                        logger.debug("Dropping superseded preview for %s", track.id)
                        return
                    pygame.mixer.music.stop()
                    pygame.mixer.music.load(io.BytesIO(data))
                    pygame.mixer.music.play()
                    self._playing = True
                    self._error = None
            except (OSError, pygame.error) as exc:
                logger.warning("Preview playback failed for %s: %s", track.id, exc)
                self._error = "Could not play the track preview."
                on_done(self._error)
                return
            on_done(None)

        self._dispatch(_run)

    def toggle(self, on_done: Optional[PlaybackCallback] = None) -> None:
        with self._lock:
            try:
                if self._playing:
                    pygame.mixer.music.pause()
                else:
                    pygame.mixer.music.unpause()
            except pygame.error as exc:
                raise PlaybackError(f"Could not toggle playback: {exc}") from exc
            self._playing = not self._playing
        if on_done:
            on_done(None)

    def stop(self) -> None:
        with self._lock:
            self._request += 1
            if self._initialized:
                pygame.mixer.music.stop()
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

    def _dispatch(self, target) -> None:
        if self.asynchronous:
            threading.Thread(target=target, daemon=True).start()
        else:
            target()
