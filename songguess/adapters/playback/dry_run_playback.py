"""Dry-run playback adapter that never produces sound."""

from typing import Optional

from songguess.domain.model import Track
from songguess.domain.ports import PlaybackCallback, PlaybackPort


class DryRunPlaybackAdapter(PlaybackPort):
    """Acknowledges every request immediately; used for simulation runs."""

    def __init__(self):
        self.started: list[str] = []
        self.toggles = 0
        self.stops = 0
        self._playing = False

    def start(self, track: Track, on_done: PlaybackCallback) -> None:
        self.started.append(track.id)
        self._playing = True
        on_done(None)

    def toggle(self, on_done: Optional[PlaybackCallback] = None) -> None:
        self.toggles += 1
        self._playing = not self._playing
        if on_done:
            on_done(None)

    def stop(self) -> None:
        self.stops += 1
        self._playing = False

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def is_initialized(self) -> bool:
        return True

    @property
    def error(self) -> Optional[str]:
        return None
