"""Lifecycle of a single round: IDLE -> PLAYING -> GUESSING -> SCORED.

The machine owns the round clock. The clock is armed when playback is
requested but only ticks once the playback port acknowledges audible start,
and it is cancelled before any transition out of PLAYING takes effect.

Every playback request captures the round generation. ``reset()`` and
``dispose()`` bump it, so a completion that arrives late (for example a pause
acknowledgement after the player hit "play again") is dropped instead of being
applied to the next round.
"""

import logging
import threading
from typing import Callable, Optional

from songguess.config import TICK_SECONDS
from songguess.domain.errors import PlaybackError
from songguess.domain.model import RoundPhase, RoundResult, RoundSnapshot, Track
from songguess.domain.ports import PlaybackPort, SchedulerPort, TickHandle
from songguess.domain.scoring import calculate_score

logger = logging.getLogger("songguess.round")


class RoundStateMachine:

    def __init__(
        self,
        playback: PlaybackPort,
        scheduler: SchedulerPort,
        on_round_scored: Optional[Callable[[RoundResult], None]] = None,
        on_error: Optional[Callable[[PlaybackError], None]] = None,
        tick_seconds: float = TICK_SECONDS,
    ):
        self.playback = playback
        self.scheduler = scheduler
        self.on_round_scored = on_round_scored
        self.on_error = on_error
        self.tick_seconds = tick_seconds

        self._lock = threading.RLock()
        self._generation = 0
        self._ticker: Optional[TickHandle] = None
        self._phase = RoundPhase.IDLE
        self._track: Optional[Track] = None
        self._ticks = 0
        self._has_started_playing = False
        self._title_guess = ""
        self._artist_guess = ""
        self._result: Optional[RoundResult] = None

    # ── Read-only state ─────────────────────────────────────────────

    @property
    def phase(self) -> RoundPhase:
        return self._phase

    @property
    def track(self) -> Optional[Track]:
        return self._track

    @property
    def elapsed_seconds(self) -> float:
        return round(self._ticks * self.tick_seconds, 6)

    @property
    def has_started_playing(self) -> bool:
        return self._has_started_playing

    @property
    def title_guess(self) -> str:
        return self._title_guess

    @property
    def artist_guess(self) -> str:
        return self._artist_guess

    @property
    def result(self) -> Optional[RoundResult]:
        return self._result

    def snapshot(self) -> RoundSnapshot:
        with self._lock:
            return RoundSnapshot(
                phase=self._phase,
                track=self._track,
                elapsed_seconds=self.elapsed_seconds,
                has_started_playing=self._has_started_playing,
                title_guess=self._title_guess,
                artist_guess=self._artist_guess,
                result=self._result,
            )

    # ── Transitions ─────────────────────────────────────────────────

    def start(self, track: Track) -> bool:
        """IDLE -> PLAYING. Raises PlaybackError if the request fails outright."""
        with self._lock:
            if self._phase is not RoundPhase.IDLE:
                logger.warning("start ignored in phase %s", self._phase.value)
                return False
            self._generation += 1
            generation = self._generation
            self._track = track
            self._phase = RoundPhase.PLAYING
            logger.info("Round started (track=%s)", track.id)

        try:
            self.playback.start(track, lambda error: self._on_start_done(generation, error))
        except PlaybackError:
            with self._lock:
                if generation == self._generation:
                    self._clear()
            raise
        return True

    def pause_and_guess(self) -> bool:
        """PLAYING -> GUESSING. The clock freezes before the pause is requested."""
        with self._lock:
            if self._phase is not RoundPhase.PLAYING:
                return False
            self._cancel_ticker()
            self._phase = RoundPhase.GUESSING
            self._title_guess = ""
            self._artist_guess = ""
            generation = self._generation
            logger.info("Round paused for guess (elapsed=%.1fs)", self.elapsed_seconds)

        try:
            self.playback.toggle(lambda error: self._on_pause_done(generation, error))
        except PlaybackError:
            with self._lock:
                if generation == self._generation and self._phase is RoundPhase.GUESSING:
                    self._phase = RoundPhase.PLAYING
                    if self._has_started_playing:
                        self._arm_ticker(generation)
            raise
        return True

    def set_guess(self, title: Optional[str] = None, artist: Optional[str] = None) -> bool:
        with self._lock:
            if self._phase is not RoundPhase.GUESSING:
                return False
            if title is not None:
                self._title_guess = title
            if artist is not None:
                self._artist_guess = artist
            return True

    def submit_guess(self, title: Optional[str] = None, artist: Optional[str] = None) -> Optional[RoundResult]:
        """GUESSING -> SCORED. Returns None (and changes nothing) in any other phase."""
        with self._lock:
            if self._phase is not RoundPhase.GUESSING:
                logger.info("submit_guess rejected in phase %s", self._phase.value)
                return None
            if title is not None:
                self._title_guess = title
            if artist is not None:
                self._artist_guess = artist
            result = calculate_score(
                self._title_guess,
                self._artist_guess,
                self._track,
                self.elapsed_seconds,
            )
            self._result = result
            self._phase = RoundPhase.SCORED
            callback = self.on_round_scored
            logger.info(
                "Round scored (track=%s, score=%s, correct=%s, elapsed=%.1fs)",
                self._track.id,
                result.score,
                result.is_correct,
                self.elapsed_seconds,
            )

        if callback:
            callback(result)
        return result

    def reset(self) -> None:
        """Any phase -> IDLE. Pending playback completions become stale."""
        with self._lock:
            self._generation += 1
            self._clear()

    def dispose(self) -> None:
        self.reset()
        self.on_round_scored = None
        self.on_error = None

    def tick(self) -> None:
        """Advance the clock by one tick if the round is audibly playing."""
        self._on_tick(self._generation)

    # ── Internals ───────────────────────────────────────────────────

    def _clear(self) -> None:
        self._cancel_ticker()
        self._phase = RoundPhase.IDLE
        self._track = None
        self._ticks = 0
        self._has_started_playing = False
        self._title_guess = ""
        self._artist_guess = ""
        self._result = None

    def _arm_ticker(self, generation: int) -> None:
        self._cancel_ticker()
        self._ticker = self.scheduler.schedule_repeating(
            self.tick_seconds,
            lambda: self._on_tick(generation),
        )

    def _cancel_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def _on_tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            if self._phase is not RoundPhase.PLAYING or not self._has_started_playing:
                return
            self._ticks += 1

    def _on_start_done(self, generation: int, error: Optional[str]) -> None:
        with self._lock:
            if generation != self._generation or self._phase is not RoundPhase.PLAYING:
                logger.debug("Dropping stale start acknowledgement")
                return
            if error:
                logger.warning("Playback start failed: %s", error)
                self._clear()
                callback = self.on_error
            else:
                self._has_started_playing = True
                self._arm_ticker(generation)
                return

        if callback:
            callback(PlaybackError(error))

    def _on_pause_done(self, generation: int, error: Optional[str]) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug("Dropping stale pause acknowledgement")
                return
            if not error:
                return
            logger.warning("Playback pause failed: %s", error)
            callback = self.on_error

        if callback:
            callback(PlaybackError(error))
