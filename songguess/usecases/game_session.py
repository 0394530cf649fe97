"""Game orchestration: wire catalog and playback to the round machine.

Collaborator failures stop here. They are logged, kept in ``last_error`` and
handed to ``on_error`` as a user-facing message; exhaustion and challenge
completion are reported through their own callbacks.
"""

import logging
import random
from typing import Callable, Optional, Sequence

from songguess.domain.errors import CatalogError, PlaybackError, SongGuessError
from songguess.domain.ledger import SessionLedger
from songguess.domain.model import ChallengeEntry, Playlist, RoundPhase, RoundResult, Track
from songguess.domain.ports import CatalogPort, HistoryPort, PlaybackPort, SchedulerPort
from songguess.domain.round import RoundStateMachine
from songguess.usecases.record_round import RecordRoundUseCase
from songguess.usecases.select_track import SelectChallengeTrackUseCase, SelectFreeTrackUseCase

logger = logging.getLogger("songguess.game")

EXHAUSTED_MESSAGE = "No more unplayed tracks in this playlist!"
CHALLENGE_COMPLETE_MESSAGE = "Challenge complete!"


class GameOrchestrator:

    def __init__(
        self,
        catalog: CatalogPort,
        playback: PlaybackPort,
        scheduler: SchedulerPort,
        ledger: SessionLedger,
        history: Optional[HistoryPort] = None,
        rng: Optional[random.Random] = None,
        on_round_scored: Optional[Callable[[RoundResult], None]] = None,
        on_exhausted: Optional[Callable[[], None]] = None,
        on_challenge_complete: Optional[Callable[[], None]] = None,
        on_error: Optional[Callable[[str], None]] = None,
    ):
        self.catalog = catalog
        self.playback = playback
        self.ledger = ledger
        self.on_round_scored = on_round_scored
        self.on_exhausted = on_exhausted
        self.on_challenge_complete = on_challenge_complete
        self.on_error = on_error

        self.round = RoundStateMachine(
            playback,
            scheduler,
            on_round_scored=self._handle_scored,
            on_error=self._report,
        )
        self.select_free_uc = SelectFreeTrackUseCase(ledger, rng)
        self.select_challenge_uc = SelectChallengeTrackUseCase(ledger)
        self.record_uc = RecordRoundUseCase(ledger, history)

        self.playlist: Optional[Playlist] = None
        self.challenge: Optional[list[ChallengeEntry]] = None
        self.current_track: Optional[Track] = None
        self.last_error: Optional[str] = None

    @property
    def is_challenge(self) -> bool:
        return self.challenge is not None

    # ── Catalog ─────────────────────────────────────────────────────

    def list_playlists(self) -> list[Playlist]:
        try:
            return self.catalog.list_playlists()
        except CatalogError as error:
            self._report(error)
            return []

    # ── Track selection ─────────────────────────────────────────────

    def select_playlist(self, playlist: Playlist) -> Optional[Track]:
        self.playlist = playlist
        self.challenge = None
        return self.next_track()

    def start_challenge(self, entries: Sequence[ChallengeEntry]) -> Optional[Track]:
        self.challenge = list(entries)
        self.playlist = None
        logger.info("Challenge started (%s entries)", len(self.challenge))
        return self.next_track()

    def next_track(self) -> Optional[Track]:
        """Select the next track and start its round. Returns None if nothing starts."""
        if self.round.phase is not RoundPhase.IDLE:
            logger.warning("next_track ignored while round is %s", self.round.phase.value)
            return None

        try:
            track = self._select()
        except CatalogError as error:
            self._report(error)
            return None
        if track is None:
            return None

        self.current_track = track
        self.last_error = None
        self.retry()
        return track

    def retry(self) -> bool:
        """(Re)issue playback start for the current track."""
        if self.current_track is None:
            return False
        try:
            return self.round.start(self.current_track)
        except PlaybackError as error:
            self._report(error)
            return False

    def _select(self) -> Optional[Track]:
        if self.challenge is not None:
            selection = self.select_challenge_uc.execute(self.challenge)
            if selection.complete:
                self.current_track = None
                if self.on_challenge_complete:
                    self.on_challenge_complete()
                return None
            return self.catalog.get_track(selection.track_id)

        if self.playlist is None:
            return None
        tracks = self.catalog.list_tracks(self.playlist.id)
        selection = self.select_free_uc.execute(tracks)
        if selection.exhausted:
            self.current_track = None
            if self.on_exhausted:
                self.on_exhausted()
            return None
        return selection.track

    # ── Round controls ──────────────────────────────────────────────

    def pause_and_guess(self) -> bool:
        try:
            return self.round.pause_and_guess()
        except PlaybackError as error:
            self._report(error)
            return False

    def submit_guess(self, title: str, artist: str) -> Optional[RoundResult]:
        return self.round.submit_guess(title, artist)

    def play_again(self) -> Optional[Track]:
        """Abandon or finish the current round and move on to the next track."""
        self._end_round()
        return self.next_track()

    def leave(self) -> None:
        """Tear down the round and forget the active playlist or challenge."""
        self._end_round()
        self.playlist = None
        self.challenge = None
        self.last_error = None

    def close(self) -> None:
        self.round.dispose()
        self._stop_playback()

    # ── Internals ───────────────────────────────────────────────────

    def _handle_scored(self, result: RoundResult) -> None:
        track = self.round.track
        self.record_uc.execute(track, result, self.round.elapsed_seconds)
        if self.on_round_scored:
            self.on_round_scored(result)

    def _end_round(self) -> None:
        snapshot = self.round.snapshot()
        if snapshot.has_started_playing and snapshot.phase is not RoundPhase.SCORED:
            logger.info("Round abandoned (track=%s)", snapshot.track.id)
            self.ledger.mark_played(snapshot.track.id)
        self._stop_playback()
        self.round.reset()
        self.current_track = None

    def _stop_playback(self) -> None:
        try:
            self.playback.stop()
        except PlaybackError as error:
            logger.warning("Could not stop playback: %s", error)

    def _report(self, error: SongGuessError) -> None:
        message = str(error)
        logger.warning("%s: %s", type(error).__name__, message)
        self.last_error = message
        if self.on_error:
            self.on_error(message)
