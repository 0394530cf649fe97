"""Use cases: pick the next track in free mode or challenge mode."""

import logging
import random
from typing import Optional, Sequence

from songguess.domain.ledger import SessionLedger
from songguess.domain.model import ChallengeEntry, Track, TrackSelection

logger = logging.getLogger("songguess.selection")


class SelectFreeTrackUseCase:
    """Uniform random pick among the playlist tracks not yet played."""

    def __init__(self, ledger: SessionLedger, rng: Optional[random.Random] = None):
        self.ledger = ledger
        self.rng = rng or random.Random()

    def execute(self, tracks: Sequence[Track]) -> TrackSelection:
        unplayed = self.ledger.unplayed_of(tracks)
        if not unplayed:
            logger.info("All %s tracks already played", len(tracks))
            return TrackSelection(exhausted=True)

        track = self.rng.choice(unplayed)
        logger.info("Selected track %s (%s unplayed before pick)", track.id, len(unplayed))
        return TrackSelection(track=track)


class SelectChallengeTrackUseCase:
    """Fixed-order walk through a challenge list, indexed by rounds played."""

    def __init__(self, ledger: SessionLedger):
        self.ledger = ledger

    def execute(self, entries: Sequence[ChallengeEntry]) -> TrackSelection:
        index = self.ledger.played_count
        if index >= len(entries):
            logger.info("Challenge complete (%s/%s)", index, len(entries))
            return TrackSelection(complete=True)
        return TrackSelection(track_id=entries[index].track_id)
