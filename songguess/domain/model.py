"""Pure domain objects with no framework dependency."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from songguess.config import SPOTIFY_OPEN_URL


@dataclass(frozen=True)
class Artist:
    id: str
    name: str


@dataclass(frozen=True)
class Album:
    id: str
    name: str
    image_url: Optional[str] = None


@dataclass(frozen=True)
class Track:
    id: str
    name: str
    artists: tuple[Artist, ...] = ()
    album: Optional[Album] = None
    preview_url: Optional[str] = None
    uri: str = ""

    @property
    def primary_artist(self) -> str:
        return self.artists[0].name if self.artists else ""

    @property
    def cover_url(self) -> str:
        if self.album and self.album.image_url:
            return self.album.image_url
        return ""

    @property
    def external_url(self) -> str:
        return f"{SPOTIFY_OPEN_URL}/track/{self.id}"

    @property
    def album_url(self) -> Optional[str]:
        if self.album and self.album.id:
            return f"{SPOTIFY_OPEN_URL}/album/{self.album.id}"
        return None

    @property
    def artist_url(self) -> Optional[str]:
        if self.artists and self.artists[0].id:
            return f"{SPOTIFY_OPEN_URL}/artist/{self.artists[0].id}"
        return None


@dataclass
class Playlist:
    id: str
    name: str
    track_count: int = 0
    image_url: Optional[str] = None


class RoundPhase(Enum):
    IDLE = "idle"
    PLAYING = "playing"
    GUESSING = "guessing"
    SCORED = "scored"


@dataclass(frozen=True)
class RoundResult:
    score: int
    is_correct: bool


@dataclass
class HistoryEntry:
    track_id: str
    track_name: str
    artist_name: str
    album_image: str
    score: int
    time: float  # elapsed seconds at scoring
    timestamp: int  # completion time, epoch milliseconds


@dataclass(frozen=True)
class ChallengeEntry:
    track_id: str

    def __post_init__(self):
        if not isinstance(self.track_id, str) or not self.track_id.strip():
            raise ValueError("Challenge entry requires a non-empty track id")

    @classmethod
    def parse_list(cls, payload) -> list["ChallengeEntry"]:
        """Validate an externally supplied challenge payload.

        Accepts a list of ``{"trackId": ...}`` / ``{"track_id": ...}`` dicts or
        plain id strings. Order (and repeats) are preserved.
        """
        if not isinstance(payload, (list, tuple)):
            raise ValueError("Challenge payload must be a list")
        entries: list[ChallengeEntry] = []
        for i, item in enumerate(payload):
            if isinstance(item, str):
                track_id = item
            elif isinstance(item, dict):
                track_id = item.get("trackId", item.get("track_id"))
            else:
                raise ValueError(f"Challenge entry {i} has unsupported type {type(item).__name__}")
            if not isinstance(track_id, str) or not track_id.strip():
                raise ValueError(f"Challenge entry {i} is missing a track id")
            entries.append(cls(track_id=track_id.strip()))
        return entries


@dataclass(frozen=True)
class RoundSnapshot:
    """Read-only view of a round, used by renderers."""

    phase: RoundPhase
    track: Optional[Track]
    elapsed_seconds: float
    has_started_playing: bool
    title_guess: str = ""
    artist_guess: str = ""
    result: Optional[RoundResult] = None


@dataclass
class TrackSelection:
    """Outcome of a track-selection step.

    Exactly one of ``track``/``track_id`` is set on success; ``exhausted`` and
    ``complete`` report the two terminal (non-error) outcomes.
    """

    track: Optional[Track] = None
    track_id: Optional[str] = None
    exhausted: bool = False
    complete: bool = False
