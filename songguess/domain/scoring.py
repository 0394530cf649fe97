"""Turn a pair of guesses and the elapsed time into a round result.

Score scale: the weighted sum ``similarity * 80 + time_bonus * 20`` is a 0-100
value. It is rounded (half up) to an integer and then multiplied by 100, so
``RoundResult.score`` is always a multiple of 100 in ``[0, 10000]``. History
and colour bands depend on that range; do not collapse it back to 0-100.
"""

import math

from songguess.config import (
    BAND_GOOD,
    BAND_MID,
    BAND_POOR,
    CORRECT_THRESHOLD,
    SCORE_SCALE,
    SIMILARITY_WEIGHT,
    TIME_BONUS_WEIGHT,
    TIME_BONUS_WINDOW_SECONDS,
)
from songguess.domain.model import RoundResult, Track
from songguess.domain.similarity import similarity


def time_bonus(elapsed_seconds: float) -> float:
    """1.0 at zero seconds, decaying linearly to 0.0 at the end of the window."""
    elapsed = max(0.0, float(elapsed_seconds))
    return max(0.0, 1.0 - elapsed / TIME_BONUS_WINDOW_SECONDS)


def calculate_score(
    title_guess: str,
    artist_guess: str,
    track: Track,
    elapsed_seconds: float,
) -> RoundResult:
    title_sim = similarity(title_guess, track.name)
    artist_sim = similarity(artist_guess, track.primary_artist)
    average = (title_sim + artist_sim) / 2

    raw = average * SIMILARITY_WEIGHT + time_bonus(elapsed_seconds) * TIME_BONUS_WEIGHT
    score = int(math.floor(raw + 0.5)) * SCORE_SCALE

    return RoundResult(
        score=score,
        is_correct=title_sim > CORRECT_THRESHOLD and artist_sim > CORRECT_THRESHOLD,
    )


def score_band(score: int) -> str:
    if score >= BAND_GOOD:
        return "good"
    if score >= BAND_MID:
        return "mid"
    if score < BAND_POOR:
        return "poor"
    return "neutral"


def format_time(seconds: float) -> str:
    return f"{max(0.0, seconds):.1f}"
