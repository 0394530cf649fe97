"""Failures surfaced by collaborators. Exhaustion is not an error."""


class SongGuessError(Exception):
    """Base class; ``str(error)`` is safe to show to the player."""


class PlaybackError(SongGuessError):
    pass


class CatalogError(SongGuessError):
    pass


class HistoryError(SongGuessError):
    pass
