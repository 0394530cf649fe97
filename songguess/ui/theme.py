"""Shared colours for the Flet views."""

BG = "#121212"
BG_CARD = "#1E1E1E"
BG_INPUT = "#2A2A2A"
BORDER = "#333333"
ACCENT = "#1DB954"
DANGER = "#EF4444"
FG = "#FFFFFF"
FG_DIM = "#9CA3AF"

BAND_COLORS = {
    "good": "#22C55E",
    "mid": "#EAB308",
    "poor": "#EF4444",
    "neutral": FG,
}
