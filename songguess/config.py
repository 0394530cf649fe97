"""Configuration: game constants, file names and Spotify settings."""

# Round timer
TICK_SECONDS = 0.1  # Timer granularity while a track is audible

# Scoring
TIME_BONUS_WINDOW_SECONDS = 30.0  # Bonus decays to zero over this window
SIMILARITY_WEIGHT = 80
TIME_BONUS_WEIGHT = 20
SCORE_SCALE = 100  # 0-100 raw score is multiplied into the 0-10000 range
MAX_SCORE = (SIMILARITY_WEIGHT + TIME_BONUS_WEIGHT) * SCORE_SCALE
CORRECT_THRESHOLD = 0.8  # Title AND artist similarity must both exceed this

# Score colour bands (0-10000 scale)
BAND_GOOD = 8000
BAND_MID = 5000
BAND_POOR = 3000

# Spotify API
SPOTIFY_SCOPE = (
    "playlist-read-private user-read-playback-state "
    "user-modify-playback-state streaming"
)
SPOTIFY_CACHE_PATH = "spotify_auth_cache.json"
SPOTIFY_OPEN_URL = "https://open.spotify.com"

# Persistence
HISTORY_FILE = "history.json"
EXPORT_CSV_FILE = "history.csv"

# Environment overrides
SIMULATION_ENV_VAR = "SONGGUESS_SIMULATION"
LOG_LEVEL_ENV_VAR = "SONGGUESS_LOG_LEVEL"
