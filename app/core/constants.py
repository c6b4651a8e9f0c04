"""Application constants.

Contains input bounds, scoring weights, and selection thresholds for the
self-reflection theme analysis.
"""

# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------
MIN_TEXT_LENGTH: int = 20
MAX_TEXT_LENGTH: int = 2000
MIN_ALPHA_CHARS: int = 10

# ---------------------------------------------------------------------------
# Scoring weights
# ---------------------------------------------------------------------------
KEYWORD_MATCH_POINTS: int = 1
FIRST_SENTENCE_BONUS: int = 1
THEME_NAME_BONUS: int = 2

# ---------------------------------------------------------------------------
# Selection thresholds
# ---------------------------------------------------------------------------
STRONG_MATCH_SCORE: int = 5
MEDIUM_MATCH_SCORE: int = 3
MIN_THEME_COUNT: int = 3
MAX_THEME_COUNT: int = 6

# ---------------------------------------------------------------------------
# Resubmission detection
# Jaccard similarity below this value counts as a changed reflection.
# ---------------------------------------------------------------------------
SIMILARITY_THRESHOLD: float = 0.7

# ---------------------------------------------------------------------------
# Theme store
# ---------------------------------------------------------------------------
THEMES_TABLE: str = "themes"
THEME_COLUMNS: str = "name, title, summary, keywords, emoji, category"
USER_PROFILES_TABLE: str = "user_profiles"

# ---------------------------------------------------------------------------
# CORS headers for the preflight response (mobile clients send no Origin)
# ---------------------------------------------------------------------------
CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}

# Mount point of the edge-function routes
FUNCTIONS_PREFIX: str = "/functions/v1"
