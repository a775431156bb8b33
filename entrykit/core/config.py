"""
config.py - Engine constants
"""

# --- Scoring ---
# Sentinel score for "query is not a subsequence of the candidate".
MIN_SCORE = -1500

# Substring matches score in (SUBSTRING_FLOOR, 0], scattered matches at or below it
SUBSTRING_FLOOR = -750

# --- Input handling ---
DEBOUNCE_MS = 150

# --- External services ---
ANILIST_GRAPHQL_URL = "https://graphql.anilist.co"
TMDB_SITE_URL = "https://www.themoviedb.org"
BULK_FILENAME_HEADER = "x-jimaku-filename"

# --- Uploads ---
ALLOWED_UPLOAD_EXTENSIONS = {"srt", "ssa", "ass", "zip", "sub", "sup", "idx"}

# --- Environment overrides for the initial session state ---
ENV_SORT_BY = "ENTRYKIT_SORT_BY"
ENV_SORT_ORDER = "ENTRYKIT_SORT_ORDER"
ENV_PREFERRED_NAME = "ENTRYKIT_PREFERRED_NAME"
