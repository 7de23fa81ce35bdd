import os

MAX_UPLOAD_BYTES = 20 * 1024 * 1024  # 20 MB soft cap
ALLOWED_EXTENSIONS = {'.pdf', '.docx'}
DATA_DIR = os.getenv("WORDWISE_DATA_DIR", "data")
MIME_ALLOW = {
    ".pdf": {"application/pdf"},
    ".docx": {
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/zip",
    },
}

# Analysis orchestration
DEBOUNCE_SECONDS = 1.0       # quiescence before an analysis is issued
PROVIDER_TIMEOUT = 8.0       # seconds per provider call
LANGUAGE = os.getenv("WORDWISE_LANGUAGE", "en-US")
USE_LANGUAGETOOL = os.getenv("WORDWISE_LANGUAGETOOL", "1") != "0"

# Provider priority (lower wins overlaps)
PROVIDER_RANKS = {
    "spelling": 0,
    "languagetool": 0,
    "openai": 0,
    "vocabulary": 1,
}

# Normalization
NEAR_MISS_WINDOW = 5         # code points around the reported start
DEFAULT_CONFIDENCE = {
    "error": 0.9,
    "warning": 0.7,
    "suggestion": 0.5,
}
EXPLANATION_DELIMITER = " | "

# Error pattern table
MAX_EXAMPLES = 5
MAX_RECENT_ERRORS = 10
PATTERNS_FILE = "error_patterns.json"

# Scoring
MIN_SCORE = 20
ERROR_RATE_PENALTY = 150
COMPLEX_WORD_LENGTH = 6
