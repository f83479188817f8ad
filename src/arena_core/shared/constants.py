"""Shared constants for Arena."""

DEFAULT_CONFIG_FILE = "config.yml"
DEFAULT_LOG_CACHE_SIZE = 1000

# Remote call defaults
DEFAULT_MODEL_TIMEOUT = 45.0
DEFAULT_MAX_TOKENS = 500
DEFAULT_TEMPERATURE = 0.7
IMPROVEMENT_MAX_TOKENS = 1500
IMPROVEMENT_TEMPERATURE = 0.3
REVIEW_MAX_TOKENS = 800
REVIEW_TEMPERATURE = 0.2

# Rough characters-per-token ratio used when a provider reports no usage
CHARS_PER_TOKEN = 4

# Score bounds
MIN_SUB_SCORE = 1.0
MAX_SUB_SCORE = 10.0
NEUTRAL_REVIEW_SCORE = 5.0

# Battle bookkeeping
USER_AUTHOR_ID = "user"
SELECTION_PROGRESS = 10.0
ROUNDS_PROGRESS_SPAN = 80.0

RETRYABLE_ERROR_TYPES = frozenset(
    {
        "rate_limit",
        "timeout",
        "connection",
        "service",
        "service_unavailable",
        "overloaded",
    }
)

ERROR_PATTERNS: dict[str, list[str]] = {
    "rate_limit": ["rate limit", "rate_limit", "429", "too many requests"],
    "timeout": ["timeout", "timed out"],
    "connection": ["connection", "network", "fetch failed"],
    "overloaded": ["overloaded", "capacity"],
    "service": ["500", "502", "503", "504", "internal server error"],
    "authentication": ["401", "invalid api key", "unauthorized"],
    "bad_request": ["400", "invalid request", "malformed"],
}

PERMISSION_ERROR_PATTERNS = [
    "permission denied",
    "access denied",
    "403",
    "forbidden",
]

# Peer review sub-criteria, in the order reviewers are asked about them
REVIEW_CRITERIA: tuple[str, ...] = (
    "clarity",
    "specificity",
    "completeness",
    "actionability",
    "conciseness",
    "context_coverage",
    "non_redundancy",
    "intent_tailoring",
)
