"""
Project-wide constants for the Gemini tutor ingestion layer
"""

# ==============================================================================
# Retry Defaults
# ==============================================================================

# Defaults for RetryPolicy; never read at call time as ambient state
DEFAULT_MAX_RETRIES = 3
DEFAULT_INITIAL_DELAY_MS = 2000
DEFAULT_GROWTH_FACTOR = 2.0

# ==============================================================================
# Error Classification
# ==============================================================================

# Lower-cased substrings; rate-limit markers win over server markers
RATE_LIMIT_MARKERS = ("429", "resource_exhausted", "quota", "rate limit")
SERVER_ERROR_MARKERS = (
    "500",
    "internal error",
    "internal server error",
    "503",
    "unavailable",
)

# ==============================================================================
# Endpoint Configuration
# ==============================================================================

DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_TIMEOUT_SECONDS = 60.0
JSON_MIME_TYPE = "application/json"

# Characters of raw text included in log previews
LOG_PREVIEW_CHARS = 200

EMPTY_RESPONSE_MESSAGE = "Gemini API returned an empty response."

# ==============================================================================
# Soft Operation Fallbacks
# ==============================================================================

HINT_FALLBACK = (
    "Think about what the question is really asking, "
    "then compare each option against it."
)
DEFINITION_FALLBACK = "Could not define this word."
CHAT_FALLBACK = (
    "I'm sorry, I'm having trouble connecting right now. Please try again later."
)
DEBATE_FALLBACK = "AI couldn't respond to that point."
