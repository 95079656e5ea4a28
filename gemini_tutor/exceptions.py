"""
Exceptions and failure kinds for the Gemini tutor ingestion layer
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Retry-relevant category of a failed endpoint call"""

    RATE_LIMITED = "rate_limited"
    SERVER_INTERNAL = "server_internal"
    NON_RETRYABLE = "non_retryable"

    @property
    def is_retryable(self) -> bool:
        return self is not ErrorKind.NON_RETRYABLE


class GeminiTutorError(Exception):
    """Base exception for Gemini tutor errors"""

    pass


class MissingKeyError(GeminiTutorError):
    """Raised when the real API is requested without an API key"""

    pass


class IngestionError(GeminiTutorError):
    """Raised when endpoint text cannot be turned into structured data"""

    pass


class EmptyResponseError(IngestionError):
    """Raised when the endpoint returned no text at all"""

    pass


class MalformedJSONError(IngestionError):
    """Raised when text is present but unparsable even after repair

    Carries both the original text and the final cleaned text so callers can
    log what the model actually sent.
    """

    def __init__(self, message: str, raw_text: str, cleaned_text: str):
        super().__init__(message)
        self.raw_text = raw_text
        self.cleaned_text = cleaned_text


class PayloadValidationError(GeminiTutorError):
    """Raised when a parsed payload does not match the expected shape"""

    def __init__(self, message: str, payload: Any = None):
        super().__init__(message)
        self.payload = payload


class EndpointError(GeminiTutorError):
    """Failure raised by an endpoint adapter with a structured kind"""

    kind: ErrorKind = ErrorKind.NON_RETRYABLE

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitedError(EndpointError):
    """Quota or rate-limit rejection"""

    kind = ErrorKind.RATE_LIMITED


class ServerInternalError(EndpointError):
    """Transient server-side failure"""

    kind = ErrorKind.SERVER_INTERNAL


class NonRetryableUpstreamError(EndpointError):
    """Auth failures, bad requests and anything else the server rejected"""

    kind = ErrorKind.NON_RETRYABLE
