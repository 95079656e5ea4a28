"""
Error classification and translation for Gemini endpoint failures
"""

from dataclasses import dataclass
import logging

from ..constants import RATE_LIMIT_MARKERS, SERVER_ERROR_MARKERS
from ..exceptions import (
    EndpointError,
    ErrorKind,
    NonRetryableUpstreamError,
    RateLimitedError,
    ServerInternalError,
)

log = logging.getLogger(__name__)

_ERROR_TYPES: dict[ErrorKind, type[EndpointError]] = {
    ErrorKind.RATE_LIMITED: RateLimitedError,
    ErrorKind.SERVER_INTERNAL: ServerInternalError,
    ErrorKind.NON_RETRYABLE: NonRetryableUpstreamError,
}


@dataclass(frozen=True)
class ClassifiedError:
    """A caught failure labelled with its retry category"""

    kind: ErrorKind
    original_error: BaseException

    @property
    def is_retryable(self) -> bool:
        return self.kind.is_retryable


def classify_text(text: str) -> ErrorKind:
    """Best-effort classification of free-form error text"""
    lowered = text.lower()
    if any(marker in lowered for marker in RATE_LIMIT_MARKERS):
        return ErrorKind.RATE_LIMITED
    if any(marker in lowered for marker in SERVER_ERROR_MARKERS):
        return ErrorKind.SERVER_INTERNAL
    return ErrorKind.NON_RETRYABLE


def classify_error(error: BaseException) -> ClassifiedError:
    """Label a failure as rate-limited, server-internal or non-retryable.

    Errors raised by endpoint adapters already carry a structured ``kind``
    and are used as-is. Anything else falls back to substring matching on the
    lower-cased message, which is brittle against upstream wording changes.
    """
    kind = getattr(error, "kind", None)
    if not isinstance(kind, ErrorKind):
        kind = classify_text(str(error))
    return ClassifiedError(kind=kind, original_error=error)


def kind_for_status(code: int | None, status: str | None = None) -> ErrorKind:
    """Map an HTTP-like status code (or RPC status name) to an ErrorKind"""
    status = (status or "").upper()
    if code == 429 or status == "RESOURCE_EXHAUSTED":
        return ErrorKind.RATE_LIMITED
    if (code is not None and code >= 500) or status in ("INTERNAL", "UNAVAILABLE"):
        return ErrorKind.SERVER_INTERNAL
    return ErrorKind.NON_RETRYABLE


def describe_status(code: int | None, message: str, status: str | None = None) -> str:
    """User-legible message for a failed generation request.

    The status indicator stays in the text, so even a caller that only sees
    the message can still classify it.
    """
    status = (status or "").upper()
    if code in (401, 403) or status in ("UNAUTHENTICATED", "PERMISSION_DENIED"):
        return "Error 401: Invalid API Key. Please check your key in Settings."
    if code == 429 or status == "RESOURCE_EXHAUSTED":
        return "Error 429: Quota Exceeded. You are sending requests too fast."
    if code == 500:
        return "Error 500: Internal Server Error at Google."
    if code == 400:
        return f"Error 400: Bad Request. {message}"
    if code is not None:
        return f"Error {code}: {message}"
    return message


class GenerationErrorHandler:
    """Translates SDK failures into structured ``EndpointError`` subclasses"""

    def to_endpoint_error(self, error: Exception) -> EndpointError:
        """Build the EndpointError to raise in place of ``error``.

        Uses the SDK's ``code``/``status`` attributes when present and falls
        back to text classification otherwise.
        """
        if isinstance(error, EndpointError):
            return error

        code = getattr(error, "code", None)
        if not isinstance(code, int):
            code = None
        status = getattr(error, "status", None)
        if not isinstance(status, str):
            status = None
        message = getattr(error, "message", None) or str(error)

        if code is None and status is None:
            kind = classify_text(str(error))
        else:
            kind = kind_for_status(code, status)

        text = describe_status(code, message, status)
        log.debug("Translated %s (code=%s) to %s.", type(error).__name__, code, kind)
        return _ERROR_TYPES[kind](text, status_code=code)
