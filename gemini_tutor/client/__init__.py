"""
Gemini endpoint adapters, error classification and retry scheduling
"""

from .endpoint import GeminiEndpoint, GenerativeEndpoint, MockEndpoint
from .error_handler import (
    ClassifiedError,
    GenerationErrorHandler,
    classify_error,
    classify_text,
    describe_status,
)
from .models import EndpointRequest, InlineData, OperationKind
from .retry import RetryAttemptState, RetryPolicy, run_with_retry

__all__ = [
    # Endpoints
    "GenerativeEndpoint",
    "GeminiEndpoint",
    "MockEndpoint",
    "EndpointRequest",
    "InlineData",
    "OperationKind",
    # Classification
    "ClassifiedError",
    "GenerationErrorHandler",
    "classify_error",
    "classify_text",
    "describe_status",
    # Retry
    "RetryPolicy",
    "RetryAttemptState",
    "run_with_retry",
]
