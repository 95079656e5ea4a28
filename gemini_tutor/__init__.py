"""
Gemini Tutor: resilient ingestion of generative model output
"""

import importlib.metadata
import logging

from .client import (
    EndpointRequest,
    GeminiEndpoint,
    GenerativeEndpoint,
    MockEndpoint,
    OperationKind,
    RetryPolicy,
    classify_error,
    run_with_retry,
)
from .coalescing import SingleFlight
from .config import TutorSettings, load_settings
from .exceptions import (
    EmptyResponseError,
    EndpointError,
    ErrorKind,
    GeminiTutorError,
    IngestionError,
    MalformedJSONError,
    MissingKeyError,
    NonRetryableUpstreamError,
    PayloadValidationError,
    RateLimitedError,
    ServerInternalError,
)
from .models import AnalysisResult, MindMapNode, QuizQuestion, UserSettings
from .response import ingest, normalize, parse_response_text, repair
from .tutor import TutorService

# Version handling
try:
    __version__ = importlib.metadata.version("gemini-tutor")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"  # fallback version

# Set up a null handler for the library's root logger.
# This prevents 'No handler found' errors if the consuming app has no logging configured.
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Public API
__all__ = [
    # Core classes
    "TutorService",
    "SingleFlight",
    "GenerativeEndpoint",
    "GeminiEndpoint",
    "MockEndpoint",
    "EndpointRequest",
    "OperationKind",
    "RetryPolicy",
    # Functions
    "ingest",
    "normalize",
    "repair",
    "parse_response_text",
    "classify_error",
    "run_with_retry",
    "load_settings",
    # Configuration and models
    "TutorSettings",
    "UserSettings",
    "AnalysisResult",
    "QuizQuestion",
    "MindMapNode",
    # Exceptions
    "GeminiTutorError",
    "IngestionError",
    "EmptyResponseError",
    "MalformedJSONError",
    "PayloadValidationError",
    "EndpointError",
    "RateLimitedError",
    "ServerInternalError",
    "NonRetryableUpstreamError",
    "MissingKeyError",
    "ErrorKind",
]
