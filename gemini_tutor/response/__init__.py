"""
Response ingestion for the Gemini tutor: normalize, repair, parse, validate
"""

from .normalizer import extract_envelope, normalize, strip_code_fences
from .parsing import ingest, parse_response_text, try_parse
from .repair import repair, strip_index_keys, strip_trailing_commas
from .types import ParsingResult
from .validation import validate_against_schema, validate_generic_type

__all__ = [
    # Central interface
    "ingest",
    "parse_response_text",
    "ParsingResult",
    # Individual components
    "normalize",
    "strip_code_fences",
    "extract_envelope",
    "strip_index_keys",
    "strip_trailing_commas",
    "repair",
    "try_parse",
    "validate_against_schema",
    "validate_generic_type",
]
