"""
JSON parsing of normalized endpoint text with a single repair retry
"""

import json
import logging
from typing import Any

from ..constants import EMPTY_RESPONSE_MESSAGE, LOG_PREVIEW_CHARS
from ..exceptions import EmptyResponseError, MalformedJSONError
from .normalizer import normalize
from .repair import repair
from .types import ParsingResult

log = logging.getLogger(__name__)


def _preview(text: str) -> str:
    return text[:LOG_PREVIEW_CHARS]


def _parse(normalized: str, raw_text: str) -> ParsingResult:
    try:
        data = json.loads(normalized)
        log.debug("Parsed response JSON without repair.")
        return ParsingResult(data, "direct", raw_text, normalized)
    except json.JSONDecodeError as first_error:
        log.debug("Raw parse failed (%s); retrying after repair.", first_error)

    cleaned = repair(normalized)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        log.warning(
            "Response is not valid JSON even after repair: %s. Preview: '%s'",
            e,
            _preview(cleaned),
        )
        raise MalformedJSONError(
            f"Model returned malformed JSON: {e}",
            raw_text=raw_text,
            cleaned_text=cleaned,
        ) from e

    log.info("Parsed response JSON after structural repair.")
    return ParsingResult(data, "repaired", raw_text, cleaned)


def try_parse(normalized: str, *, raw_text: str | None = None) -> Any:
    """Parse normalized text, retrying once after structural repair.

    Args:
        normalized: Output of ``normalize``.
        raw_text: Original endpoint text, kept on ``MalformedJSONError`` for
            diagnostics. Defaults to ``normalized``.

    Raises:
        EmptyResponseError: If the original text was missing or blank.
        MalformedJSONError: If both the raw and repaired parse fail.
    """
    if raw_text is None:
        raw_text = normalized
    if raw_text is None or not raw_text.strip():
        raise EmptyResponseError(EMPTY_RESPONSE_MESSAGE)
    return _parse(normalized, raw_text).parsed_data


def parse_response_text(raw: str | None) -> ParsingResult:
    """Normalize and parse raw endpoint text, recording how it was decoded.

    Raises:
        EmptyResponseError: If ``raw`` is None, empty or whitespace only.
        MalformedJSONError: If the text cannot be parsed even after repair.
    """
    if raw is None or not raw.strip():
        raise EmptyResponseError(EMPTY_RESPONSE_MESSAGE)
    return _parse(normalize(raw), raw)


def ingest(raw: str | None) -> Any:
    """Turn raw endpoint text into a decoded JSON value or fail loudly."""
    return parse_response_text(raw).parsed_data
