"""Text normalization for raw endpoint output.

Models asked for JSON routinely wrap it in markdown fences or surround it with
chatty prose ("Here you go: ... Hope this helps!"). ``normalize`` reduces such
text to the best-guess JSON envelope before any parse attempt.

The envelope is a single span from the earliest opening bracket to the latest
closing bracket. No depth tracking is done, so stray brackets in surrounding
prose can widen the span; the parser then fails loudly instead of guessing.
"""

import re

_OPENERS = "{["
_CLOSERS = "}]"

_LEADING_FENCE = re.compile(r"^\s*```(?:json)?[ \t]*\r?\n?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\r?\n?[ \t]*```\s*$")


def strip_code_fences(text: str) -> str:
    """Remove leading ```/```json fences and trailing ``` fences.

    Repeats until stable so doubly-wrapped output is fully unwrapped.
    """
    while True:
        stripped = _LEADING_FENCE.sub("", text, count=1)
        stripped = _TRAILING_FENCE.sub("", stripped, count=1)
        if stripped == text:
            return text
        text = stripped


def extract_envelope(text: str) -> str:
    """Slice from the earliest ``{``/``[`` to the latest ``}``/``]``.

    Returns ``text`` unchanged when no opener exists, no closer exists, or the
    latest closer sits before the earliest opener.
    """
    opener_positions = [i for i in (text.find(c) for c in _OPENERS) if i != -1]
    closer_positions = [text.rfind(c) for c in _CLOSERS]
    if not opener_positions:
        return text

    start = min(opener_positions)
    end = max(closer_positions)
    if end <= start:
        return text
    return text[start : end + 1]


def normalize(raw: str) -> str:
    """Strip fences and prose, leaving the outer JSON envelope.

    Pure function; ``normalize(normalize(x)) == normalize(x)``.
    """
    text = strip_code_fences(raw).strip()
    return extract_envelope(text)
