"""Structural repair of near-JSON model output.

Two known generative-model artifacts are handled:

- hallucinated index keys: asked for a list, some models emit
  ``[{"1": {...}}, {"2": {...}}]`` or ``{"1": {...}, "2": {...}}``;
- trailing commas before a closing ``}`` or ``]``.

Repair is only attempted after a raw parse failure, so valid JSON is never
rewritten.
"""

import re

_CLOSER_FOR = {"{": "}", "[": "]"}

# ,   ]    ->   ]
_TRAILING_COMMA = re.compile(r",\s*[}\]]")
# "3" :  followed by an object value
_INDEX_MEMBER = re.compile(r'\s*"\d+"\s*:\s*(?=\{)')
_MEMBER_SEP = re.compile(r"\s*(,)?\s*")


def _skip_string(text: str, start: int) -> int:
    """Return the index just past the string literal opening at ``start``."""
    i = start + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == '"':
            return i + 1
        i += 1
    return len(text)


def _pair_brackets(text: str) -> dict[int, int]:
    """Map each opening bracket index to its matching closer, ignoring strings.

    Unbalanced brackets are simply left out of the mapping.
    """
    pairs: dict[int, int] = {}
    stack: list[int] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == '"':
            i = _skip_string(text, i)
            continue
        if ch in _CLOSER_FOR:
            stack.append(i)
        elif ch in "}]" and stack and _CLOSER_FOR[text[stack[-1]]] == ch:
            pairs[stack.pop()] = i
        i += 1
    return pairs


def _index_wrapped_values(
    text: str, open_idx: int, close_idx: int, pairs: dict[int, int]
) -> list[tuple[int, int]] | None:
    """Return the ``(start, end)`` spans of the object values of a wrapper.

    A wrapper is an object whose members all have quoted-integer keys and
    object values. Returns None for anything else.
    """
    values: list[tuple[int, int]] = []
    pos = open_idx + 1
    while True:
        member = _INDEX_MEMBER.match(text, pos, close_idx)
        if member is None:
            return None
        value_start = member.end()
        value_end = pairs.get(value_start)
        if value_end is None or value_end >= close_idx:
            return None
        values.append((value_start, value_end))

        sep = _MEMBER_SEP.match(text, value_end + 1, close_idx)
        pos = sep.end()
        if pos == close_idx:
            return values
        if sep.group(1) is None:
            return None


def _render(
    text: str, start: int, end: int, pairs: dict[int, int], *, in_array: bool
) -> str:
    out: list[str] = []
    i = start
    while i < end:
        ch = text[i]
        if ch == '"':
            stop = min(_skip_string(text, i), end)
            out.append(text[i:stop])
            i = stop
            continue
        if ch in _CLOSER_FOR and i in pairs:
            close = pairs[i]
            values = (
                _index_wrapped_values(text, i, close, pairs) if ch == "{" else None
            )
            if values:
                inner = ", ".join(
                    _render(text, s, e + 1, pairs, in_array=True) for s, e in values
                )
                out.append(inner if in_array else f"[{inner}]")
            else:
                out.append(ch)
                out.append(_render(text, i + 1, close, pairs, in_array=ch == "["))
                out.append(text[close])
            i = close + 1
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def strip_index_keys(text: str) -> str:
    """Unwrap objects a model nested under quoted-integer keys.

    Each ``"N": {`` wrapper collapses to its bare ``{...}`` value. Wrappers
    sitting inside an array are spliced into it; anywhere else their values
    become an array, which is what the model was asked for.

        >>> strip_index_keys('[{"1": {"q": "x"}}, {"2": {"q": "y"}}]')
        '[{"q": "x"}, {"q": "y"}]'
    """
    pairs = _pair_brackets(text)
    return _render(text, 0, len(text), pairs, in_array=False)


def strip_trailing_commas(text: str) -> str:
    """Drop a comma that is followed only by whitespace and ``}`` or ``]``.

    Commas inside string literals are kept.
    """
    out: list[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == '"':
            stop = _skip_string(text, i)
            out.append(text[i:stop])
            i = stop
            continue
        if ch != "," or not _TRAILING_COMMA.match(text, i):
            out.append(ch)
        i += 1
    return "".join(out)


def repair(text: str) -> str:
    """Apply ``strip_index_keys`` then ``strip_trailing_commas``."""
    return strip_trailing_commas(strip_index_keys(text))
