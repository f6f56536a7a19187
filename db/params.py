"""
db/params.py
------------
Positional placeholder conventions.

Queries across the app are authored with the legacy ``?`` token, one per
parameter, in the order of the parameter list. Before a query reaches a
backend it is rewritten into that backend's own convention.

Quoted literals, quoted identifiers and comments are left alone. Postgres JSON
operators spelled with ``?`` are not supported in ``?``-style templates.
"""

import itertools
import re
from enum import Enum
from typing import Optional

from errors import QueryRejected

_NUMERIC_RE = re.compile(r"\$(\d+)")
_FORMAT_RE = re.compile(r"%%|%s")


class Convention(str, Enum):
    """Placeholder notations a template can be written in."""

    QMARK = "qmark"      # ?, ?, ?
    NUMERIC = "numeric"  # $1, $2, $3
    FORMAT = "format"    # %s, %s, %s  (psycopg2)


def _is_escape_string(template: str, quote_at: int) -> bool:
    """True for ``E'...'`` literals, where backslash escapes the next character."""
    if quote_at == 0 or template[quote_at - 1] not in "eE":
        return False
    before = template[quote_at - 2] if quote_at >= 2 else " "
    return not (before.isalnum() or before == "_")


def _verbatim_end(template: str, start: int) -> int:
    """End of the literal, quoted identifier or comment opening at ``start``, or -1."""
    ch, nxt = template[start], template[start + 1:start + 2]
    if ch == "-" and nxt == "-":
        end = template.find("\n", start)
        return len(template) if end == -1 else end + 1
    if ch == "/" and nxt == "*":
        end = template.find("*/", start + 2)
        return len(template) if end == -1 else end + 2
    if ch not in ("'", '"'):
        return -1
    escapes = ch == "'" and _is_escape_string(template, start)
    i = start + 1
    while i < len(template):
        if escapes and template[i] == "\\":
            i += 2
            continue
        if template[i] == ch:
            return i + 1
        i += 1
    return len(template)


def _segments(template: str) -> list[tuple[str, bool]]:
    """
    Split a template into (text, verbatim) runs.

    Verbatim runs are quoted literals, quoted identifiers and comments; they
    never contain placeholders.
    """
    segments: list[tuple[str, bool]] = []
    start = i = 0
    while i < len(template):
        end = _verbatim_end(template, i)
        if end == -1:
            i += 1
            continue
        if i > start:
            segments.append((template[start:i], False))
        segments.append((template[i:end], True))
        start = i = end
    if start < len(template):
        segments.append((template[start:], False))
    return segments


def _unquoted(template: str) -> str:
    return " ".join(text for text, verbatim in _segments(template) if not verbatim)


def _format_markers(template: str) -> int:
    return sum(1 for m in _FORMAT_RE.findall(template) if m == "%s")


def detect_convention(template: str) -> Optional[Convention]:
    """Return the convention a template uses, or None if it has no placeholders."""
    bare = _unquoted(template)
    if "?" in bare:
        return Convention.QMARK
    if _NUMERIC_RE.search(bare):
        return Convention.NUMERIC
    if _format_markers(bare):
        return Convention.FORMAT
    return None


def count_placeholders(template: str) -> int:
    """Number of parameters the template expects."""
    convention = detect_convention(template)
    if convention is Convention.QMARK:
        return _unquoted(template).count("?")
    if convention is Convention.NUMERIC:
        return max(int(n) for n in _NUMERIC_RE.findall(_unquoted(template)))
    if convention is Convention.FORMAT:
        return _format_markers(_unquoted(template))
    return 0


def normalize(template: str, target: Convention) -> str:
    """
    Rewrite a ``?``-style template into the target convention.

    Args:
        template: SQL text.
        target: Convention understood by the backend that will run it.

    Returns:
        The rewritten template. Templates already in the target convention,
        or without placeholders, are returned unchanged.

    Raises:
        QueryRejected: If the template uses a convention other than ``?``
            and the target differs (reordering is not supported).
    """
    source = detect_convention(template)
    if source is None or source is target:
        return template
    if source is not Convention.QMARK:
        raise QueryRejected(
            f"Cannot rewrite {source.value} placeholders as {target.value}."
        )

    counter = itertools.count(1)
    if target is Convention.NUMERIC:
        marker = lambda _m: f"${next(counter)}"  # noqa: E731
    else:
        marker = lambda _m: "%s"  # noqa: E731

    parts = []
    for text, verbatim in _segments(template):
        if target is Convention.FORMAT:
            # psycopg2 interprets % everywhere, literals and comments included
            text = text.replace("%", "%%")
        if not verbatim:
            text = re.sub(r"\?", marker, text)
        parts.append(text)
    return "".join(parts)
