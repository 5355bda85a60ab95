"""Text utilities for rich-text content, dates and titles."""

import math
import re
import unicodedata
from datetime import datetime, timezone
from typing import Any

WORDS_PER_MINUTE = 200

_WHITESPACE_RE = re.compile(r"\s+")


def extract_text(node: Any) -> str:
    """
    Extract the plain text of a rich-text node tree.

    A node contributes its own ``text`` followed by the text of its
    ``children``; lists contribute each member. Parts are joined with single
    spaces. Strings are taken as-is and any other shape contributes nothing.

    The tree is walked with an explicit stack so deeply nested documents
    cannot exhaust the interpreter's recursion limit.

    Args:
        node: Rich-text node, list of nodes, string or anything else

    Returns:
        Extracted text (may contain runs of whitespace)
    """
    parts: list[str] = []
    stack: list[Any] = [node]

    while stack:
        current = stack.pop()
        if not current:
            continue
        if isinstance(current, str):
            parts.append(current)
        elif isinstance(current, (list, tuple)):
            # Reversed so members come off the stack in document order
            stack.extend(reversed(current))
        elif isinstance(current, dict):
            text = current.get("text")
            children = current.get("children")
            pending: list[Any] = []
            if isinstance(text, str):
                pending.append(text)
            if isinstance(children, list):
                pending.extend(children)
            stack.extend(reversed(pending))

    return " ".join(parts)


def document_root(content: Any) -> Any:
    """Return the ``root`` node of a rich-text document, or the value itself."""
    if isinstance(content, dict) and "root" in content:
        return content["root"]
    return content


def count_words(text: str) -> int:
    """Count whitespace-separated words in text."""
    return len([w for w in _WHITESPACE_RE.split(text.strip()) if w])


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves rounding up."""
    return int(math.floor(value + 0.5))


def estimate_read_time(content: Any, words_per_minute: int = WORDS_PER_MINUTE) -> int | None:
    """
    Estimate read time in minutes for a rich-text document.

    Returns None when the document has no words. Never raises for
    malformed documents; unknown shapes count as empty text.
    """
    words = count_words(extract_text(document_root(content)))
    if not words:
        return None
    return max(1, round_half_up(words / words_per_minute))


def parse_timestamp(value: Any) -> int:
    """
    Parse a timestamp into epoch milliseconds.

    Accepts ISO 8601 strings (with or without a trailing ``Z``) and datetime
    objects. Naive values are treated as UTC. Anything missing or
    unparseable yields 0.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            return 0
    else:
        return 0

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return int(parsed.timestamp() * 1000)
    except (OverflowError, OSError, ValueError):
        return 0


def effective_timestamp(published_at: Any, created_at: Any) -> int:
    """Epoch milliseconds of ``published_at`` when valid, else ``created_at``, else 0."""
    return parse_timestamp(published_at) or parse_timestamp(created_at)


def format_date(value: Any) -> str | None:
    """Format a timestamp for display, e.g. ``Jan 5, 2024`` (UTC)."""
    millis = parse_timestamp(value)
    if not millis:
        return None
    date = datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    return f"{date:%b} {date.day}, {date.year}"


def collation_key(text: str | None) -> tuple[str, str]:
    """
    Sort key approximating locale-aware string comparison.

    Primary: accent-folded, case-folded text. Secondary: lowercase before
    uppercase, so ``"apple"`` sorts before ``"Apple"``.
    """
    value = text or ""
    decomposed = unicodedata.normalize("NFKD", value)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), value.swapcase()


def pluralize(count: int, noun: str) -> str:
    """Return e.g. ``1 post`` or ``3 posts``."""
    return f"{count} {noun}{'' if count == 1 else 's'}"
