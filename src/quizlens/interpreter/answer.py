"""Pure parsing helpers for the model's free-text MCQ reply.

The reply is expected to end with a line ``ANSWER: <token>``. Nothing here
touches the network or the display, so every function can be exercised
against literal strings.
"""

from __future__ import annotations

import re

NO_MCQ_REPLY = "NO_MCQ"

# Keyword is case-sensitive, the option token is not.
_ANSWER_RE = re.compile(r"ANSWER:\s*([A-Da-d1-4])")

_PREVIEW_ELLIPSIS = "…"


def is_no_mcq(raw_text: str | None) -> bool:
    """True when the model reported that no question is visible."""
    return raw_text is not None and raw_text.strip() == NO_MCQ_REPLY


def extract_answer(raw_text: str | None) -> str | None:
    """Return the first ``ANSWER:`` token, lowercased, or None."""
    if not raw_text:
        return None
    match = _ANSWER_RE.search(raw_text)
    return match.group(1).lower() if match else None


def extract_preview(raw_text: str | None, token: str | None, max_length: int = 24) -> str | None:
    """Build a short label like ``"B) 4"`` from the option line for ``token``.

    Option lines written with a separator (``b)``, ``b.``, ``(b)``, ``[b]``)
    are preferred. A line where the token is followed only by whitespace is
    used when no separated line exists, since question text often starts
    with the same letter.
    """
    if not raw_text or not token:
        return None

    tok = re.escape(token)
    separated = re.compile(
        rf"^[ \t]*(?:\({tok}\)|\[{tok}\]|{tok}[ \t]*[).:\]\-])[ \t]*(\S.*)$",
        re.IGNORECASE | re.MULTILINE,
    )
    bare = re.compile(rf"^[ \t]*{tok}[ \t]+(\S.*)$", re.IGNORECASE | re.MULTILINE)

    match = separated.search(raw_text) or bare.search(raw_text)
    if match is None:
        return None
    text = match.group(1).strip()
    if len(text) > max_length:
        text = text[:max_length].rstrip() + _PREVIEW_ELLIPSIS
    return f"{token.upper()}) {text}"
