"""Extraction of the generated proposal from a generateContent response envelope.

Expected shape:
{
  "candidates": [
    {"content": {"parts": [{"text": "<h3>...</h3>..."}]}}
  ]
}

Only the first candidate's first part is read. Missing structure at any level
is an expected outcome (empty or blocked generations), reported as a
ValidationError rather than a KeyError/IndexError/TypeError.
"""

from apg.errors import ValidationError
from apg.state import Proposal

NO_PROPOSAL = "Could not generate proposal"


def _first(items, what: str):
    if not isinstance(items, list) or not items:
        raise ValidationError(f"{NO_PROPOSAL}: no {what}")
    return items[0]


def _field(obj, key: str):
    if not isinstance(obj, dict) or obj.get(key) is None:
        raise ValidationError(f"{NO_PROPOSAL}: missing '{key}'")
    return obj[key]


def extract_proposal(raw) -> Proposal:
    """Return the first candidate's first text part, unmodified.

    Raises ValidationError if candidates, content, parts or text is absent,
    or if the text is empty.
    """
    candidate = _first(_field(raw, "candidates"), "candidates")
    content = _field(candidate, "content")
    part = _first(_field(content, "parts"), "parts")
    text = _field(part, "text")
    if not isinstance(text, str) or not text:
        raise ValidationError(f"{NO_PROPOSAL}: empty text")
    return text
