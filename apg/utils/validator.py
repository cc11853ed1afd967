"""Idea screening: the gate in front of prompt building, so blank submissions never cost a request."""

from apg.errors import InvalidInput


def validate_input(idea: str) -> str:
    """Return the idea with surrounding whitespace removed.

    The trimmed text is what gets embedded after the "Client Idea: " label.
    Raises InvalidInput for non-strings and for text that is blank once
    trimmed; the state machine treats that as "stay where you are".
    """
    if not isinstance(idea, str):
        raise InvalidInput(f"Idea must be text, got {type(idea).__name__}.")
    idea = idea.strip()
    if not idea:
        raise InvalidInput("Idea is empty.")
    return idea
