"""Request lifecycle state: the single value the presentation layer renders."""

from dataclasses import dataclass
from typing import Literal

# Constrained HTML (headers, lists, paragraphs) emitted by the model. Opaque here.
Proposal = str

Status = Literal["idle", "loading", "success", "error"]
ErrorKind = Literal["terminal", "validation", "unexpected"]


@dataclass(frozen=True)
class RequestState:
    status: Status
    proposal: Proposal | None = None  # Set only when status == "success".
    error_kind: ErrorKind | None = None  # Set only when status == "error".
    message: str | None = None  # User-facing text, never internal detail.

    @classmethod
    def idle(cls) -> "RequestState":
        return cls("idle")

    @classmethod
    def loading(cls) -> "RequestState":
        return cls("loading")

    @classmethod
    def success(cls, proposal: Proposal) -> "RequestState":
        return cls("success", proposal=proposal)

    @classmethod
    def error(cls, kind: ErrorKind, message: str) -> "RequestState":
        return cls("error", error_kind=kind, message=message)

    @property
    def is_loading(self) -> bool:
        return self.status == "loading"


@dataclass(frozen=True)
class AttemptRecord:
    """One transport attempt inside a single send(). Not persisted."""

    attempt_number: int  # 0-indexed.
    delay_before_ms: int  # Backoff paid before this attempt; 0 for the first.
