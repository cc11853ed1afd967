"""Proposal state machine: owns the RequestState the presentation layer renders.

Transitions:
    idle/error --submit(idea)--> loading
    loading --client_succeeded--> success(proposal)
    loading --client_failed--> error(kind, fixed message)
    success/error --reset--> idle
    loading --reset--> idle  (caller closed the interaction; request cancelled)

Each submit is tagged with a new generation token. Results carrying a stale
token (the caller reset after the request started) are dropped, so a late
response can never overwrite the post-reset state.
"""

import asyncio
import sys
from typing import Callable

from apg.config import get_config
from apg.errors import InvalidInput, ProposalError, TerminalError, ValidationError
from apg.prompt import build_payload
from apg.state import Proposal, RequestState
from apg.utils.parsing import extract_proposal

Listener = Callable[[RequestState], None]


class ProposalStateMachine:
    """Serializes proposal requests: at most one is in flight at a time."""

    def __init__(self, client, error_message: str | None = None):
        self._client = client
        self._error_message = error_message or get_config()["error_message"]
        self._state = RequestState.idle()
        self._generation = 0
        self._task: asyncio.Task | None = None
        self._listeners: list[Listener] = []

    @property
    def current_state(self) -> RequestState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener with every new state. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _transition(self, new_state: RequestState) -> None:
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)

    # --- caller events ---

    def submit(self, idea: str) -> asyncio.Task | None:
        """Start generating a proposal for idea.

        Accepted only from idle or error. No-op (returns None) while a request
        is loading, while a proposal is shown, or when the idea is
        empty/whitespace. Otherwise moves to loading and returns the task
        running the request. Must be called from a running event loop.
        """
        if self._state.status not in ("idle", "error"):
            return None
        try:
            payload = build_payload(idea)
        except InvalidInput:
            return None

        loop = asyncio.get_running_loop()
        self._generation += 1
        self._transition(RequestState.loading())
        self._task = loop.create_task(self._run(self._generation, payload))
        return self._task

    def reset(self) -> None:
        """Return to idle ("new idea" / close), dropping any held proposal.

        From loading, the in-flight request and any pending backoff wait are
        cancelled. From idle this does nothing.
        """
        if self._state.status == "idle":
            return
        self._generation += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self._transition(RequestState.idle())

    # --- client events ---

    async def _run(self, generation: int, payload) -> None:
        try:
            raw = await self._client.send(payload)
            proposal = extract_proposal(raw)
        except ProposalError as exc:
            self._client_failed(generation, exc)
        except Exception as exc:
            print(f"[APG] Unexpected error during proposal request: {exc!r}", file=sys.stderr)
            self._client_failed(generation, exc)
        else:
            self._client_succeeded(generation, proposal)

    def _client_succeeded(self, generation: int, proposal: Proposal) -> None:
        if generation != self._generation:
            print(f"[APG] Discarding stale result (generation {generation}).", file=sys.stderr)
            return
        self._task = None
        self._transition(RequestState.success(proposal))

    def _client_failed(self, generation: int, error: Exception) -> None:
        if generation != self._generation:
            print(f"[APG] Discarding stale failure (generation {generation}).", file=sys.stderr)
            return
        if isinstance(error, TerminalError):
            kind = "terminal"
        elif isinstance(error, ValidationError):
            kind = "validation"
        else:
            kind = "unexpected"
        print(f"[APG] Proposal request failed ({kind}): {error}", file=sys.stderr)
        self._task = None
        self._transition(RequestState.error(kind, self._error_message))
