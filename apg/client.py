"""Resilient client for the generative-language endpoint.

One send() is one logical call: up to max_attempts POSTs, with
base_delay * 2**i paid between attempt i and attempt i + 1 (1s, 2s, 4s, 8s
by default) and never before the first. Every failure is retried the same
way, including 4xx statuses. Exhaustion surfaces as a single TerminalError.

The backoff wait is an awaited sleep, so other tasks keep running, and both
the wait and the in-flight POST are cancelled when the owning task is.
"""

import asyncio
import sys

import httpx
from tenacity import AsyncRetrying, RetryError, retry_if_exception_type, stop_after_attempt, wait_exponential

from apg.config import get_api_key, get_config
from apg.errors import TerminalError, TransientTransportFailure
from apg.prompt import PromptPayload
from apg.state import AttemptRecord


class ResilientClient:
    """Sends PromptPayloads and returns the decoded JSON envelope."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        model: str | None = None,
        max_attempts: int | None = None,
        base_delay_ms: int | None = None,
        timeout_s: float | None = None,
        sleep=asyncio.sleep,
    ):
        config = get_config()
        self._api_key = api_key or get_api_key()
        self._model = model or config["model"]
        self._url = config["endpoint"].format(model=self._model)
        self._max_attempts = max_attempts if max_attempts is not None else config.get("max_attempts", 5)
        if self._max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self._max_attempts}.")
        self._base_delay_ms = base_delay_ms if base_delay_ms is not None else config.get("base_delay_ms", 1000)
        self._sleep = sleep

        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout_s or config.get("request_timeout_s", 60))

        self.last_attempts: list[AttemptRecord] = []

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    async def __aenter__(self) -> "ResilientClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()

    async def _post(self, body: dict):
        """Perform one attempt. Any failure becomes a TransientTransportFailure."""
        try:
            response = await self._http.post(
                self._url,
                headers={"Content-Type": "application/json", "x-goog-api-key": self._api_key},
                json=body,
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            raise TransientTransportFailure(f"API Error: {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise TransientTransportFailure(f"Transport error: {exc.__class__.__name__}") from exc
        except ValueError as exc:
            # Body was not JSON
            raise TransientTransportFailure("Response body is not valid JSON") from exc

    async def send(self, payload: PromptPayload):
        """Send the payload, retrying transient failures with exponential backoff.

        Returns the decoded JSON envelope of the first successful attempt.
        Raises TerminalError once max_attempts attempts have failed.
        """
        body = payload.to_request_body()
        attempts: list[AttemptRecord] = []
        self.last_attempts = attempts
        pending_delay_ms = 0

        def _before_sleep(state) -> None:
            nonlocal pending_delay_ms
            pending_delay_ms = round(state.next_action.sleep * 1000)
            print(
                f"[APG] Transient error: {state.outcome.exception()!r}. "
                f"Retrying in {state.next_action.sleep:.0f}s "
                f"(attempt {state.attempt_number}/{self._max_attempts})...",
                file=sys.stderr,
            )

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=self._base_delay_ms / 1000, exp_base=2, min=0),
            retry=retry_if_exception_type(TransientTransportFailure),
            before_sleep=_before_sleep,
            sleep=self._sleep,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    attempts.append(
                        AttemptRecord(
                            attempt_number=attempt.retry_state.attempt_number - 1,
                            delay_before_ms=pending_delay_ms,
                        )
                    )
                    raw = await self._post(body)
        except RetryError as exc:
            last = exc.last_attempt.exception()
            print(
                f"[APG] Giving up after {len(attempts)} attempts: {last!r}",
                file=sys.stderr,
            )
            raise TerminalError(f"All {self._max_attempts} attempts failed.") from last

        return raw
