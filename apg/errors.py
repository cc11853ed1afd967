"""Error taxonomy for proposal generation.

InvalidInput never reaches the network. TransientTransportFailure is absorbed
by the client's retry loop; only TerminalError (retries exhausted) and
ValidationError (unexpected response shape) reach the state machine.
"""


class ProposalError(Exception):
    """Base class for every failure raised by this package."""


class ConfigError(ProposalError):
    """Missing or unusable configuration (e.g. no API key)."""


class InvalidInput(ProposalError, ValueError):
    """The idea was empty or whitespace-only."""


class TransientTransportFailure(ProposalError):
    """A single attempt failed: network error, timeout, error status or unreadable body."""


class TerminalError(ProposalError):
    """Every allowed attempt failed."""


class ValidationError(ProposalError):
    """The response envelope did not contain generated text."""
