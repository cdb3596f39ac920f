from __future__ import annotations
"""Error kinds raised while reconciling buckets.

Every error is fatal for the run: the entry point logs it and exits non-zero.
"""


class ReconcileError(RuntimeError):
    """Base class for all errors that abort a reconciliation run."""


class InvocationError(ReconcileError):
    """Raised when the command line arguments are malformed."""


class ConfigurationError(ReconcileError):
    """Raised when credentials, endpoints or the output directory are unusable."""


class TransportError(ReconcileError):
    """Raised when a listing request fails or returns a malformed response."""

    def __init__(self, message: str, *, bucket: str | None = None, backend: str | None = None):
        super().__init__(message)
        self.bucket = bucket
        self.backend = backend


class MalformedTimestamp(ReconcileError, ValueError):
    """Raised when a cutoff or last-modified value cannot be parsed."""


class PersistenceError(ReconcileError):
    """Raised when a report file cannot be written."""
