"""Error types raised by gistify.

Convention:
- Every error derives from ``GistifyError``.  The CLI catches that base class,
  prints ``Error: <message>`` to stderr and exits non-zero.
- ``RemoteNotFoundError`` is the only error recovered locally: an update that
  hits a deleted gist falls back to creating a new one.
"""

from __future__ import annotations


class GistifyError(Exception):
    """Base class for all fatal gistify errors."""


class PreconditionError(GistifyError):
    """Raised before a run starts: missing credential, invalid pattern."""


class TraversalError(GistifyError):
    """Raised when the directory tree cannot be enumerated."""


class SyncIOError(GistifyError):
    """Raised when a local read or write fails."""


class FileReadError(SyncIOError):
    """Raised when a candidate file exists but cannot be read."""


class StoreIOError(SyncIOError):
    """Raised when the metadata store cannot be read or written."""


class CorruptStateError(GistifyError):
    """Raised when the metadata store exists but cannot be parsed."""


class RemoteError(GistifyError):
    """Raised for any failed call to the snippet service."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RemoteNotFoundError(RemoteError):
    """Raised when the snippet addressed by an update no longer exists."""
