"""Protocol and data classes for remote snippet services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class SnippetRef:
    """Canonical identity of a remote snippet after a create or update."""

    remote_id: str
    url: str


@runtime_checkable
class SnippetClient(Protocol):
    """What the reconciliation engine needs from a snippet service."""

    def create(self, filename: str, content: str, is_public: bool) -> SnippetRef:
        """Create a new snippet. Raises RemoteError on failure."""
        ...

    def update(self, remote_id: str, filename: str, content: str) -> SnippetRef:
        """Replace the content of an existing snippet.

        Raises RemoteNotFoundError when ``remote_id`` no longer exists and
        RemoteError on any other failure.
        """
        ...
