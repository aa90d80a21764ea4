"""Reconciliation: decide create / update / skip for each candidate file."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from gistify.exceptions import FileReadError, RemoteNotFoundError
from gistify.filesystem.metadata_store import load_metadata, save_metadata
from gistify.models.snippet import SnippetRecord

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from gistify.config import SyncConfig
    from gistify.remote.base import SnippetClient, SnippetRef

logger = logging.getLogger(__name__)


class SyncStatus(StrEnum):
    """Outcome of reconciling a single file."""

    CREATED = "created"
    UPDATED = "updated"
    RECREATED = "recreated"
    SKIPPED_UNCHANGED = "skipped_unchanged"
    SKIPPED_EMPTY = "skipped_empty"
    SKIPPED_MISSING = "skipped_missing"


@dataclass
class OutcomeEntry:
    """What happened to one candidate file."""

    path: str
    status: SyncStatus
    url: str = ""


@dataclass
class ReconcileResult:
    """The mapping to persist plus a per-file report, in processing order."""

    mapping: dict[str, SnippetRecord] = field(default_factory=dict)
    report: list[OutcomeEntry] = field(default_factory=list)

    def count(self, status: SyncStatus) -> int:
        """Number of report entries with ``status``."""
        return sum(1 for entry in self.report if entry.status == status)


_STATUS_LABELS = {
    SyncStatus.CREATED: "Created  ",
    SyncStatus.UPDATED: "Updated  ",
    SyncStatus.RECREATED: "Recreated",
}


def format_outcome(entry: OutcomeEntry) -> str | None:
    """Render the status line printed for ``entry``; None for silent skips."""
    if entry.status in _STATUS_LABELS:
        return f"{_STATUS_LABELS[entry.status]} {entry.url} for file {entry.path}"
    if entry.status == SyncStatus.SKIPPED_UNCHANGED:
        return f"Skipping  {entry.url} {entry.path} (file unchanged)"
    if entry.status == SyncStatus.SKIPPED_EMPTY:
        return f"Skipping (no content): {entry.path}"
    return None


def _read_text(path: str) -> str:
    """Read ``path`` as UTF-8; undecodable bytes become U+FFFD rather than failing."""
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            return f.read()
    except OSError as exc:
        msg = f"could not access file {path}: {exc}"
        raise FileReadError(msg) from exc


def _push(
    client: SnippetClient,
    record: SnippetRecord | None,
    filename: str,
    content: str,
    public: bool,
) -> tuple[SnippetRef, SyncStatus]:
    """Create or update the remote snippet; fall back to create when an update target is gone."""
    if record is None or not record.remote_id:
        return client.create(filename, content, public), SyncStatus.CREATED

    try:
        return client.update(record.remote_id, filename, content), SyncStatus.UPDATED
    except RemoteNotFoundError:
        logger.warning(
            "Snippet %s for %s no longer exists, creating a new one",
            record.remote_id,
            record.source_path,
        )
    return client.create(filename, content, public), SyncStatus.RECREATED


def reconcile(
    candidate_files: Sequence[str],
    prior_mapping: Mapping[str, SnippetRecord],
    public: bool,
    client: SnippetClient,
    *,
    on_outcome: Callable[[OutcomeEntry], None] | None = None,
) -> ReconcileResult:
    """Synchronize ``candidate_files`` against ``prior_mapping``.

    Files are processed strictly in the given order, one remote call at a
    time.  ``prior_mapping`` is not mutated; entries for paths that are not
    candidates are carried over as-is.  A file that cannot be stat'ed vanished
    after listing and is skipped without error.  Any error other than a
    not-found update propagates and aborts the run.
    """
    result = ReconcileResult(mapping=dict(prior_mapping))

    def _report(entry: OutcomeEntry) -> None:
        result.report.append(entry)
        if on_outcome is not None:
            on_outcome(entry)

    for path in candidate_files:
        try:
            stat = os.stat(path)
        except OSError:
            logger.debug("Skipping %s: file vanished before processing", path)
            _report(OutcomeEntry(path=path, status=SyncStatus.SKIPPED_MISSING))
            continue

        content = _read_text(path)
        if not content:
            _report(OutcomeEntry(path=path, status=SyncStatus.SKIPPED_EMPTY))
            continue

        mod_time = int(stat.st_mtime)
        record = prior_mapping.get(path)
        if record is not None and record.last_modified_at == mod_time:
            logger.debug("Skipping %s: unchanged since %d", path, mod_time)
            _report(
                OutcomeEntry(path=path, status=SyncStatus.SKIPPED_UNCHANGED, url=record.remote_url)
            )
            continue

        ref, status = _push(client, record, os.path.basename(path), content, public)
        result.mapping[path] = SnippetRecord(
            remote_id=ref.remote_id,
            remote_url=ref.url,
            source_path=path,
            last_modified_at=mod_time,
            is_public=public,
        )
        _report(OutcomeEntry(path=path, status=status, url=ref.url))

    return result


class Reconciler:
    """Runs a full sync: load state, reconcile, persist state.

    Configuration and the remote client are passed in explicitly so that the
    engine can be exercised with fakes.
    """

    def __init__(self, config: SyncConfig, client: SnippetClient) -> None:
        self.config = config
        self.client = client

    def load(self) -> dict[str, SnippetRecord]:
        """Load the prior mapping from the configured store."""
        return load_metadata(self.config.store_path)

    def run(
        self,
        candidate_files: Sequence[str],
        prior: Mapping[str, SnippetRecord] | None = None,
        on_outcome: Callable[[OutcomeEntry], None] | None = None,
    ) -> ReconcileResult:
        """Reconcile ``candidate_files`` and save the new mapping.

        ``prior`` is loaded from the store when not given.  Nothing is saved
        if reconciliation raises.
        """
        if prior is None:
            prior = self.load()
        result = reconcile(
            candidate_files,
            prior,
            self.config.is_public,
            self.client,
            on_outcome=on_outcome,
        )
        save_metadata(self.config.store_path, result.mapping)
        logger.info(
            "Sync finished: %d created, %d updated, %d recreated",
            result.count(SyncStatus.CREATED),
            result.count(SyncStatus.UPDATED),
            result.count(SyncStatus.RECREATED),
        )
        return result
