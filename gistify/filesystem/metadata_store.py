"""Metadata store: the local path -> SnippetRecord mapping kept between runs."""

from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import IO, TYPE_CHECKING

from pydantic import ValidationError

from gistify.exceptions import CorruptStateError, StoreIOError
from gistify.models.snippet import SnippetRecord

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

JSON_INDENT = 4


def load_metadata(store_path: Path) -> dict[str, SnippetRecord]:
    """Load the mapping from ``store_path``.

    A missing file yields an empty mapping.  A file that exists but is not a
    JSON object of valid records raises CorruptStateError.
    """
    try:
        raw = store_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No metadata store at %s, starting empty", store_path)
        return {}
    except OSError as exc:
        msg = f"could not read metadata file {store_path}: {exc}"
        raise StoreIOError(msg) from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        msg = f"metadata file {store_path} is not valid JSON: {exc}"
        raise CorruptStateError(msg) from exc
    if not isinstance(data, dict):
        msg = f"metadata file {store_path} must contain a JSON object"
        raise CorruptStateError(msg)

    mapping: dict[str, SnippetRecord] = {}
    for path, entry in data.items():
        try:
            mapping[path] = SnippetRecord.model_validate(entry)
        except ValidationError as exc:
            msg = f"metadata file {store_path} has an invalid entry for {path!r}: {exc}"
            raise CorruptStateError(msg) from exc
    logger.debug("Loaded %d record(s) from %s", len(mapping), store_path)
    return mapping


def _new_file_mode() -> int:
    """Mode a plain ``open(path, "w")`` would give a new file under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


@contextmanager
def _atomic_writer(path: Path) -> Iterator[IO[str]]:
    """Yield a temp file next to ``path``; rename it over ``path`` only on success.

    ``mkstemp`` creates files as 0600, so the temp file is given the mode of
    the file it replaces (or the umask default) before the rename.
    """
    try:
        mode = stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        mode = _new_file_mode()
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            yield f
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def save_metadata(store_path: Path, mapping: dict[str, SnippetRecord]) -> None:
    """Write the full mapping to ``store_path``, replacing any previous file atomically."""
    data = {path: record.to_json_dict() for path, record in mapping.items()}
    try:
        with _atomic_writer(store_path) as f:
            json.dump(data, f, indent=JSON_INDENT, sort_keys=True)
            f.write("\n")
    except OSError as exc:
        msg = f"could not save gistify metadata file {store_path}: {exc}"
        raise StoreIOError(msg) from exc
    logger.debug("Saved %d record(s) to %s", len(mapping), store_path)
