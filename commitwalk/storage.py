"""Write commit messages and the summary table to disk."""

from __future__ import annotations

import logging
from pathlib import Path

from commitwalk.errors import PersistError

logger = logging.getLogger(__name__)

COMMIT_SUFFIX = ".commit"


def commit_path(directory: str | Path, commit_hash: str) -> Path:
    """Return ``<directory>/<hash>.commit``; an empty directory means the cwd."""
    return Path(directory or ".") / f"{commit_hash}{COMMIT_SUFFIX}"


def write_commit_message(directory: str | Path, commit_hash: str, message: str) -> Path:
    """Persist *message* verbatim under *directory*, creating it if needed."""
    path = commit_path(directory, commit_hash)
    _write(path, message)
    logger.debug("wrote %s (%d chars)", path, len(message))
    return path


def write_table(path: str | Path, text: str) -> Path:
    path = Path(path)
    _write(path, text)
    logger.debug("wrote summary table %s", path)
    return path


def _write(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        # newline="" keeps the text byte-for-byte as extracted
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
    except OSError as exc:
        raise PersistError(f"can't write {path}: {exc}") from exc
