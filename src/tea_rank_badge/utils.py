"""Cross-platform path normalization and safe file reads."""

from __future__ import annotations

from pathlib import Path, PurePath

from tea_rank_badge.errors import FilesystemError


def normalize_path(path: str | PurePath) -> str:
    """Normalize path separators to forward slashes."""
    return str(path).replace("\\", "/")


def read_bytes_safe(path: Path) -> bytes | None:
    """Read a file, returning None if it does not exist.

    Any other failure is raised as :class:`FilesystemError`.
    """
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise FilesystemError(path, f"Could not read {path}: {exc}") from exc


def read_text_safe(path: Path) -> str | None:
    """Read a UTF-8 text file, returning None if it does not exist."""
    raw = read_bytes_safe(path)
    if raw is None:
        return None
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FilesystemError(path, f"{path} is not valid UTF-8: {exc}") from exc
