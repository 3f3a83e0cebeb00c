"""Change-detecting file writer."""

from __future__ import annotations

from pathlib import Path

from tea_rank_badge.errors import FilesystemError
from tea_rank_badge.output import Log
from tea_rank_badge.utils import read_bytes_safe


def write_if_changed(path: Path, content: str, dry_run: bool, log: Log) -> bool:
    """Write ``content`` to ``path`` only if it differs from what is on disk.

    Returns True when the file was written, or would have been in dry-run
    mode. Identical content is never rewritten.
    """
    existing = read_bytes_safe(path)
    encoded = content.encode("utf-8")

    if existing == encoded:
        log.debug(f"No changes to {path}")
        return False

    if dry_run:
        log.info(f"[DRY RUN] Would write {path}")
        if existing is None:
            log.info("  File does not exist, would create")
        else:
            log.info(f"  File would change ({len(existing)} bytes → {len(encoded)} bytes)")
        return True

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(encoded)
    except OSError as exc:
        raise FilesystemError(path, f"Could not write {path}: {exc}") from exc

    if existing is None:
        log.success(f"Created {path}")
    else:
        log.success(f"Updated {path}")
    return True
