"""Marker-delimited badge section in a README.

The managed region looks like::

    <!-- tea-rank-badge-start -->

    ![teaRank](./.github/tea-rank-badge.svg)

    <!-- tea-rank-badge-end -->

Only the first well-formed marker pair is rewritten; text outside it,
including any later marker pairs, is kept byte for byte.
"""

from __future__ import annotations

from pathlib import Path, PurePath

from tea_rank_badge.errors import ReadmeNotFoundError
from tea_rank_badge.output import Log
from tea_rank_badge.utils import normalize_path, read_text_safe

START_MARKER = "<!-- tea-rank-badge-start -->"
END_MARKER = "<!-- tea-rank-badge-end -->"
BADGE_ALT = "teaRank"
STATUS_HEADING = "## Status"


def generate_badge_markdown(svg_path: str | PurePath) -> str:
    """Build the canonical marker-wrapped badge snippet."""
    path = normalize_path(svg_path)
    relative = path if path.startswith("./") else f"./{path}"
    return "\n".join([
        START_MARKER,
        "",
        f"![{BADGE_ALT}]({relative})",
        "",
        END_MARKER,
    ])


def _find_section(document: str) -> tuple[int, int] | None:
    """Return (start, end) of the first marker pair, end exclusive."""
    start = document.find(START_MARKER)
    end = document.find(END_MARKER)
    if start == -1 or end == -1 or end <= start:
        return None
    return start, end + len(END_MARKER)


def extract_badge_section(document: str) -> str | None:
    """Return the current marker section, or None if there isn't a valid one."""
    span = _find_section(document)
    if span is None:
        return None
    return document[span[0]:span[1]]


def apply_badge_section(
    document: str,
    svg_path: str | PurePath,
    insert_if_absent: bool,
    log: Log | None = None,
) -> str:
    """Replace or append the badge section in ``document``.

    Applying it twice with the same ``svg_path`` gives the same document.
    """
    snippet = generate_badge_markdown(svg_path)
    span = _find_section(document)

    if span is not None:
        start, end = span
        return document[:start] + snippet + document[end:]

    if not insert_if_absent:
        if log is not None:
            log.warn("Badge markers not found in README. Use --insert to add them.")
        return document

    return f"{document.rstrip()}\n\n{STATUS_HEADING}\n\n{snippet}\n"


def update_readme(readme_path: Path, svg_path: str | PurePath, insert: bool, log: Log) -> str:
    """Read the README at ``readme_path`` and return its patched content.

    A missing or empty README is created from scratch when ``insert`` is
    set, otherwise :class:`ReadmeNotFoundError` is raised. Nothing is
    written here; pass the result to ``write_if_changed``.
    """
    content = read_text_safe(readme_path)

    if not content:
        if not insert:
            raise ReadmeNotFoundError(readme_path)
        log.debug(f"No README at {readme_path}, starting a new one")
        return "\n".join([
            "# Project",
            "",
            STATUS_HEADING,
            "",
            generate_badge_markdown(svg_path),
            "",
        ])

    return apply_badge_section(content, svg_path, insert, log)
