"""Shields.io style SVG badge generator."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from xml.sax.saxutils import escape


class BadgeStyle(str, Enum):
    FLAT = "flat"
    FLAT_SQUARE = "flat-square"
    PLASTIC = "plastic"
    FOR_THE_BADGE = "for-the-badge"


NAMED_COLORS: dict[str, str] = {
    "brightgreen": "#4c1",
    "green": "#97ca00",
    "yellowgreen": "#a4a61d",
    "yellow": "#dfb317",
    "orange": "#fe7d37",
    "red": "#e05d44",
    "blue": "#007ec6",
    "lightgrey": "#9f9f9f",
    "lightgray": "#9f9f9f",
    "grey": "#555",
    "gray": "#555",
}

LABEL_COLOR = "#555"

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_QUOTE = {'"': "&quot;"}

# Lower bound of each bucket, highest first.
RANK_COLORS: list[tuple[float, str]] = [
    (90, "brightgreen"),
    (75, "green"),
    (60, "yellowgreen"),
    (40, "yellow"),
    (20, "orange"),
]


@dataclass(frozen=True)
class BadgeSpec:
    label: str
    value: str
    color: str
    style: BadgeStyle = BadgeStyle.FLAT


def color_for_rank(rank: float) -> str:
    """Map a teaRank to a shields color name."""
    for lower, color in RANK_COLORS:
        if rank >= lower:
            return color
    return "red"


def format_rank(rank: float, precision: int) -> str:
    """Render a rank as a whole number or with ``precision`` fixed decimals."""
    if precision == 0:
        # round half up
        return str(math.floor(rank + 0.5))
    return f"{rank:.{precision}f}"


def resolve_color(color: str) -> str:
    """Turn a shields color name or bare hex into an SVG fill value."""
    named = NAMED_COLORS.get(color.lower())
    if named:
        return named
    match = _HEX_RE.match(color)
    if match:
        return f"#{match.group(1).lower()}"
    return color


def _text_width(text: str, per_char: int = 7) -> int:
    return len(text) * per_char + 10


def _flat(label: str, value: str, color: str, radius: int, gradient: bool) -> str:
    label_width = _text_width(label)
    value_width = _text_width(value)
    total_width = label_width + value_width
    gradient_def = ""
    gradient_rect = ""
    if gradient:
        gradient_def = """
  <linearGradient id="b" x2="0" y2="100%">
    <stop offset="0" stop-color="#bbb" stop-opacity=".1"/>
    <stop offset="1" stop-opacity=".1"/>
  </linearGradient>"""
        gradient_rect = f'\n    <rect width="{total_width}" height="20" fill="url(#b)"/>'

    return f"""<svg xmlns="http://www.w3.org/2000/svg" width="{total_width}" height="20" role="img" aria-label="{label}: {value}">
  <title>{label}: {value}</title>{gradient_def}
  <clipPath id="a">
    <rect width="{total_width}" height="20" rx="{radius}" fill="#fff"/>
  </clipPath>
  <g clip-path="url(#a)">
    <rect width="{label_width}" height="20" fill="{LABEL_COLOR}"/>
    <rect x="{label_width}" width="{value_width}" height="20" fill="{color}"/>{gradient_rect}
  </g>
  <g fill="#fff" text-anchor="middle" font-family="DejaVu Sans,Verdana,Geneva,sans-serif" font-size="11">
    <text x="{label_width / 2}" y="15" fill="#010101" fill-opacity=".3">{label}</text>
    <text x="{label_width / 2}" y="14">{label}</text>
    <text x="{label_width + value_width / 2}" y="15" fill="#010101" fill-opacity=".3">{value}</text>
    <text x="{label_width + value_width / 2}" y="14">{value}</text>
  </g>
</svg>"""


def _plastic(label: str, value: str, color: str) -> str:
    label_width = _text_width(label)
    value_width = _text_width(value)
    total_width = label_width + value_width

    return f"""<svg xmlns="http://www.w3.org/2000/svg" width="{total_width}" height="18" role="img" aria-label="{label}: {value}">
  <title>{label}: {value}</title>
  <linearGradient id="b" x2="0" y2="100%">
    <stop offset="0" stop-color="#fff" stop-opacity=".7"/>
    <stop offset=".1" stop-color="#aaa" stop-opacity=".1"/>
    <stop offset=".9" stop-opacity=".3"/>
    <stop offset="1" stop-opacity=".5"/>
  </linearGradient>
  <clipPath id="a">
    <rect width="{total_width}" height="18" rx="4" fill="#fff"/>
  </clipPath>
  <g clip-path="url(#a)">
    <rect width="{label_width}" height="18" fill="{LABEL_COLOR}"/>
    <rect x="{label_width}" width="{value_width}" height="18" fill="{color}"/>
    <rect width="{total_width}" height="18" fill="url(#b)"/>
  </g>
  <g fill="#fff" text-anchor="middle" font-family="DejaVu Sans,Verdana,Geneva,sans-serif" font-size="11">
    <text x="{label_width / 2}" y="14" fill="#010101" fill-opacity=".3">{label}</text>
    <text x="{label_width / 2}" y="13">{label}</text>
    <text x="{label_width + value_width / 2}" y="14" fill="#010101" fill-opacity=".3">{value}</text>
    <text x="{label_width + value_width / 2}" y="13">{value}</text>
  </g>
</svg>"""


def _for_the_badge(label: str, value: str, color: str) -> str:
    label_width = _text_width(label, per_char=9) + 8
    value_width = _text_width(value, per_char=9) + 8
    total_width = label_width + value_width

    return f"""<svg xmlns="http://www.w3.org/2000/svg" width="{total_width}" height="28" role="img" aria-label="{label}: {value}">
  <title>{label}: {value}</title>
  <g shape-rendering="crispEdges">
    <rect width="{label_width}" height="28" fill="{LABEL_COLOR}"/>
    <rect x="{label_width}" width="{value_width}" height="28" fill="{color}"/>
  </g>
  <g fill="#fff" text-anchor="middle" font-family="Verdana,Geneva,DejaVu Sans,sans-serif" font-size="10" letter-spacing="1">
    <text x="{label_width / 2}" y="18">{label}</text>
    <text x="{label_width + value_width / 2}" y="18" font-weight="bold">{value}</text>
  </g>
</svg>"""


def render_badge(spec: BadgeSpec) -> str:
    """Generate a shields.io-style SVG badge for ``spec``."""
    style = BadgeStyle(spec.style)
    label, value = spec.label, spec.value
    if style is BadgeStyle.FOR_THE_BADGE:
        label, value = label.upper(), value.upper()
    label = escape(label, _QUOTE)
    value = escape(value, _QUOTE)
    color = escape(resolve_color(spec.color), _QUOTE)

    if style is BadgeStyle.FLAT:
        return _flat(label, value, color, radius=3, gradient=True)
    if style is BadgeStyle.FLAT_SQUARE:
        return _flat(label, value, color, radius=0, gradient=False)
    if style is BadgeStyle.PLASTIC:
        return _plastic(label, value, color)
    return _for_the_badge(label, value, color)


def create_rank_badge(
    rank: float,
    label: str,
    style: BadgeStyle,
    precision: int,
    color: str | None = None,
) -> str:
    """Render the teaRank badge SVG; ``color`` overrides the rank buckets."""
    spec = BadgeSpec(
        label=label,
        value=format_rank(rank, precision),
        color=color or color_for_rank(rank),
        style=style,
    )
    return render_badge(spec)
