"""tea-rank-badge: keep a teaRank SVG badge and README section up to date."""

__version__ = "0.1.0"
