"""Exception hierarchy for tea-rank-badge.

Every component raises a subclass of :class:`TeaRankError`; the CLI is
the only place that turns them into exit codes.
"""

from __future__ import annotations

from pathlib import Path


class TeaRankError(Exception):
    """Base class for all tea-rank-badge errors."""


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class RegistryError(TeaRankError):
    """Raised when the tea registry cannot produce a usable answer."""


class RegistryTimeoutError(RegistryError):
    """Raised when a request exceeds its time budget."""

    def __init__(self, timeout_ms: int) -> None:
        super().__init__(f"Request timeout after {timeout_ms}ms")
        self.timeout_ms = timeout_ms


class RegistryConnectionError(RegistryError):
    """Raised on transport failures (DNS, refused connection, TLS...)."""


class HttpError(RegistryError):
    """Raised for a non-2xx response that will not be retried."""

    def __init__(self, status: int, status_text: str = "") -> None:
        super().__init__(f"HTTP {status}: {status_text}" if status_text else f"HTTP {status}")
        self.status = status
        self.status_text = status_text


class SchemaError(RegistryError):
    """Raised when a successful response does not match the expected shape."""


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


class NotFoundError(TeaRankError):
    """Raised when a required project or document does not exist."""


class ProjectNotFoundError(NotFoundError):
    def __init__(self, query: str) -> None:
        super().__init__(f"Project not found: {query}")
        self.query = query


class ReadmeNotFoundError(NotFoundError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"README not found at {path}")
        self.path = path


# ---------------------------------------------------------------------------
# Local state
# ---------------------------------------------------------------------------


class FilesystemError(TeaRankError):
    """Raised when reading, creating or writing a file fails."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(message)
        self.path = path


class ConfigError(TeaRankError):
    """Raised when the resolved configuration is not usable."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors
