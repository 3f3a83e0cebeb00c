"""Config defaults, environment resolution and validation."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from tea_rank_badge.badge import BadgeStyle
from tea_rank_badge.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.sepolia.app.tea.xyz/"
DEFAULT_TIMEOUT_MS = 10000
DEFAULT_RETRIES = 3
DEFAULT_SVG_PATH = Path(".github/tea-rank-badge.svg")
DEFAULT_README_PATH = Path("README.md")
DEFAULT_LABEL = "teaRank"

ENV_BASE_URL = "TEA_API_BASE"
ENV_TIMEOUT_MS = "TEA_TIMEOUT_MS"
ENV_RETRIES = "TEA_RETRIES"


def normalize_base_url(base_url: str) -> str:
    """Ensure the base URL ends with exactly one trailing slash."""
    return base_url if base_url.endswith("/") else f"{base_url}/"


@dataclass(frozen=True)
class RegistryConfig:
    base_url: str = DEFAULT_BASE_URL
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    max_retries: int = DEFAULT_RETRIES

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", normalize_base_url(self.base_url))


@dataclass(frozen=True)
class BadgeConfig:
    """Everything a single ``update`` or ``print`` run needs."""

    project_id: str | None = None
    name: str | None = None
    svg_path: Path = DEFAULT_SVG_PATH
    readme_path: Path = DEFAULT_README_PATH
    no_readme: bool = False
    label: str = DEFAULT_LABEL
    style: BadgeStyle = BadgeStyle.FLAT
    precision: int = 0
    color: str | None = None
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    dry_run: bool = False
    quiet: bool = False
    debug: bool = False
    insert: bool = True


def _env_int(env: Mapping[str, str], key: str) -> int | None:
    raw = env.get(key, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", key, raw)
        return None


def resolve_registry_config(
    base_url: str | None = None,
    timeout_ms: int | None = None,
    retries: int | None = None,
    env: Mapping[str, str] | None = None,
) -> RegistryConfig:
    """Build a RegistryConfig.

    Every field follows the same precedence: explicit value, then the
    ``TEA_*`` environment variable, then the built-in default.
    """
    env = os.environ if env is None else env

    if base_url is None:
        base_url = env.get(ENV_BASE_URL, "").strip() or DEFAULT_BASE_URL
    if timeout_ms is None:
        timeout_ms = _env_int(env, ENV_TIMEOUT_MS)
    if retries is None:
        retries = _env_int(env, ENV_RETRIES)

    return RegistryConfig(
        base_url=base_url,
        timeout_ms=DEFAULT_TIMEOUT_MS if timeout_ms is None else timeout_ms,
        max_retries=DEFAULT_RETRIES if retries is None else retries,
    )


def validate_config(config: BadgeConfig) -> list[str]:
    """Validate config, returning list of error messages (empty if valid)."""
    errors = []
    if not config.project_id and not config.name:
        errors.append("Either --project-id or --name must be specified")
    if config.precision < 0:
        errors.append(f"Precision must be >= 0, got {config.precision}")
    if not config.label:
        errors.append("Label must not be empty")
    if config.registry.timeout_ms <= 0:
        errors.append(f"Timeout must be > 0 ms, got {config.registry.timeout_ms}")
    if config.registry.max_retries < 0:
        errors.append(f"Retries must be >= 0, got {config.registry.max_retries}")
    if not config.registry.base_url.startswith(("http://", "https://")):
        errors.append(f"Base URL must be http(s): {config.registry.base_url}")
    return errors


def require_valid(config: BadgeConfig) -> BadgeConfig:
    """Return ``config`` unchanged, or raise ConfigError listing every problem."""
    errors = validate_config(config)
    if errors:
        raise ConfigError(errors)
    return config
