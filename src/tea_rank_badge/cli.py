"""Typer CLI: update (default) and print commands."""

from __future__ import annotations

from pathlib import Path

import click
import typer
import typer.core
from typer.core import TyperGroup

from tea_rank_badge import __version__
from tea_rank_badge.badge import BadgeStyle, create_rank_badge
from tea_rank_badge.client import RegistryClient
from tea_rank_badge.config import (
    DEFAULT_LABEL,
    DEFAULT_README_PATH,
    DEFAULT_SVG_PATH,
    BadgeConfig,
    require_valid,
    resolve_registry_config,
)
from tea_rank_badge.errors import ConfigError, ProjectNotFoundError, TeaRankError
from tea_rank_badge.models import ProjectRecord
from tea_rank_badge.output import Log, configure_logging
from tea_rank_badge.readme import update_readme
from tea_rank_badge.writer import write_if_changed

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_PENDING_CHANGES = 2

_GROUP_OPTIONS = {"--help", "--version", "-v"}

# Recent Typer releases parse with a bundled copy of click and raise its
# exception classes instead of click's own.
_bundled_click = getattr(typer.core, "_click", None) or getattr(typer, "_click", None)
_USAGE_ERRORS: tuple[type[Exception], ...] = tuple(
    {
        click.UsageError,
        getattr(getattr(_bundled_click, "exceptions", None), "UsageError", click.UsageError),
    }
)


class DefaultCommandGroup(TyperGroup):
    """Dispatch to ``update`` when the first argument is not a command."""

    default_command = "update"

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        if not args or (args[0] not in self.commands and args[0] not in _GROUP_OPTIONS):
            args = [self.default_command, *args]
        return super().parse_args(ctx, args)

    def invoke(self, ctx: click.Context):
        # Bad flag values are invalid input, not pending changes.
        try:
            return super().invoke(ctx)
        except _USAGE_ERRORS as exc:
            exc.exit_code = EXIT_ERROR
            raise


app = typer.Typer(
    name="tea-rank-badge",
    help="Generate and update teaRank badges for tea protocol projects.",
    cls=DefaultCommandGroup,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"tea-rank-badge v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version.", callback=_version_callback, is_eager=True
    ),
) -> None:
    """tea-rank-badge - keep a teaRank badge in your README."""


def _plain_number(value: float) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def _start(config: BadgeConfig) -> Log:
    """Set up logging and reject unusable configs with exit code 1."""
    configure_logging(config.debug)
    log = Log(quiet=config.quiet, debug_enabled=config.debug)
    try:
        require_valid(config)
    except ConfigError as exc:
        for message in exc.errors:
            log.error(message)
        raise typer.Exit(EXIT_ERROR) from exc
    log.debug("Resolved config", config)
    return log


def _fetch_project(config: BadgeConfig, log: Log) -> ProjectRecord:
    with RegistryClient(config.registry, log) as client:
        if config.project_id:
            return client.get_by_id(config.project_id)
        project = client.search_by_name(config.name)
    if project is None:
        raise ProjectNotFoundError(config.name)
    return project


def run_update(config: BadgeConfig, log: Log) -> int:
    """Fetch the rank, write the SVG, patch the README. Returns the exit code."""
    log.info("Fetching project information...")
    project = _fetch_project(config, log)
    log.success(f"Found project: {project.name} (teaRank: {_plain_number(project.rank)})")

    svg = create_rank_badge(
        project.rank, config.label, config.style, config.precision, config.color
    )
    svg_changed = write_if_changed(config.svg_path, svg, config.dry_run, log)

    readme_changed = False
    if not config.no_readme:
        readme = update_readme(config.readme_path, config.svg_path, config.insert, log)
        readme_changed = write_if_changed(config.readme_path, readme, config.dry_run, log)

    changed = svg_changed or readme_changed
    if config.dry_run:
        if changed:
            log.info("[DRY RUN] Changes would be made")
            return EXIT_PENDING_CHANGES
        log.info("[DRY RUN] No changes needed")
    elif changed:
        log.success("Badge updated successfully")
    else:
        log.info("Badge already up to date")
    return EXIT_OK


@app.command()
def update(
    project_id: str = typer.Option(None, "--project-id", help="Tea project ID (preferred over name)"),
    name: str = typer.Option(None, "--name", help="Project name to search for"),
    svg_path: Path = typer.Option(DEFAULT_SVG_PATH, "--svg-path", help="Path to save SVG badge"),
    readme_path: Path = typer.Option(DEFAULT_README_PATH, "--readme-path", help="Path to README file"),
    no_readme: bool = typer.Option(False, "--no-readme", help="Skip README update"),
    label: str = typer.Option(DEFAULT_LABEL, "--label", help="Badge label"),
    style: BadgeStyle = typer.Option(BadgeStyle.FLAT, "--style", help="Badge style"),
    precision: int = typer.Option(0, "--precision", min=0, help="Decimal precision for rank"),
    color: str = typer.Option(None, "--color", help="Override badge color"),
    base_url: str = typer.Option(None, "--base-url", help="Tea API base URL [env: TEA_API_BASE]"),
    timeout_ms: int = typer.Option(None, "--timeout-ms", help="Request timeout in ms [env: TEA_TIMEOUT_MS]"),
    retries: int = typer.Option(None, "--retries", help="Number of retries [env: TEA_RETRIES]"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview changes without writing files"),
    insert: bool = typer.Option(True, "--insert/--no-insert", help="Insert badge section if markers are missing"),
    quiet: bool = typer.Option(False, "--quiet", help="Suppress output except errors"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """Update the teaRank badge SVG and README section."""
    config = BadgeConfig(
        project_id=project_id,
        name=name,
        svg_path=svg_path,
        readme_path=readme_path,
        no_readme=no_readme,
        label=label,
        style=style,
        precision=precision,
        color=color,
        registry=resolve_registry_config(base_url, timeout_ms, retries),
        dry_run=dry_run,
        quiet=quiet,
        debug=debug,
        insert=insert,
    )
    log = _start(config)

    try:
        code = run_update(config, log)
    except TeaRankError as exc:
        log.error(f"Error: {exc}")
        raise typer.Exit(EXIT_ERROR) from exc
    raise typer.Exit(code)


@app.command("print")
def print_rank(
    project_id: str = typer.Option(None, "--project-id", help="Tea project ID"),
    name: str = typer.Option(None, "--name", help="Project name to search for"),
    base_url: str = typer.Option(None, "--base-url", help="Tea API base URL [env: TEA_API_BASE]"),
    timeout_ms: int = typer.Option(None, "--timeout-ms", help="Request timeout in ms [env: TEA_TIMEOUT_MS]"),
    retries: int = typer.Option(None, "--retries", help="Number of retries [env: TEA_RETRIES]"),
    quiet: bool = typer.Option(False, "--quiet", help="Print only the rank value"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """Print the current teaRank to stdout."""
    config = BadgeConfig(
        project_id=project_id,
        name=name,
        registry=resolve_registry_config(base_url, timeout_ms, retries),
        quiet=quiet,
        debug=debug,
    )
    log = _start(config)

    try:
        project = _fetch_project(config, log)
    except TeaRankError as exc:
        log.error(f"Error: {exc}")
        raise typer.Exit(EXIT_ERROR) from exc

    if quiet:
        typer.echo(_plain_number(project.rank))
    else:
        typer.echo(f"{project.name}: {_plain_number(project.rank)}")
