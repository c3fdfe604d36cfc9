"""
Command line interface for changelog_rc.

This module defines the ``main`` command group used as the entry point
of the ``changelog-rc`` command. It loads the release configuration,
shows the commit type table, validates settings and templates, and
renders changelog sections from parsed commits supplied as JSON.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from changelog_rc import __version__
from changelog_rc.config.loader import ConfigError, build_type_table, load_config
from changelog_rc.config.templates import resolve_template_dir
from changelog_rc.grouping.commit_transformer import CommitTransformer
from changelog_rc.writer.options import build_writer_options
from changelog_rc.writer.renderer import ChangelogRenderer, RenderError

# Module-level logger with a null handler; the CLI configures the root
# logger in ``main``.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_INVALID_USAGE = 2
EXIT_CONFIG_ERROR = 3
EXIT_INVALID_INPUT = 4


# ---------------------------------------------------------------------------
# Status display utilities
# ---------------------------------------------------------------------------

def print_info(message: str, indent: int = 0):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}", err=False)


def print_success(message: str, indent: int = 0):
    """Print a success message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}", err=False)


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


# ---------------------------------------------------------------------------
# Core functionality
# ---------------------------------------------------------------------------

def _load_settings(ctx: click.Context) -> Dict[str, Any]:
    """Load the release configuration or exit with EXIT_CONFIG_ERROR."""
    config_path: Optional[Path] = ctx.obj.get("config_path")
    try:
        return load_config(config_path)
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)


def read_commits(stream) -> List[Dict[str, Any]]:
    """Read a JSON array of parsed commit objects from ``stream``.

    Raises
    ------
    RenderError
        If the input is not valid JSON or not a list of objects.
    """
    try:
        data = json.load(stream)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise RenderError(f"Invalid JSON commit input: {exc}") from exc
    if not isinstance(data, list):
        raise RenderError("Commit input must be a JSON array")
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise RenderError(f"Commit #{index} is not an object")
    return data


@click.group()
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to the release configuration (default: ./.versionrc.json).",
)
@click.version_option(version=__version__, prog_name="changelog-rc")
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: Optional[Path]) -> None:
    """Keep a Changelog release configuration for Conventional Commits."""
    # force=True so repeated invocations (tests) reconfigure handlers.
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@main.command("types")
@click.option("--all", "show_all", is_flag=True, help="Include hidden commit types.")
@click.pass_context
def show_types(ctx: click.Context, show_all: bool) -> None:
    """Show how commit types map to changelog sections."""
    config = _load_settings(ctx)
    try:
        table = build_type_table(config)
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

    width = max(len(entry.type) for entry in table.entries)
    for entry in table.entries:
        if entry.hidden and not show_all:
            continue
        line = f"{entry.type.ljust(width)}  {entry.section}"
        if entry.hidden:
            line += "  (hidden)"
        click.echo(line)


@main.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Validate the release configuration and changelog templates."""
    config = _load_settings(ctx)
    try:
        table = build_type_table(config)
        template_dir = resolve_template_dir(config)
        build_writer_options(config)
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

    print_success("Configuration is valid")
    print_info(f"Changelog file: {config['infile']}", indent=1)
    print_info(f"Tag prefix: {config['tagPrefix']}", indent=1)
    print_info(
        f"Commit types: {len(table)} ({len(table.hidden)} hidden)",
        indent=1,
    )
    print_info(f"Sections: {', '.join(table.visible_sections())}", indent=1)
    print_info(f"Templates: {template_dir}", indent=1)


@main.command()
@click.option(
    "--commits",
    "commits_file",
    type=click.File("r", encoding="utf-8"),
    default="-",
    show_default=True,
    help="JSON array of parsed commits ('-' reads standard input).",
)
@click.option("--release-version", "version", help="Version shown in the section heading.")
@click.option("--date", help="Release date shown in the section heading.")
@click.option("--previous-tag", help="Tag of the previous release, for the compare link.")
@click.option("--current-tag", help="Tag of this release, for the compare link.")
@click.option("--host", help="Repository host URL, e.g. https://github.com.")
@click.option("--owner", help="Repository owner.")
@click.option("--repository", help="Repository name.")
@click.option("--with-header", is_flag=True, help="Prefix the configured changelog header.")
@click.pass_context
def render(
    ctx: click.Context,
    commits_file,
    version: Optional[str],
    date: Optional[str],
    previous_tag: Optional[str],
    current_tag: Optional[str],
    host: Optional[str],
    owner: Optional[str],
    repository: Optional[str],
    with_header: bool,
) -> None:
    """Render a changelog section from parsed commits."""
    config = _load_settings(ctx)
    try:
        options = build_writer_options(config)
        renderer = ChangelogRenderer(options, config)
    except (ConfigError, RenderError) as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

    context = {
        "version": version,
        "date": date,
        "previousTag": previous_tag,
        "currentTag": current_tag,
        "host": host,
        "owner": owner,
        "repository": repository,
    }
    context = {key: value for key, value in context.items() if value}
    if "currentTag" not in context and version:
        context["currentTag"] = f"{config['tagPrefix']}{version}"

    try:
        commits = read_commits(commits_file)
        text = renderer.render(commits, context)
    except RenderError as exc:
        print_error(f"Invalid commit input: {exc}")
        raise click.exceptions.Exit(EXIT_INVALID_INPUT)

    if with_header:
        click.echo(config["header"])
    click.echo(text, nl=False)


@main.command("transform")
@click.option(
    "--commits",
    "commits_file",
    type=click.File("r", encoding="utf-8"),
    default="-",
    show_default=True,
    help="JSON array of parsed commits ('-' reads standard input).",
)
@click.pass_context
def transform_cmd(ctx: click.Context, commits_file) -> None:
    """Print the commits kept for the changelog, normalized, as JSON."""
    config = _load_settings(ctx)
    try:
        transformer = CommitTransformer(build_type_table(config))
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

    try:
        commits = read_commits(commits_file)
    except RenderError as exc:
        print_error(f"Invalid commit input: {exc}")
        raise click.exceptions.Exit(EXIT_INVALID_INPUT)

    kept = [result for result in (transformer.transform_dict(c) for c in commits) if result is not None]
    logger.debug("Transformed %d commit(s), kept %d", len(commits), len(kept))
    click.echo(json.dumps(kept, indent=2))


if __name__ == "__main__":
    main(prog_name="changelog-rc")
