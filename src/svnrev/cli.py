"""Command line interface for svnrev."""

from __future__ import annotations

import difflib
import logging
from pathlib import Path
from typing import Any, Optional

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from svnrev.backend import SvnClient
from svnrev.config import ConfigError, ConfigManager, SvnRevConfig, flatten_for_env
from svnrev.config.resolver import assign_nested, resolve_with_precedence
from svnrev.inspector import EntryInspector, EntryReport, default_entry
from svnrev.properties import PropertyStore, write_properties_file
from svnrev.status import Depth, StatusError

console = Console()


def _fail(
    message: str,
    *,
    code: str,
    json_output: bool,
    details: Any | None = None,
    cause: Exception | None = None,
) -> None:
    """Abort the current command with ``message``.

    In JSON mode the error is printed as ``{"error": {"code", "message", "details"}}``
    on stdout so build tools can parse it; otherwise click reports it.

    Raises:
        SystemExit: In JSON mode, with status 1.
        click.ClickException: Otherwise.
    """
    if not json_output:
        raise click.ClickException(message) from cause

    error: dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    console.print_json(data={"error": error})
    raise SystemExit(1)


def _configure_logging(level: int | str) -> None:
    """Route ``svnrev`` log records to stderr through a Rich handler."""

    logger = logging.getLogger("svnrev")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)


def _config_manager(ctx: click.Context) -> ConfigManager:
    return ConfigManager(config_path=ctx.obj.get("config_path") if ctx.obj else None)


def _emit_reports(reports: list[EntryReport], store: PropertyStore) -> None:
    """Render inspected entries as a table of published properties."""

    table = Table(title="svnrev properties", show_lines=False)
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value")
    for name, value in store.as_dict().items():
        table.add_row(escape(name), escape(value))
    console.print(table)

    for report in reports:
        console.print(_format_summary_line(report))


def _format_summary_line(report: EntryReport) -> str:
    """Return a one-line summary for an inspected entry."""

    summary = report.summary
    revision = f"r{summary.max_revision}" if summary.max_revision >= 0 else "unversioned"
    if summary.mixed_revisions:
        revision = f"r{summary.min_revision}:{summary.max_revision}"
    status = summary.status_code or "clean"
    label = escape(f"{report.prefix}: {revision} {status} ({report.entry.path}).")
    return f"[green]{label}[/green]"


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="svnrev")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="SVNREV_CONFIG",
    help="Configuration file to use (defaults to ./svnrev.yaml).",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path]) -> None:
    """svnrev summarizes the Subversion state of working-copy entries for builds."""

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command()
@click.argument("paths", nargs=-1, type=click.Path(path_type=Path))
@click.option("--prefix", type=str, help="Property prefix for the inspected paths.")
@click.option(
    "--depth",
    type=click.Choice([depth.value for depth in Depth]),
    help="Depth of the status walk below each path.",
)
@click.option(
    "--report-unversioned/--no-report-unversioned",
    default=None,
    help="Include unversioned items in the status code.",
)
@click.option(
    "--report-ignored/--no-report-ignored",
    default=None,
    help="Include ignored items in the status code.",
)
@click.option(
    "--report-out-of-date/--no-report-out-of-date",
    default=None,
    help="Contact the repository and report out-of-date items.",
)
@click.option(
    "--fail-on-error/--no-fail-on-error",
    default=None,
    help="Abort on backend errors instead of reporting the entry as unversioned.",
)
@click.option("--separator", type=str, help="Text between the prefix and the property key.")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the properties to a .properties file.",
)
@click.option("--workers", type=click.IntRange(min=1), help="Entries inspected concurrently.")
@click.option("--json", "json_output", is_flag=True, help="Emit the properties as JSON.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.option("-v", "--verbose", is_flag=True, help="Log per-entry details.")
@click.option("--debug", is_flag=True, help="Log every status record.")
@click.pass_context
def inspect(
    ctx: click.Context,
    paths: tuple[Path, ...],
    prefix: Optional[str],
    depth: Optional[str],
    report_unversioned: Optional[bool],
    report_ignored: Optional[bool],
    report_out_of_date: Optional[bool],
    fail_on_error: Optional[bool],
    separator: Optional[str],
    output: Optional[Path],
    workers: Optional[int],
    json_output: bool,
    quiet: bool,
    verbose: bool,
    debug: bool,
) -> None:
    """Inspect PATHS (or the configured entries) and publish their properties."""

    cli_overrides: dict[str, Any] = {}
    if fail_on_error is not None:
        cli_overrides["fail_on_error"] = fail_on_error
    if verbose or debug:
        cli_overrides["verbose"] = True
    if separator is not None:
        cli_overrides["output.separator"] = separator
    if output is not None:
        cli_overrides["output.properties_file"] = output
    if workers is not None:
        cli_overrides["runtime.max_workers"] = workers

    manager = _config_manager(ctx)
    try:
        config = manager.load(cli_overrides=cli_overrides)
    except ConfigError as exc:
        _fail(str(exc), code="config_error", json_output=json_output, cause=exc)
        return

    level: int | str = config.logging.level.upper()
    if debug:
        level = logging.DEBUG
    elif config.verbose:
        level = logging.INFO
    _configure_logging(level)

    entry_overrides = {
        key: value
        for key, value in (
            ("prefix", prefix),
            ("depth", depth),
            ("report_unversioned", report_unversioned),
            ("report_ignored", report_ignored),
            ("report_out_of_date", report_out_of_date),
        )
        if value is not None
    }
    try:
        entries = manager.resolve_entries(
            config, paths, entry_overrides, default=default_entry(Path.cwd())
        )
    except ConfigError as exc:
        _fail(str(exc), code="config_error", json_output=json_output, cause=exc)
        return

    inspector = EntryInspector(
        SvnClient(config.svn.executable),
        fail_on_error=config.fail_on_error,
        max_workers=config.runtime.max_workers,
        verbose=config.verbose,
    )
    try:
        reports = inspector.run(entries)
    except StatusError as exc:
        _fail(
            f"Failed to obtain revision information: {exc}",
            code="status_error",
            json_output=json_output,
            details={"exception": type(exc).__name__},
            cause=exc,
        )
        return

    store = PropertyStore(separator=config.output.separator, verbose=config.verbose)
    for report in reports:
        store.publish(report.prefix, report.properties)

    if config.output.properties_file is not None:
        write_properties_file(config.output.properties_file, store.as_dict())

    if json_output:
        console.print_json(
            data={
                "entries": [
                    {
                        "path": str(report.entry.path),
                        "prefix": report.prefix,
                        "properties": report.properties,
                        "unrecognizedStatuses": list(report.summary.unrecognized_statuses),
                    }
                    for report in reports
                ],
                "properties": store.as_dict(),
            }
        )
        return

    if not quiet:
        _emit_reports(reports, store)


@cli.group()
def config() -> None:
    """Show or change the svnrev configuration file."""


def _checked(data: dict[str, Any]) -> SvnRevConfig:
    """Validate raw file data the way ``inspect`` would load it."""
    try:
        return resolve_with_precedence(defaults=SvnRevConfig(), file_overrides=data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


@config.command("view")
@click.option("--no-env", is_flag=True, help="Show the file values without SVNREV__ overrides.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["yaml", "env"]),
    default="yaml",
    show_default=True,
    help="Print YAML or the equivalent SVNREV__ environment variables.",
)
@click.pass_context
def config_view(ctx: click.Context, no_env: bool, output_format: str) -> None:
    """Print the effective configuration, creating a default file if needed."""
    manager = _config_manager(ctx)
    try:
        effective = manager.load(include_env=not no_env, ensure_file=True)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if output_format == "env":
        for name, value in flatten_for_env(effective).items():
            click.echo(f"{name}={value}")
        return
    rendered = yaml.safe_dump(effective.model_dump(mode="json"), sort_keys=False)
    console.print(Syntax(rendered, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="YAML value stored at KEY.")
@click.pass_context
def config_set(ctx: click.Context, key: str, value: str) -> None:
    """Store VALUE at the dotted KEY, for example ``output.separator``.

    Raises:
        click.ClickException: If KEY or VALUE is malformed or the result is invalid.
    """
    path = [part for part in (segment.strip() for segment in key.split(".")) if part]
    if not path:
        raise click.ClickException("KEY must be a dotted path such as 'runtime.max_workers'.")
    try:
        parsed = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"VALUE is not valid YAML: {exc}") from exc

    manager = _config_manager(ctx)
    manager.ensure_exists()
    previous = manager.read_text().splitlines()
    try:
        data = manager.load_file_overrides()
        assign_nested(data, path, parsed)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    _checked(data)
    manager.save(data)

    name = manager.config_path.name
    changes = [
        line
        for line in difflib.unified_diff(
            previous,
            manager.read_text().splitlines(),
            fromfile=f"{name} (before)",
            tofile=f"{name} (after)",
            lineterm="",
        )
        # the header timestamp changes on every save
        if "# Last updated:" not in line
    ]
    if not any(line[:1] in "+-" and line[:3] not in ("+++", "---") for line in changes):
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return
    console.print(Syntax("\n".join(changes), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(path)}.[/green]")


@config.command("edit")
@click.pass_context
def config_edit(ctx: click.Context) -> None:
    """Edit the configuration file in $EDITOR and validate the result."""
    manager = _config_manager(ctx)
    manager.ensure_exists()
    current = manager.read_text()

    edited = click.edit(current, extension=".yaml")
    if edited is None or edited == current:
        console.print("[yellow]No changes detected.[/yellow]")
        return

    try:
        data = yaml.safe_load(edited)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Edited file is not valid YAML: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise click.ClickException("The configuration must be a mapping at the top level.")

    _checked(data)
    manager.save(data)
    console.print("[green]Configuration updated successfully.[/green]")


def main() -> None:
    """Console-script entry point."""
    cli()


if __name__ == "__main__":
    main()
