"""CLI entry point for dep-audit."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from dep_audit import __version__
from dep_audit.config import load_config, update_config
from dep_audit.constants import EXIT_ERROR, EXIT_SUCCESS, MARKDOWN_REPORT_FILE
from dep_audit.exceptions import ConfigurationError, DepAuditError
from dep_audit.log import setup_logging
from dep_audit.models.config import AuditConfig
from dep_audit.models.scan import ScanOutcome, Verbosity
from dep_audit.output.report_markdown import ReportMarkdownFormatter
from dep_audit.output.terminal import TerminalFormatter
from dep_audit.report import load_report, save_report
from dep_audit.resolvers.audit import NullVulnerabilitySource
from dep_audit.scanner import REGISTRY_STAGE, scan_project

# Module-level console for consistent output
_console = Console()
# Separate console for error output (writes to stderr)
_error_console = Console(stderr=True)

SCAN_HINT = 'Use the "scan" command to start auditing dependencies!'


@click.group(invoke_without_command=True)
@click.version_option(version=__version__)
@click.option(
    "--verbose",
    "-v",
    "verbose_flag",
    is_flag=True,
    default=False,
    help="Enable debug logging on stderr.",
)
@click.pass_context
def main(ctx: click.Context, verbose_flag: bool) -> None:
    """Dependency Audit - check npm dependencies for outdated versions,
    known vulnerabilities and license compliance.

    \b
    Examples:
        dep-audit scan
        dep-audit outdated
        dep-audit licenses
        dep-audit config --ignore left-pad --add-license ISC
        dep-audit report
    """
    setup_logging("DEBUG" if verbose_flag else None)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        _console.print(f"[cyan]{SCAN_HINT}[/cyan]")


@main.command()
@click.option(
    "--quiet",
    "-q",
    "quiet_flag",
    is_flag=True,
    default=False,
    help="Show only the summary counts.",
)
@click.option(
    "--registry-url",
    default=None,
    envvar="DEP_AUDIT_REGISTRY_URL",
    help="npm registry base URL (default: https://registry.npmjs.org).",
)
@click.option(
    "--no-audit",
    "skip_audit",
    is_flag=True,
    default=False,
    help="Skip running npm audit.",
)
def scan(quiet_flag: bool, registry_url: Optional[str], skip_audit: bool) -> None:
    """Scan dependencies for vulnerabilities, outdated packages, and licenses.

    Reads package.json in the current directory, queries the registry for
    each dependency, runs npm audit and saves the results to
    dependency-audit-report.json.

    \b
    Examples:
        dep-audit scan
        dep-audit scan --quiet
        dep-audit scan --no-audit
    """
    verbosity = Verbosity.QUIET if quiet_flag else Verbosity.NORMAL
    project_dir = Path.cwd()

    try:
        config = load_config(project_dir)
        outcome = _run_scan(
            project_dir,
            config,
            registry_url=registry_url,
            skip_audit=skip_audit,
            show_progress=verbosity != Verbosity.QUIET,
        )
        path = save_report(outcome.report.verdicts, project_dir)
    except DepAuditError as e:
        _display_error(e)
        sys.exit(EXIT_ERROR)

    _console.print(f"[green]Audit completed! Report saved to {escape(str(path))}[/green]")
    TerminalFormatter(console=_console, verbosity=verbosity).format_scan_result(
        outcome.report, outcome.ignored_names
    )
    sys.exit(EXIT_SUCCESS)


@main.command()
def outdated() -> None:
    """List outdated packages from the last scan."""
    report = load_report(Path.cwd())
    TerminalFormatter(console=_console).format_outdated(report)


@main.command()
def licenses() -> None:
    """Check license compliance from the last scan."""
    project_dir = Path.cwd()
    config = load_config(project_dir)
    report = load_report(project_dir)
    TerminalFormatter(console=_console).format_licenses(report, config)


@main.command("config")
@click.option(
    "--ignore",
    "ignore",
    default=None,
    metavar="<package>",
    help="Ignore a package in scans.",
)
@click.option(
    "--add-license",
    "add_license",
    default=None,
    metavar="<license>",
    help="Add an allowed license.",
)
@click.option(
    "--show",
    "show",
    is_flag=True,
    default=False,
    help="Print the current configuration without saving.",
)
def config_command(
    ignore: Optional[str], add_license: Optional[str], show: bool
) -> None:
    """Update audit configuration.

    \b
    Examples:
        dep-audit config --ignore left-pad
        dep-audit config --add-license ISC
        dep-audit config --show
    """
    project_dir = Path.cwd()

    if show:
        current = load_config(project_dir)
        ignored = ", ".join(current.ignored_packages) or "(none)"
        allowed = ", ".join(current.allowed_licenses) or "(none)"
        _console.print(f"Ignored packages: {escape(ignored)}")
        _console.print(f"Allowed licenses: {escape(allowed)}")
        return

    try:
        update_config(ignore=ignore, add_license=add_license, project_dir=project_dir)
    except ConfigurationError as e:
        _display_error(e)
        sys.exit(EXIT_ERROR)

    if ignore:
        _console.print(f"[green]Added {escape(ignore)} to ignored packages[/green]")
    if add_license:
        _console.print(f"[green]Added {escape(add_license)} to allowed licenses[/green]")
    _console.print("[green]Configuration saved![/green]")


@main.command()
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False),
    default=MARKDOWN_REPORT_FILE,
    show_default=True,
    help="Markdown file to write.",
)
def report(output_path: str) -> None:
    """Generate a detailed audit report in Markdown."""
    project_dir = Path.cwd()
    content = ReportMarkdownFormatter().format_report(load_report(project_dir))

    try:
        _write_output_to_file(content, project_dir / output_path)
    except ConfigurationError as e:
        _display_error(e)
        sys.exit(EXIT_ERROR)

    _console.print(f"[green]Markdown report generated! ({output_path})[/green]")


def _run_scan(
    project_dir: Path,
    config: AuditConfig,
    registry_url: Optional[str],
    skip_audit: bool,
    show_progress: bool,
) -> ScanOutcome:
    """Execute the dependency scan.

    Args:
        project_dir: Project directory containing package.json.
        config: Configuration for ignore and license checks.
        registry_url: Optional registry base URL.
        skip_audit: Whether to skip the audit command.
        show_progress: Whether to show a progress spinner.

    Returns:
        ScanOutcome with the report and ignored package names.
    """
    audit_source = NullVulnerabilitySource() if skip_audit else None

    if not show_progress:
        return asyncio.run(
            scan_project(
                project_dir,
                config,
                audit_source=audit_source,
                registry_url=registry_url,
            )
        )

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=_console,
        transient=True,
    ) as progress:
        task_id = progress.add_task(REGISTRY_STAGE, total=None)
        return asyncio.run(
            scan_project(
                project_dir,
                config,
                audit_source=audit_source,
                registry_url=registry_url,
                on_progress=lambda _declaration: progress.advance(task_id),
                on_stage=lambda stage: progress.update(task_id, description=stage),
            )
        )


def _write_output_to_file(content: str, path: Path) -> None:
    """Write report content to file, replacing any previous content.

    Args:
        content: The report content to write.
        path: The file path to write to.

    Raises:
        ConfigurationError: If file cannot be written.
    """
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot write to file '{path}': {e}") from e


def _display_error(error: DepAuditError) -> None:
    """Display error message to user on stderr.

    Args:
        error: The exception that occurred.
    """
    error_type = type(error).__name__
    _error_console.print(f"[red bold]Error: {error_type}: {escape(str(error))}[/red bold]")


if __name__ == "__main__":
    main()
