"""Terminal output formatter using Rich."""
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from dep_audit.models.config import AuditConfig
from dep_audit.models.scan import AuditReport, DependencyVerdict, Verbosity


class TerminalFormatter:
    """Format audit reports for terminal display using Rich.

    Flagged conditions are color coded: yellow for outdated packages,
    red for vulnerabilities and non-compliant licenses.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        verbosity: Verbosity = Verbosity.NORMAL,
    ) -> None:
        """Initialize the formatter with a Rich console.

        Args:
            console: Optional Rich Console instance. If not provided,
                a new Console will be created.
            verbosity: Output verbosity level.
        """
        self._console = console if console is not None else Console()
        self._verbosity = verbosity

    def format_scan_result(
        self, report: AuditReport, ignored_names: Sequence[str] = ()
    ) -> None:
        """Display the summary counts and the per-dependency detail view.

        Args:
            report: The audit report to display.
            ignored_names: Declared packages skipped by configuration.
        """
        self._print_summary(report, ignored_names)

        if not report.verdicts:
            self._console.print("[yellow]No dependencies found[/yellow]")
            return

        if self._verbosity == Verbosity.QUIET:
            return

        self._console.print("[cyan]Dependency Audit Summary:[/cyan]")
        for verdict in report.verdicts:
            self._print_verdict(verdict)

    def format_outdated(self, report: AuditReport) -> None:
        """Display outdated dependencies from a stored report.

        Args:
            report: The audit report to read from.
        """
        outdated = report.outdated
        if not outdated:
            self._console.print("[green]No outdated packages found![/green]")
            return

        self._console.print("[cyan]Outdated Packages:[/cyan]")
        for verdict in outdated:
            self._console.print(
                f"{escape(verdict.name)}: {escape(verdict.declared_version)} -> "
                f"{escape(verdict.latest_version)}"
            )

    def format_licenses(self, report: AuditReport, config: AuditConfig) -> None:
        """Display non-compliant licenses from a stored report.

        Args:
            report: The audit report to read from.
            config: Current configuration, for the allow-list.
        """
        non_compliant = report.non_compliant
        if not non_compliant:
            self._console.print("[green]All licenses are compliant![/green]")
            return

        allowed = ", ".join(config.allowed_licenses)
        self._console.print("[cyan]Non-Compliant Licenses:[/cyan]")
        for verdict in non_compliant:
            self._console.print(
                f"{escape(verdict.name)}: {escape(verdict.license)} "
                f"(Allowed: {escape(allowed)})"
            )

    def _print_summary(
        self, report: AuditReport, ignored_names: Sequence[str]
    ) -> None:
        """Print the summary counts panel.

        Args:
            report: The audit report to summarize.
            ignored_names: Declared packages skipped by configuration.
        """
        summary = report.summary
        has_findings = bool(
            summary.outdated or summary.vulnerable or summary.non_compliant
        )
        border = "yellow" if has_findings else "green"

        lines = [
            f"Total Dependencies: {summary.total}",
            f"Outdated: {summary.outdated}",
            f"Vulnerabilities: {summary.vulnerable}",
            f"Non-Compliant Licenses: {summary.non_compliant}",
        ]
        if ignored_names:
            names_str = ", ".join(ignored_names[:3])
            if len(ignored_names) > 3:
                names_str += f", ... (+{len(ignored_names) - 3} more)"
            lines.append(f"Packages Ignored: {len(ignored_names)} ({escape(names_str)})")

        panel = Panel(
            "\n".join(lines),
            title="[bold]AUDIT SUMMARY[/bold]",
            border_style=border,
        )
        self._console.print(panel)

    def _print_verdict(self, verdict: DependencyVerdict) -> None:
        self._console.print(
            f"- {escape(verdict.name)}@{escape(verdict.declared_version)}"
        )
        if verdict.is_outdated:
            self._console.print(
                f"  [yellow]Outdated: Latest is {escape(verdict.latest_version)}[/yellow]"
            )
        if verdict.is_vulnerable:
            self._console.print(
                f"  [red]Vulnerability: {escape(verdict.vulnerability_severity or '')}[/red]"
            )
        if not verdict.is_license_allowed:
            self._console.print(
                f"  [red]License: {escape(verdict.license)} (Not allowed)[/red]"
            )
