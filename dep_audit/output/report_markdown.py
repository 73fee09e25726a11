"""Markdown output formatter for audit reports."""

from datetime import datetime, timezone
from typing import Optional

from dep_audit.models.scan import AuditReport, DependencyVerdict


class ReportMarkdownFormatter:
    """Format an audit report as a Markdown document.

    The document is regenerated in full from the report on every call.
    """

    def format_report(
        self, report: AuditReport, generated_at: Optional[datetime] = None
    ) -> str:
        """Format the audit report as a Markdown string.

        Args:
            report: The audit report to format.
            generated_at: Generation time. Defaults to now (UTC).

        Returns:
            Markdown string representation of the report.
        """
        timestamp = (generated_at or datetime.now(timezone.utc)).strftime(
            "%Y-%m-%dT%H:%M:%SZ"
        )

        lines: list[str] = [
            "# Dependency Audit Report",
            "",
            f"Generated: {timestamp}",
            "",
        ]
        lines.extend(self._format_summary(report))
        lines.append("")
        lines.extend(self._format_details(report))

        return "\n".join(lines) + "\n"

    def _format_summary(self, report: AuditReport) -> list[str]:
        summary = report.summary
        return [
            "## Summary",
            "",
            f"- Total Dependencies: {summary.total}",
            f"- Outdated: {summary.outdated}",
            f"- Vulnerabilities: {summary.vulnerable}",
            f"- Non-Compliant Licenses: {summary.non_compliant}",
        ]

    def _format_details(self, report: AuditReport) -> list[str]:
        lines = ["## Details", ""]
        if not report.verdicts:
            lines.append("*No dependencies audited.*")
            return lines

        for verdict in report.verdicts:
            lines.extend(self._format_verdict(verdict))
            lines.append("")
        # Drop trailing blank line
        return lines[:-1]

    def _format_verdict(self, verdict: DependencyVerdict) -> list[str]:
        compliance = "Allowed" if verdict.is_license_allowed else "Not Allowed"
        return [
            f"### {verdict.name}@{verdict.declared_version}",
            "",
            f"- Latest: {verdict.latest_version}",
            f"- Vulnerability: {verdict.vulnerability_severity or 'None'}",
            f"- License: {verdict.license} ({compliance})",
        ]
