"""Output formatters for dep-audit."""

from dep_audit.output.report_markdown import ReportMarkdownFormatter
from dep_audit.output.terminal import TerminalFormatter

__all__ = [
    "ReportMarkdownFormatter",
    "TerminalFormatter",
]
