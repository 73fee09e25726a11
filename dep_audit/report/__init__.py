"""Audit report persistence."""

from dep_audit.report.store import load_report, report_path, save_report

__all__ = ["load_report", "report_path", "save_report"]
