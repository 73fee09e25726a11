"""Dependency analysis logic for dep-audit."""
from dep_audit.analysis.classifier import (
    classify,
    classify_dependency,
    coerce_declarations,
    fetch_all_metadata,
    merge_manifest_groups,
)
from dep_audit.analysis.filtering import FilterResult, filter_ignored_declarations

__all__ = [
    "FilterResult",
    "classify",
    "classify_dependency",
    "coerce_declarations",
    "fetch_all_metadata",
    "filter_ignored_declarations",
    "merge_manifest_groups",
]
