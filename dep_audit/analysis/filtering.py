"""Declaration filtering for ignored packages configuration."""

from __future__ import annotations

from typing import NamedTuple

from dep_audit.models.config import AuditConfig
from dep_audit.models.dependency import DependencyDeclaration


class FilterResult(NamedTuple):
    """Result of filtering declarations.

    Attributes:
        declarations: Declarations kept, in their original order.
        ignored_names: Names of declarations that were ignored.
    """

    declarations: list[DependencyDeclaration]
    ignored_names: list[str]

    @property
    def ignored_count(self) -> int:
        return len(self.ignored_names)


def filter_ignored_declarations(
    declarations: list[DependencyDeclaration],
    config: AuditConfig,
) -> FilterResult:
    """Filter out ignored packages from the declarations.

    Package name matching is case-sensitive, as npm package names are
    lowercase by rule and the config stores them verbatim.

    Args:
        declarations: Declarations to filter.
        config: Configuration with ignored_packages.

    Returns:
        FilterResult with the kept declarations and the ignored names.
    """
    if not config.ignored_packages:
        return FilterResult(declarations=list(declarations), ignored_names=[])

    ignored_set = set(config.ignored_packages)
    kept: list[DependencyDeclaration] = []
    ignored_names: list[str] = []

    for declaration in declarations:
        if declaration.name in ignored_set:
            ignored_names.append(declaration.name)
        else:
            kept.append(declaration)

    return FilterResult(declarations=kept, ignored_names=ignored_names)
