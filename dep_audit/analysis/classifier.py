"""Dependency classification: combine declarations, metadata and audit data."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from typing import Any, Callable, Optional

import structlog
from pydantic import ValidationError

from dep_audit.analysis.filtering import filter_ignored_declarations
from dep_audit.constants import MAX_CONCURRENT_REQUESTS, UNKNOWN
from dep_audit.exceptions import InvalidInputError, NetworkError
from dep_audit.models.config import AuditConfig
from dep_audit.models.dependency import DependencyDeclaration, PackageMetadata
from dep_audit.models.scan import DependencyVerdict, VulnerabilityInfo
from dep_audit.resolvers.base import BaseMetadataFetcher

log = structlog.get_logger("dep_audit.analysis.classifier")

ProgressCallback = Callable[[DependencyDeclaration], None]


def merge_manifest_groups(
    dependencies: Optional[Mapping[str, Any]],
    dev_dependencies: Optional[Mapping[str, Any]],
) -> dict[str, Any]:
    """Merge the regular and dev dependency groups.

    Regular dependencies come first. A name present in both groups keeps
    its first position and takes the dev group's version.
    """
    merged: dict[str, Any] = {}
    merged.update(dependencies or {})
    merged.update(dev_dependencies or {})
    return merged


def _make_declaration(name: Any, version: Any) -> DependencyDeclaration:
    if not isinstance(name, str) or not isinstance(version, str):
        raise InvalidInputError(
            f"Invalid declaration {name!r}: {version!r} "
            "(expected a name/version pair of strings)"
        )
    try:
        return DependencyDeclaration(name=name, declared_version=version)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid declaration {name!r}: {version!r}") from e


def coerce_declarations(raw: Any) -> list[DependencyDeclaration]:
    """Normalize declarations into an ordered, name-unique list.

    Accepts a mapping of name to version, or an iterable of
    DependencyDeclaration objects or (name, version) pairs. Later entries
    for an already seen name replace its version in place.

    Args:
        raw: Declarations in any accepted shape.

    Returns:
        Ordered list of DependencyDeclaration.

    Raises:
        InvalidInputError: If raw, or any entry, is not a name/version pair.
    """
    if isinstance(raw, Mapping):
        pairs: Iterable[Any] = raw.items()
    elif isinstance(raw, (str, bytes)) or not isinstance(raw, Iterable):
        raise InvalidInputError(
            f"Declarations must be a mapping or a sequence, got {type(raw).__name__}"
        )
    else:
        pairs = raw

    by_name: dict[str, DependencyDeclaration] = {}
    for item in pairs:
        if isinstance(item, DependencyDeclaration):
            declaration = item
        elif isinstance(item, (tuple, list)) and len(item) == 2:
            declaration = _make_declaration(item[0], item[1])
        else:
            raise InvalidInputError(
                f"Invalid declaration {item!r} (expected a name/version pair)"
            )
        by_name[declaration.name] = declaration

    return list(by_name.values())


def classify_dependency(
    declaration: DependencyDeclaration,
    metadata: PackageMetadata,
    config: AuditConfig,
    vulnerabilities: VulnerabilityInfo,
) -> DependencyVerdict:
    """Compute the verdict for one declaration.

    An unresolved latest version never counts as outdated and an unknown
    license is always allowed.

    Args:
        declaration: The declared dependency.
        metadata: Registry metadata for the declaration.
        config: Audit configuration with the license allow-list.
        vulnerabilities: Mapping of package name to severity.

    Returns:
        DependencyVerdict for the declaration.
    """
    latest = metadata.latest_version
    is_outdated = latest != declaration.declared_version and latest != UNKNOWN
    is_license_allowed = (
        metadata.license in config.allowed_licenses or metadata.license == UNKNOWN
    )

    return DependencyVerdict(
        name=declaration.name,
        declared_version=declaration.declared_version,
        latest_version=latest,
        is_outdated=is_outdated,
        vulnerability_severity=vulnerabilities.get(declaration.name),
        license=metadata.license,
        is_license_allowed=is_license_allowed,
    )


async def fetch_all_metadata(
    declarations: list[DependencyDeclaration],
    fetcher: BaseMetadataFetcher,
    on_progress: Optional[ProgressCallback] = None,
) -> list[PackageMetadata]:
    """Fetch metadata for every declaration with bounded concurrency.

    Each fetch is attempted once. Results are returned in declaration
    order regardless of completion order.

    Args:
        declarations: Declarations to fetch metadata for.
        fetcher: Registry metadata fetcher.
        on_progress: Optional callback invoked as each fetch completes.

    Returns:
        PackageMetadata per declaration, in the same order.
    """
    semaphore = asyncio.Semaphore(MAX_CONCURRENT_REQUESTS)

    async def fetch_one(
        idx: int, declaration: DependencyDeclaration
    ) -> tuple[int, PackageMetadata]:
        async with semaphore:
            try:
                metadata = await fetcher.fetch(
                    declaration.name, declaration.declared_version
                )
            except NetworkError as e:
                log.debug("fetch_failed", package=declaration.name, error=str(e))
                metadata = PackageMetadata.unresolved()
        return idx, metadata

    resolved: list[Optional[PackageMetadata]] = [None] * len(declarations)
    tasks = [
        asyncio.ensure_future(fetch_one(i, d)) for i, d in enumerate(declarations)
    ]

    try:
        for next_done in asyncio.as_completed(tasks):
            idx, metadata = await next_done
            resolved[idx] = metadata
            if on_progress is not None:
                on_progress(declarations[idx])
    finally:
        # A failed fetch must not leave its siblings running
        pending = [task for task in tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    return [m if m is not None else PackageMetadata.unresolved() for m in resolved]


async def classify(
    declarations: Any,
    config: AuditConfig,
    vulnerabilities: VulnerabilityInfo,
    fetcher: BaseMetadataFetcher,
    on_progress: Optional[ProgressCallback] = None,
) -> list[DependencyVerdict]:
    """Classify declared dependencies into verdicts.

    Ignored packages are dropped before any registry call. The remaining
    declarations keep their order in the output.

    Args:
        declarations: Declarations in any shape coerce_declarations accepts.
        config: Audit configuration.
        vulnerabilities: Mapping of package name to severity.
        fetcher: Registry metadata fetcher.
        on_progress: Optional callback invoked as each fetch completes.

    Returns:
        One DependencyVerdict per non-ignored declaration, in order.

    Raises:
        InvalidInputError: If declarations are not name/version pairs.
    """
    normalized = coerce_declarations(declarations)
    kept = filter_ignored_declarations(normalized, config).declarations

    metadata = await fetch_all_metadata(kept, fetcher, on_progress)

    return [
        classify_dependency(declaration, meta, config, vulnerabilities)
        for declaration, meta in zip(kept, metadata)
    ]
