"""Scanner module for manifest reading and dependency auditing."""
import asyncio
import json
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import structlog

from dep_audit.analysis.classifier import (
    ProgressCallback,
    classify,
    coerce_declarations,
    merge_manifest_groups,
)
from dep_audit.analysis.filtering import filter_ignored_declarations
from dep_audit.constants import MANIFEST_FILE
from dep_audit.exceptions import InvalidInputError
from dep_audit.models.config import AuditConfig
from dep_audit.models.dependency import DependencyDeclaration
from dep_audit.models.scan import AuditReport, ScanOutcome, VulnerabilityInfo
from dep_audit.resolvers.audit import NpmAuditSource
from dep_audit.resolvers.base import BaseMetadataFetcher, BaseVulnerabilitySource
from dep_audit.resolvers.npm import NpmRegistryFetcher

log = structlog.get_logger("dep_audit.scanner")

StageCallback = Callable[[str], None]

AUDIT_STAGE = "Running npm audit..."
REGISTRY_STAGE = "Fetching registry metadata..."


def _dependency_group(manifest: dict[str, Any], key: str) -> dict[str, Any]:
    group = manifest.get(key)
    if group is None:
        return {}
    if not isinstance(group, dict):
        raise InvalidInputError(
            f"'{key}' in {MANIFEST_FILE} must be a mapping of name to version, "
            f"got {type(group).__name__}"
        )
    return group


def load_declarations(project_dir: Optional[Path] = None) -> list[DependencyDeclaration]:
    """Read the declared dependencies from the project manifest.

    Regular dependencies are listed before dev dependencies. A missing or
    unparseable manifest yields no declarations.

    Args:
        project_dir: Project directory. Defaults to current working directory.

    Returns:
        Ordered list of declarations.

    Raises:
        InvalidInputError: If a dependency group is not a mapping of
            name to version string.
    """
    path = (project_dir or Path.cwd()) / MANIFEST_FILE
    try:
        manifest = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        log.warning("manifest_missing", path=str(path))
        return []
    except (OSError, UnicodeDecodeError, ValueError) as e:
        log.warning("manifest_unreadable", path=str(path), error=str(e))
        return []

    if not isinstance(manifest, dict):
        log.warning("manifest_not_object", path=str(path))
        return []

    merged = merge_manifest_groups(
        _dependency_group(manifest, "dependencies"),
        _dependency_group(manifest, "devDependencies"),
    )
    return coerce_declarations(merged)


async def scan_project(
    project_dir: Path,
    config: AuditConfig,
    fetcher: Optional[BaseMetadataFetcher] = None,
    audit_source: Optional[BaseVulnerabilitySource] = None,
    registry_url: Optional[str] = None,
    on_progress: Optional[ProgressCallback] = None,
    on_stage: Optional[StageCallback] = None,
) -> ScanOutcome:
    """Audit the declared dependencies of a project.

    The report is not persisted here; callers save it.

    Args:
        project_dir: Project directory containing the manifest.
        config: Audit configuration.
        fetcher: Optional registry fetcher. Defaults to the npm registry
            with a shared HTTP client.
        audit_source: Optional vulnerability source. Defaults to npm audit
            in project_dir.
        registry_url: Registry base URL for the default fetcher.
        on_progress: Optional callback invoked as each fetch completes.
        on_stage: Optional callback invoked with a description as the scan
            moves from the audit step to the registry step.

    Returns:
        ScanOutcome with the report and the ignored package names.

    Raises:
        InvalidInputError: If the manifest declarations are malformed.
    """
    declarations = load_declarations(project_dir)
    ignored_names = filter_ignored_declarations(declarations, config).ignored_names

    vulnerabilities: VulnerabilityInfo = {}
    if declarations:
        source = audit_source or NpmAuditSource(project_dir)
        if on_stage is not None:
            on_stage(AUDIT_STAGE)
        # The audit command is blocking; keep the event loop free
        vulnerabilities = await asyncio.to_thread(source.fetch_all)

    if on_stage is not None:
        on_stage(REGISTRY_STAGE)

    if fetcher is not None:
        verdicts = await classify(
            declarations, config, vulnerabilities, fetcher, on_progress
        )
    else:
        # Shared HTTP client for connection reuse
        async with httpx.AsyncClient() as client:
            verdicts = await classify(
                declarations,
                config,
                vulnerabilities,
                NpmRegistryFetcher(client=client, registry_url=registry_url),
                on_progress,
            )

    log.info(
        "scan_complete",
        declared=len(declarations),
        audited=len(verdicts),
        ignored=len(ignored_names),
    )
    return ScanOutcome(
        report=AuditReport(verdicts=verdicts),
        ignored_names=ignored_names,
    )
