"""Registry and vulnerability fetchers package."""

from dep_audit.resolvers.audit import (
    NpmAuditSource,
    NullVulnerabilitySource,
    parse_audit_output,
)
from dep_audit.resolvers.base import BaseMetadataFetcher, BaseVulnerabilitySource
from dep_audit.resolvers.npm import NpmRegistryFetcher

__all__ = [
    "BaseMetadataFetcher",
    "BaseVulnerabilitySource",
    "NpmAuditSource",
    "NpmRegistryFetcher",
    "NullVulnerabilitySource",
    "parse_audit_output",
]
