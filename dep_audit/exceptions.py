"""Custom exceptions for dep-audit."""


class DepAuditError(Exception):
    """Base exception for all dep-audit errors."""

    pass


class NetworkError(DepAuditError):
    """Exception raised when a network request fails."""

    pass


class ConfigurationError(DepAuditError):
    """Exception raised when configuration or a persisted file is invalid."""

    pass


class ScanError(DepAuditError):
    """Exception raised when a scan operation fails."""

    pass


class InvalidInputError(ScanError):
    """Exception raised when declarations are not name/version pairs."""

    pass
