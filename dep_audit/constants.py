"""Constants for dep-audit."""

# Exit codes
EXIT_SUCCESS = 0  # Command completed
EXIT_ERROR = 2  # Command failed due to error

# Sentinel for values the registry could not resolve
UNKNOWN = "Unknown"

# Project-relative files
MANIFEST_FILE = "package.json"
REPORT_FILE = "dependency-audit-report.json"
MARKDOWN_REPORT_FILE = "dependency-audit-report.md"

DEFAULT_ALLOWED_LICENSES = ("MIT", "Apache-2.0", "BSD-2-Clause", "BSD-3-Clause")

# npm registry and audit collaborators
DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"
REGISTRY_URL_ENV = "DEP_AUDIT_REGISTRY_URL"
REGISTRY_TIMEOUT_SECONDS = 30.0
AUDIT_COMMAND = ("npm", "audit", "--json")
AUDIT_TIMEOUT_SECONDS = 120

# Rate limiting for concurrent registry requests
MAX_CONCURRENT_REQUESTS = 10

LOG_LEVEL_ENV = "DEP_AUDIT_LOG_LEVEL"
