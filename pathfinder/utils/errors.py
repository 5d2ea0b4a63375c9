"""
Error Types

Exception hierarchy for the pathway pipeline. Errors are raised where they are
detected and turned into user-facing text only by the coordinator and the CLI.
"""


class PathfinderError(Exception):
    """Base class for all application errors."""


class PathwayServiceError(PathfinderError):
    """Generation service failed: missing credential, upstream failure or timeout."""


class PathwayParseError(PathfinderError):
    """Generation service returned output that is unparsable or structurally invalid."""


class SearchError(PathfinderError):
    """Grounded live search failed for any reason."""

    def __init__(self, message: str = "Live search failed."):
        super().__init__(message)


class ExportError(PathfinderError):
    """PDF export failed."""


class ConfigurationError(PathfinderError):
    """Configuration file or bundled schema is missing or invalid."""
