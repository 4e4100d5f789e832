from typing import Optional

class PipelineError(Exception):
    """Base exception for surf pipeline errors."""
    pass

class UpstreamFetchError(PipelineError):
    """Raised when an external data source fails (network, non-2xx)."""

    def __init__(self, source: str, message: str, status: Optional[int] = None):
        self.source = source
        self.status = status
        super().__init__(f"{source}: {message}")

class FetchTimeoutError(UpstreamFetchError):
    """Raised when an outbound request exceeds its timeout."""

    def __init__(self, source: str, timeout: float):
        self.timeout = timeout
        super().__init__(source, f"request timed out after {timeout:.0f}s")

class ParseError(PipelineError):
    """Raised when a source payload is malformed or insufficient."""
    pass

class PersistenceError(PipelineError):
    """Raised when a datastore write fails."""
    pass

class DependencyUnmetError(PipelineError):
    """Raised when a stage's required upstream stage did not succeed."""
    pass

class ReportNotFoundError(PipelineError):
    """Raised when an operation requires a report that does not exist."""
    pass

class InvalidLocationError(PipelineError):
    """Raised for a location id that is not configured."""

    def __init__(self, location_id: str):
        self.location_id = location_id
        super().__init__(f"Invalid location: {location_id}")
