"""Exception classes raised by the report relay."""

from typing import Any


class AccessDashError(Exception):
    """Base exception; rendered as a flat JSON error envelope."""

    def __init__(
        self,
        error: str,
        status_code: int = 500,
        *,
        message: str | None = None,
        details: Any = None,
        metadata: dict | None = None,
    ):
        self.error = error
        self.status_code = status_code
        self.message = message
        self.details = details
        self.metadata = metadata
        super().__init__(message or error)

    def to_envelope(self) -> dict[str, Any]:
        envelope = {
            "error": self.error,
            "message": self.message,
            "details": self.details,
            "metadata": self.metadata,
        }
        return {k: v for k, v in envelope.items() if v is not None}


class UpstreamError(AccessDashError):
    """The media API answered with a non-2xx status.

    ``details`` carries the upstream error body, parsed as JSON when possible.
    """

    def __init__(self, status_code: int, details: Any, error: str = "Cloudinary API request failed"):
        super().__init__(error, status_code, details=details)

    def with_context(self, error: str, metadata: dict | None = None) -> "UpstreamError":
        """Return a copy relabelled for the relay step that failed."""
        relabelled = UpstreamError(self.status_code, self.details, error=error)
        relabelled.metadata = metadata
        return relabelled


class ReportTooOldError(AccessDashError):
    """Report is past the retention window; its assets are not fetched."""

    def __init__(self, metadata: dict, months: int = 6):
        super().__init__(
            "Report too old",
            400,
            message=(
                f"This report is older than {months} months "
                "and its assets may no longer be available"
            ),
            metadata=metadata,
        )
