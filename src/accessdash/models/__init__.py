"""Report and asset models shared by the relay and the dashboard client."""

from accessdash.models.reports import (  # noqa: F401
    MAX_EXCLUDED_FOLDERS,
    Asset,
    AssetPage,
    GenerateReportRequest,
    Report,
    ReportPage,
    ReportParams,
)
