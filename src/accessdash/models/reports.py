"""Pydantic models for last-access reports, assets and their pages."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_EXCLUDED_FOLDERS = 50


class GenerateReportRequest(BaseModel):
    """Parameters for a new last-access report.

    Unknown keys are kept so the body reaches the upstream API verbatim.
    """

    model_config = ConfigDict(extra="allow")

    from_date: str = Field(..., min_length=1)
    to_date: str = Field(..., min_length=1)
    resource_type: str | None = None
    exclude_folders: list[str] | None = Field(None, max_length=MAX_EXCLUDED_FOLDERS)
    sort_by: str | None = None
    sort_order: str | None = None

    @field_validator("resource_type", "sort_by", "sort_order", mode="before")
    @classmethod
    def blank_as_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def upstream_payload(self) -> dict:
        """Body forwarded to the upstream generation endpoint."""
        payload = self.model_dump(exclude_none=True)
        if not payload.get("exclude_folders"):
            payload.pop("exclude_folders", None)
        return payload


class ReportParams(BaseModel):
    model_config = ConfigDict(extra="allow")

    resource_type: str | None = None
    from_date: str | None = None
    to_date: str | None = None


class Report(BaseModel):
    """A generated report; status is opaque (pending, done, ...)."""

    model_config = ConfigDict(extra="allow")

    id: str
    status: str = ""
    created_at: str = ""
    params: ReportParams = Field(default_factory=ReportParams)
    total_resources: int = Field(0, ge=0)


class Asset(BaseModel):
    """One stored media object listed in a report."""

    model_config = ConfigDict(extra="allow")

    public_id: str
    format: str = ""
    version: int = 0
    resource_type: str = ""
    type: str = ""
    created_at: str = ""
    last_access: str = ""
    bytes: int = Field(0, ge=0)
    width: int = Field(0, ge=0)
    height: int = Field(0, ge=0)
    url: str = ""
    secure_url: str = ""


class ReportPage(BaseModel):
    model_config = ConfigDict(extra="allow")

    reports: list[Report] = Field(default_factory=list)
    next_cursor: str | None = None

    @field_validator("reports", mode="before")
    @classmethod
    def null_as_empty(cls, value):
        return value or []


class AssetPage(BaseModel):
    model_config = ConfigDict(extra="allow")

    resources: list[Asset] = Field(default_factory=list)
    next_cursor: str | None = None
    metadata: Report | None = None

    @field_validator("resources", mode="before")
    @classmethod
    def null_as_empty(cls, value):
        return value or []

    @field_validator("metadata", mode="before")
    @classmethod
    def empty_as_missing(cls, value):
        return value or None
