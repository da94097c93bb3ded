"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Upstream media API credentials (not pre-validated; upstream rejects bad auth)
    cloud_name: str = ""
    api_key: str = ""
    api_secret: str = ""

    # Upstream API
    upstream_base_url: str = "https://api.cloudinary.com/v1_1"
    upstream_timeout_seconds: float = 30.0

    # Paging
    report_page_size: int = 10
    asset_page_size: int = 100

    # Retention
    report_retention_months: int = 6
    filter_old_reports: bool = False

    # CORS
    cors_allowed_origins: list[str] = ["http://localhost:3000"]

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "info"
    json_logs: bool = True

    # Dashboard client
    relay_url: str = "http://localhost:8080"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "ACCESSDASH_",
    }

    @property
    def reports_url(self) -> str:
        """Base URL of the last-access reports collection for this account."""
        return f"{self.upstream_base_url.rstrip('/')}/{self.cloud_name}/resources_last_access_reports"

    @property
    def report_assets_url(self) -> str:
        """Base URL of the per-report asset listing for this account."""
        return f"{self.upstream_base_url.rstrip('/')}/{self.cloud_name}/resources/last_access_report"


settings = Settings()
