"""Client for the media API's last-access report endpoints."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from accessdash.config import Settings
from accessdash.errors.exceptions import UpstreamError

logger = logging.getLogger(__name__)


def error_details(resp: httpx.Response) -> Any:
    """Return an upstream error body, parsed as JSON when possible."""
    try:
        return resp.json()
    except ValueError:
        return {"error": resp.text}


class ReportAPIClient:
    """Thin async wrapper around the upstream report and asset endpoints.

    Every call signs the request with basic auth (``api_key:api_secret``).
    Non-2xx answers raise :class:`UpstreamError`; transport failures surface
    as ``httpx.HTTPError``. Nothing is retried.
    """

    def __init__(self, settings: Settings, http: httpx.AsyncClient | None = None) -> None:
        self.settings = settings
        self._http = http or httpx.AsyncClient(timeout=settings.upstream_timeout_seconds)
        self._auth = httpx.BasicAuth(settings.api_key, settings.api_secret)

    async def aclose(self) -> None:
        await self._http.aclose()

    # ------------------------------------------------------------------
    # Request helper
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        json: dict | None = None,
    ) -> dict:
        resp = await self._http.request(method, url, params=params, json=json, auth=self._auth)
        if resp.is_error:
            logger.warning(
                "Upstream %s %s returned HTTP %s",
                method,
                resp.request.url.path,
                resp.status_code,
            )
            raise UpstreamError(resp.status_code, error_details(resp))
        data = resp.json()
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object from {resp.request.url.path}, got {type(data).__name__}")
        return data

    @staticmethod
    def _page_params(max_results: str | int, next_cursor: str | None) -> dict[str, str]:
        params = {"max_results": str(max_results)}
        if next_cursor:
            params["next_cursor"] = next_cursor
        return params

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def create_report(self, payload: dict) -> dict:
        """Ask upstream to generate a new last-access report."""
        return await self._request("POST", self.settings.reports_url, json=payload)

    async def list_reports(self, max_results: str | int, next_cursor: str | None = None) -> dict:
        """Fetch one page of previously generated reports."""
        return await self._request(
            "GET",
            self.settings.reports_url,
            params=self._page_params(max_results, next_cursor),
        )

    async def get_report(self, report_id: str) -> dict:
        """Fetch metadata for a single report."""
        return await self._request("GET", f"{self.settings.reports_url}/{report_id}")

    async def list_report_assets(
        self,
        report_id: str,
        max_results: str | int,
        next_cursor: str | None = None,
    ) -> dict:
        """Fetch one page of assets listed by a report."""
        return await self._request(
            "GET",
            f"{self.settings.report_assets_url}/{report_id}",
            params=self._page_params(max_results, next_cursor),
        )
