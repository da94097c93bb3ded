"""Async HTTP client the dashboard uses to talk to the relay."""

from __future__ import annotations

import httpx

from accessdash.models.reports import Asset, AssetPage, GenerateReportRequest, Report, ReportPage


class RelayRequestError(Exception):
    """The relay answered with an error envelope or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None, payload: dict | None = None):
        self.status_code = status_code
        self.payload = payload or {}
        super().__init__(message)


class DashboardClient:
    """Async client for the relay endpoints.

    Page fetchers return ``(items, next_cursor)`` so they plug straight into
    :class:`~accessdash.client.accumulator.PaginationAccumulator`.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        http: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._http = http or httpx.AsyncClient(timeout=timeout)
        self.last_metadata: Report | None = None

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _call(self, method: str, path: str, **kw) -> dict:
        try:
            r = await self._http.request(method, f"{self.base_url}{path}", **kw)
        except httpx.HTTPError as exc:
            raise RelayRequestError(f"Relay unreachable: {exc}") from exc
        try:
            data = r.json()
        except ValueError:
            data = {}
        if r.is_error:
            message = data.get("message") or data.get("error") or f"HTTP {r.status_code}"
            raise RelayRequestError(message, r.status_code, data)
        return data

    async def generate_report(self, request: GenerateReportRequest) -> dict:
        return await self._call("POST", "/generate-report", json=request.model_dump(exclude_none=True))

    async def fetch_reports(
        self,
        cursor: str | None = None,
        page_size: int = 10,
    ) -> tuple[list[Report], str | None]:
        """Fetch one page of reports from ``GET /reports``."""
        params: dict[str, str] = {"max_results": str(page_size)}
        if cursor:
            params["next_cursor"] = cursor
        data = await self._call("GET", "/reports", params=params)
        page = ReportPage.model_validate(data)
        return page.reports, page.next_cursor or None

    async def fetch_assets(
        self,
        report_id: str,
        cursor: str | None = None,
    ) -> tuple[list[Asset], str | None]:
        """Fetch one page of assets; the report metadata is kept on the client."""
        params = {"next_cursor": cursor} if cursor else None
        data = await self._call("GET", f"/reports/{report_id}/assets", params=params)
        page = AssetPage.model_validate(data)
        if page.metadata is not None:
            self.last_metadata = page.metadata
        return page.resources, page.next_cursor or None
