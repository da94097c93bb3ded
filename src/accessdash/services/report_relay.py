"""Relay operations between the dashboard and the upstream report API."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from accessdash.config import Settings
from accessdash.errors.exceptions import ReportTooOldError, UpstreamError
from accessdash.models.reports import GenerateReportRequest
from accessdash.services.retention import filter_recent, is_expired
from accessdash.upstream.client import ReportAPIClient

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReportRelay:
    """Forwards dashboard requests upstream and shapes the replies.

    One instance is shared per process; it holds no per-request state.
    """

    def __init__(
        self,
        client: ReportAPIClient,
        settings: Settings,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.client = client
        self.settings = settings
        self.clock = clock

    async def generate_report(self, request: GenerateReportRequest) -> dict:
        """Submit a generation request; the upstream body is returned as-is."""
        payload = request.upstream_payload()
        data = await self.client.create_report(payload)
        logger.info(
            "Report generation requested (from=%s to=%s resource_type=%s)",
            request.from_date,
            request.to_date,
            request.resource_type or "all",
        )
        return data

    async def list_reports(
        self,
        max_results: str | int | None = None,
        next_cursor: str | None = None,
        filter_old: bool | None = None,
    ) -> dict:
        """Fetch one page of reports, optionally dropping expired ones.

        The recency filter is page-local; ``next_cursor`` always comes from
        upstream untouched.
        """
        if max_results is None or max_results == "":
            max_results = self.settings.report_page_size
        if filter_old is None:
            filter_old = self.settings.filter_old_reports

        data = await self.client.list_reports(max_results, next_cursor)
        if not filter_old:
            return data

        reports = data.get("reports") or []
        kept = filter_recent(reports, self.clock(), self.settings.report_retention_months)
        if len(kept) != len(reports):
            logger.debug("Filtered %d expired reports from page", len(reports) - len(kept))
        return {"reports": kept, "next_cursor": data.get("next_cursor")}

    async def get_report_assets(self, report_id: str, next_cursor: str | None = None) -> dict:
        """Fetch report metadata, enforce the age gate, then one asset page."""
        try:
            metadata = await self.client.get_report(report_id)
        except UpstreamError as exc:
            raise exc.with_context("Failed to fetch report metadata") from exc

        months = self.settings.report_retention_months
        if is_expired(metadata.get("created_at"), self.clock(), months):
            logger.info("Report %s is older than %d months, assets not fetched", report_id, months)
            raise ReportTooOldError(metadata, months)

        try:
            page = await self.client.list_report_assets(
                report_id,
                self.settings.asset_page_size,
                next_cursor,
            )
        except UpstreamError as exc:
            raise exc.with_context("Failed to fetch report assets", metadata) from exc

        return {**page, "metadata": metadata}
