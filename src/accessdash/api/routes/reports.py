"""Report generation, listing and asset detail relay routes."""

from fastapi import APIRouter, Query

from accessdash.dependencies import Relay, TraceId
from accessdash.logging_config import bind_request_context
from accessdash.models.reports import GenerateReportRequest

router = APIRouter(tags=["Reports"])


@router.post("/generate-report")
async def generate_report(body: GenerateReportRequest, relay: Relay) -> dict:
    """Forward a report generation request to the media API."""
    return await relay.generate_report(body)


@router.get("/reports")
async def list_reports(
    relay: Relay,
    max_results: str | None = Query(None),
    next_cursor: str | None = Query(None),
) -> dict:
    """List previously generated reports, one cursor page at a time."""
    return await relay.list_reports(max_results=max_results, next_cursor=next_cursor or None)


@router.get("/reports/{report_id}/assets")
async def report_assets(
    report_id: str,
    relay: Relay,
    trace_id: TraceId,
    next_cursor: str | None = Query(None),
) -> dict:
    """List assets for one report.

    The upstream page size is fixed server-side; a ``max_results`` sent by the
    browser is ignored.
    """
    bind_request_context(trace_id, report_id=report_id)
    return await relay.get_report_assets(report_id, next_cursor=next_cursor or None)
