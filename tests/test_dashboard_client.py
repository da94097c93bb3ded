"""End-to-end tests: dashboard client -> relay app -> scripted upstream."""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from accessdash.client.accumulator import KeyedAccumulator, PaginationAccumulator
from accessdash.client.api_client import DashboardClient, RelayRequestError
from accessdash.models.reports import GenerateReportRequest, Report, ReportParams

REPORTS_PATH = "/v1_1/demo/resources_last_access_reports"
ASSETS_PATH = "/v1_1/demo/resources/last_access_report"

META = {
    "id": "rep_1",
    "status": "done",
    "created_at": "2026-09-30T10:00:00Z",
    "params": {"resource_type": "image"},
    "total_resources": 3,
}


def _asset(public_id: str, size: int = 1536) -> dict:
    return {
        "public_id": public_id,
        "format": "jpg",
        "version": 1,
        "resource_type": "image",
        "type": "upload",
        "created_at": "2026-01-01T00:00:00Z",
        "last_access": "2026-09-01T00:00:00Z",
        "bytes": size,
        "width": 640,
        "height": 480,
        "url": f"http://res.example.test/{public_id}.jpg",
        "secure_url": f"https://res.example.test/{public_id}.jpg",
    }


@pytest.fixture
async def dashboard(app):
    http = AsyncClient(transport=ASGITransport(app=app))
    client = DashboardClient("http://test", http=http)
    yield client
    await client.aclose()


@pytest.mark.asyncio
async def test_asset_pages_accumulate_through_relay(dashboard, upstream):
    upstream.add("GET", f"{REPORTS_PATH}/rep_1", 200, META)
    upstream.add_sequence(
        "GET",
        f"{ASSETS_PATH}/rep_1",
        [
            (200, {"resources": [_asset("A"), _asset("B")], "next_cursor": "c1"}),
            (200, {"resources": [_asset("C")], "next_cursor": None}),
        ],
    )
    acc = KeyedAccumulator(dashboard.fetch_assets)

    await acc.attach("rep_1")
    await acc.fetch_next_page()

    assert [a.public_id for a in acc.items] == ["A", "B", "C"]
    assert acc.more is False
    assert dashboard.last_metadata.id == "rep_1"
    asset_calls = upstream.calls_to(f"{ASSETS_PATH}/rep_1")
    assert [c.url.params.get("next_cursor") for c in asset_calls] == [None, "c1"]


@pytest.mark.asyncio
async def test_report_pages_accumulate_through_relay(dashboard, upstream):
    upstream.add_sequence(
        "GET",
        REPORTS_PATH,
        [
            (200, {"reports": [dict(META, id="r1"), dict(META, id="r2")], "next_cursor": "c1"}),
            (200, {"reports": [dict(META, id="r3")]}),
        ],
    )
    acc = PaginationAccumulator(lambda cursor: dashboard.fetch_reports(cursor, page_size=2))

    await acc.reset_and_fetch_first_page()
    await acc.fetch_next_page()

    assert [r.id for r in acc.items] == ["r1", "r2", "r3"]
    assert acc.more is False
    assert upstream.calls[0].url.params["max_results"] == "2"


@pytest.mark.asyncio
async def test_asset_page_metadata_is_typed_and_null_lists_are_empty(dashboard, upstream):
    upstream.add("GET", f"{REPORTS_PATH}/rep_1", 200, META)
    upstream.add("GET", f"{ASSETS_PATH}/rep_1", 200, {"resources": None, "next_cursor": ""})

    assets, cursor = await dashboard.fetch_assets("rep_1")

    assert assets == []
    assert cursor is None
    assert isinstance(dashboard.last_metadata, Report)
    assert isinstance(dashboard.last_metadata.params, ReportParams)
    assert dashboard.last_metadata.params.resource_type == "image"
    assert dashboard.last_metadata.total_resources == 3


@pytest.mark.asyncio
async def test_null_report_list_is_empty_page(dashboard, upstream):
    upstream.add("GET", REPORTS_PATH, 200, {"reports": None})

    reports, cursor = await dashboard.fetch_reports()

    assert reports == []
    assert cursor is None


@pytest.mark.asyncio
async def test_too_old_report_surfaces_relay_message(dashboard, upstream):
    upstream.add("GET", f"{REPORTS_PATH}/rep_old", 200, dict(META, id="rep_old", created_at="2025-01-01T00:00:00Z"))
    acc = KeyedAccumulator(dashboard.fetch_assets)

    await acc.attach("rep_old")

    assert acc.items == []
    assert acc.error == "This report is older than 6 months and its assets may no longer be available"


@pytest.mark.asyncio
async def test_relay_error_carries_status_and_payload(dashboard, upstream):
    upstream.add("GET", f"{REPORTS_PATH}/nope", 404, {"message": "not found"})

    with pytest.raises(RelayRequestError) as exc:
        await dashboard.fetch_assets("nope")

    assert exc.value.status_code == 404
    assert str(exc.value) == "Failed to fetch report metadata"
    assert exc.value.payload["details"] == {"message": "not found"}


@pytest.mark.asyncio
async def test_generate_report_round_trip(dashboard, upstream):
    upstream.add("POST", REPORTS_PATH, 200, {"id": "rep_new", "status": "pending"})

    data = await dashboard.generate_report(
        GenerateReportRequest(from_date="2026-01-01", to_date="2026-02-01", exclude_folders=["docs"])
    )

    assert data == {"id": "rep_new", "status": "pending"}


@pytest.mark.asyncio
async def test_unreachable_relay():
    def refuse(request):
        raise httpx.ConnectError("connection refused")

    client = DashboardClient("http://relay.test", http=httpx.AsyncClient(transport=httpx.MockTransport(refuse)))
    with pytest.raises(RelayRequestError, match="Relay unreachable"):
        await client.fetch_reports()
    await client.aclose()
