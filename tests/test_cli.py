"""Tests for the accessdash command line."""

import json

import pytest
from httpx import ASGITransport, AsyncClient

from accessdash import cli
from accessdash.client.api_client import DashboardClient

REPORTS_PATH = "/v1_1/demo/resources_last_access_reports"
ASSETS_PATH = "/v1_1/demo/resources/last_access_report"


@pytest.fixture
def wired_cli(app, monkeypatch):
    """Point the CLI's dashboard client at the in-process relay."""

    def factory(base_url):
        return DashboardClient(base_url, http=AsyncClient(transport=ASGITransport(app=app)))

    monkeypatch.setattr(cli, "DashboardClient", factory)


def _run(argv):
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)
    return exc.value.code


def _report(report_id):
    return {
        "id": report_id,
        "status": "done",
        "created_at": "2026-10-01T08:00:00Z",
        "params": {"resource_type": "video", "from_date": "2026-09-01", "to_date": "2026-09-30"},
        "total_resources": 12,
    }


def test_no_command_prints_help(capsys):
    assert _run([]) == 1
    assert "usage: accessdash" in capsys.readouterr().out


def test_reports_loads_all_pages(wired_cli, upstream, capsys):
    upstream.add_sequence(
        "GET",
        REPORTS_PATH,
        [
            (200, {"reports": [_report("r1")], "next_cursor": "c1"}),
            (200, {"reports": [_report("r2")]}),
        ],
    )

    assert _run(["--relay-url", "http://test", "reports", "--all"]) == 0

    out = capsys.readouterr().out
    assert "r1" in out and "r2" in out
    assert "More reports available" not in out


def test_reports_single_page_mentions_more(wired_cli, upstream, capsys):
    upstream.add("GET", REPORTS_PATH, 200, {"reports": [_report("r1")], "next_cursor": "c1"})

    assert _run(["--relay-url", "http://test", "reports"]) == 0

    assert "More reports available (cursor: c1)" in capsys.readouterr().out


def test_reports_error_on_first_page(wired_cli, upstream, capsys):
    upstream.add("GET", REPORTS_PATH, 401, {"error": {"message": "bad key"}})

    assert _run(["--relay-url", "http://test", "reports"]) == 1

    assert "Error loading reports: Cloudinary API request failed" in capsys.readouterr().err


def test_assets_keeps_rows_when_later_page_fails(wired_cli, upstream, capsys):
    upstream.add("GET", f"{REPORTS_PATH}/rep_1", 200, _report("rep_1"))
    upstream.add_sequence(
        "GET",
        f"{ASSETS_PATH}/rep_1",
        [
            (200, {"resources": [{"public_id": "a", "bytes": 1536, "secure_url": "https://x/a.png"}], "next_cursor": "c1"}),
            (500, {"error": {"message": "upstream down"}}),
        ],
    )

    assert _run(["--relay-url", "http://test", "assets", "rep_1", "--all"]) == 1

    captured = capsys.readouterr()
    assert "https://x/a.png" in captured.out
    assert "1.5 KB" in captured.out
    assert "Error loading more assets: Failed to fetch report assets" in captured.err


def test_generate_sends_split_folders(wired_cli, upstream, capsys):
    upstream.add("POST", REPORTS_PATH, 200, {"id": "rep_new"})

    code = _run([
        "--relay-url", "http://test",
        "generate", "--from", "2026-09-01", "--to", "2026-09-30",
        "--exclude-folders", "docs, temp",
    ])

    assert code == 0
    assert "id: rep_new" in capsys.readouterr().out
    body = json.loads(upstream.calls[0].content)
    assert body["exclude_folders"] == ["docs", "temp"]
    assert body["sort_order"] == "desc"
