"""accessdash CLI: serve, generate, reports, assets."""

from __future__ import annotations

import argparse
import asyncio
import sys

from accessdash.client.accumulator import KeyedAccumulator, PaginationAccumulator
from accessdash.client.api_client import DashboardClient, RelayRequestError
from accessdash.formatting import format_bytes, format_date, format_dimensions, split_folders
from accessdash.models.reports import Asset, GenerateReportRequest, Report


def _print_rows(headers: list[str], rows: list[list[str]]) -> None:
    widths = [len(h) for h in headers]
    for row in rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row)]
    print("  ".join(h.ljust(w) for h, w in zip(headers, widths)))
    print("  ".join("-" * w for w in widths))
    for row in rows:
        print("  ".join(cell.ljust(w) for cell, w in zip(row, widths)))


def _report_row(report: Report) -> list[str]:
    return [
        report.id,
        report.status,
        report.params.resource_type or "N/A",
        str(report.total_resources),
        format_date(report.params.from_date),
        format_date(report.params.to_date),
        format_date(report.created_at),
    ]


def _asset_row(asset: Asset) -> list[str]:
    return [
        asset.secure_url or asset.url,
        f"{asset.resource_type}/{asset.type}",
        asset.format,
        format_bytes(asset.bytes),
        format_dimensions(asset.width, asset.height),
        format_date(asset.last_access),
        format_date(asset.created_at),
    ]


async def _drain(acc: PaginationAccumulator, pages: int | None) -> None:
    """Keep loading pages until *pages* are loaded, the cursor ends, or a fetch fails."""
    loaded = 1
    while acc.more and (pages is None or loaded < pages):
        if not await acc.fetch_next_page():
            break
        loaded += 1


def _page_limit(args: argparse.Namespace) -> int | None:
    return None if args.all else args.pages


# ------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------


def cmd_serve(args: argparse.Namespace) -> None:
    """Run the relay under uvicorn."""
    import uvicorn

    from accessdash.config import settings

    uvicorn.run(
        "accessdash.main:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
    )


async def _generate(args: argparse.Namespace) -> int:
    request = GenerateReportRequest(
        from_date=args.from_date,
        to_date=args.to_date,
        resource_type=args.resource_type,
        exclude_folders=split_folders(args.exclude_folders) or None,
        sort_by=args.sort_by,
        sort_order=args.sort_order,
    )
    client = DashboardClient(args.relay_url)
    try:
        data = await client.generate_report(request)
    except RelayRequestError as exc:
        print(f"Error generating report: {exc}", file=sys.stderr)
        return 1
    finally:
        await client.aclose()
    report_id = data.get("id")
    print(f"Report generation requested{f' (id: {report_id})' if report_id else ''}.")
    return 0


async def _reports(args: argparse.Namespace) -> int:
    client = DashboardClient(args.relay_url)
    acc: PaginationAccumulator[Report] = PaginationAccumulator(
        lambda cursor: client.fetch_reports(cursor, page_size=args.page_size)
    )
    try:
        await acc.reset_and_fetch_first_page()
        if acc.error is None:
            await _drain(acc, _page_limit(args))
    finally:
        await client.aclose()

    if acc.error and not acc.items:
        print(f"Error loading reports: {acc.error}", file=sys.stderr)
        return 1
    if not acc.items:
        print("No reports generated yet. Use `accessdash generate` to create one.")
    else:
        _print_rows(
            ["ID", "Status", "Resource Type", "Total Resources", "From Date", "To Date", "Created At"],
            [_report_row(r) for r in acc.items],
        )
    if acc.error:
        print(f"Error loading more reports: {acc.error}", file=sys.stderr)
        return 1
    if acc.more:
        print(f"\nMore reports available (cursor: {acc.cursor})")
    return 0


async def _assets(args: argparse.Namespace) -> int:
    client = DashboardClient(args.relay_url)
    acc: KeyedAccumulator[Asset] = KeyedAccumulator(
        lambda report_id, cursor: client.fetch_assets(report_id, cursor),
        dedupe_key=(lambda a: (a.resource_type, a.type, a.public_id)) if args.dedupe else None,
    )
    try:
        await acc.attach(args.report_id)
        if acc.error is None:
            await _drain(acc, _page_limit(args))
    finally:
        await client.aclose()

    if acc.error and not acc.items:
        print(f"Error loading report details: {acc.error}", file=sys.stderr)
        return 1

    meta = client.last_metadata
    if meta is not None:
        print(f"Report {meta.id} [{meta.status}] created {format_date(meta.created_at)}")
        print(f"Total resources: {meta.total_resources}\n")
    if not acc.items:
        print("No assets found in this report.")
    else:
        _print_rows(
            ["URL", "Type", "Format", "Size", "Dimensions", "Last Access", "Created"],
            [_asset_row(a) for a in acc.items],
        )
    if acc.error:
        print(f"Error loading more assets: {acc.error}", file=sys.stderr)
        return 1
    if acc.more:
        print(f"\nMore assets available (cursor: {acc.cursor})")
    return 0


def cmd_generate(args: argparse.Namespace) -> None:
    """Request a new last-access report."""
    sys.exit(asyncio.run(_generate(args)))


def cmd_reports(args: argparse.Namespace) -> None:
    """List generated reports."""
    sys.exit(asyncio.run(_reports(args)))


def cmd_assets(args: argparse.Namespace) -> None:
    """List the assets of one report."""
    sys.exit(asyncio.run(_assets(args)))


def _add_paging_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--pages", type=int, default=1, help="Number of pages to load (default: 1)")
    p.add_argument("--all", action="store_true", help="Load pages until the cursor runs out")


def main(argv: list[str] | None = None) -> None:
    from accessdash.config import settings

    parser = argparse.ArgumentParser(
        prog="accessdash",
        description="Generate and browse media last-access reports",
    )
    parser.add_argument("--relay-url", default=settings.relay_url,
                        help=f"Relay base URL (default: {settings.relay_url})")
    sub = parser.add_subparsers(dest="command")

    # serve
    p_serve = sub.add_parser("serve", help="Run the relay HTTP server")
    p_serve.add_argument("--host", help=f"Bind host (default: {settings.host})")
    p_serve.add_argument("--port", type=int, help=f"Bind port (default: {settings.port})")

    # generate
    p_gen = sub.add_parser("generate", help="Generate a last-access report")
    p_gen.add_argument("--from", dest="from_date", required=True, help="Start date (YYYY-MM-DD)")
    p_gen.add_argument("--to", dest="to_date", required=True, help="End date (YYYY-MM-DD)")
    p_gen.add_argument("--resource-type", choices=["image", "video", "raw"],
                       help="Limit to one resource type (default: all)")
    p_gen.add_argument("--exclude-folders", help="Comma-separated folders to skip, up to 50")
    p_gen.add_argument("--sort-by", default="accessed_at", help="Sort field (default: accessed_at)")
    p_gen.add_argument("--sort-order", choices=["asc", "desc"], default="desc",
                       help="Sort order (default: desc)")

    # reports
    p_reports = sub.add_parser("reports", help="List generated reports")
    p_reports.add_argument("--page-size", type=int, default=settings.report_page_size,
                           help=f"Reports per page (default: {settings.report_page_size})")
    _add_paging_args(p_reports)

    # assets
    p_assets = sub.add_parser("assets", help="List the assets of a report")
    p_assets.add_argument("report_id", help="Report ID")
    p_assets.add_argument("--dedupe", action="store_true",
                          help="Skip assets already listed on an earlier page")
    _add_paging_args(p_assets)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    commands = {
        "serve": cmd_serve,
        "generate": cmd_generate,
        "reports": cmd_reports,
        "assets": cmd_assets,
    }
    commands[args.command](args)


if __name__ == "__main__":
    main()
