# =============================================================================
# src/cli/charts.py - Chart Browser CLI
# =============================================================================
#
# Command-line access to the same ChartService the API serves, without
# starting the web server.  Useful for checking an upstream chart by hand
# or piping a page of results into another tool.
#
# Typical usage:
#   python -m src.cli.charts top topFreeIphone --country GB --limit 10
#   python -m src.cli.charts v2 FreeAppsV2 --genre Games --offset 25
#   python -m src.cli.charts search "photo editor" --json
#   python -m src.cli.charts types
#
# Output modes:
#   - Text (default): one ranked line per app plus a pagination footer
#   - JSON (--json): the same camelCase body the API would return
#
# --json implies --quiet so stdout carries only the JSON document.
# =============================================================================

"""Standalone CLI for browsing charts and searching the store.

Usage::

    python -m src.cli.charts top 27
    python -m src.cli.charts v2 FreeAppsV2 --limit 10 --json
    python -m src.cli.charts search "chess"
    python -m src.cli.charts types
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Sequence


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def _format_rating(value: float | None) -> str:
    return f"{value:.1f}" if value is not None else "-"


def _format_overlay(record: Any) -> str:
    overlay = getattr(record, "overlay", None)
    if overlay is None:
        return ""
    if overlay.error:
        return f"  [overlay error: {overlay.error}]"
    downloads = f"{overlay.downloads:,.0f}" if overlay.downloads is not None else "-"
    revenue = f"{overlay.revenue:,.0f} {overlay.revenue_unit}" if overlay.revenue is not None else "-"
    return f"  [downloads {downloads} | revenue {revenue}]"


def format_page_text(page: Any, title: str) -> str:
    """Render a page of records as a ranked text listing."""
    lines: list[str] = [title, "-" * len(title)]
    for position, record in enumerate(page.items, start=page.pagination.offset + 1):
        rank = getattr(record, "rank", position)
        lines.append(
            f"{rank:>4}. {record.name}  ({record.creator or 'unknown'})"
            f"  rating {_format_rating(record.rating_average)}"
            f"{_format_overlay(record)}"
        )
    if not page.items:
        lines.append("  (no results)")

    p = page.pagination
    footer = f"showing {len(page.items)} of {p.total} resolved ({p.total_available} listed)"
    if p.has_more:
        footer += f"; next page: --offset {p.next_offset}"
    lines.append("")
    lines.append(footer)
    return "\n".join(lines)


def format_page_json(page: Any, **extra: Any) -> str:
    body: dict[str, Any] = {
        "success": True,
        "apps": [item.model_dump(mode="json", by_alias=True) for item in page.items],
        **extra,
        "pagination": page.pagination.model_dump(mode="json", by_alias=True),
    }
    return json.dumps(body, indent=2, ensure_ascii=False)


def _format_types(service: Any, json_output: bool) -> str:
    chart_types = service.chart_types()
    legacy = service.legacy_charts()
    if json_output:
        return json.dumps(
            {
                "success": True,
                "chartTypes": [c.model_dump(by_alias=True) for c in chart_types],
                "legacy": {"charts": [c.model_dump(by_alias=True) for c in legacy]},
            },
            indent=2,
        )
    lines = ["Charts (v2)", "-----------"]
    lines.extend(f"  {c.name:<24} {c.display_name}" for c in chart_types)
    lines.extend(["", "Legacy charts (pop id)", "----------------------"])
    lines.extend(f"  {c.id:<24} {c.chart_id}" for c in legacy)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


def _suppress_logs() -> None:
    """Send structlog and stdlib logging to stderr at WARNING+.

    Must run before ``src.main`` is imported, since structlog caches
    loggers on first use.
    """
    import logging
    import os

    import structlog

    os.environ["LOG_LEVEL"] = "WARNING"
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
    root = logging.getLogger()
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.WARNING)
    root.addHandler(handler)
    root.setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


async def _run(args: argparse.Namespace) -> int:
    # Deferred import: src.main loads settings and builds the app.
    from src.main import build_components
    from src.models.pagination import PageCursor
    from src.utils.errors import ChartStackError

    components = build_components()
    service = components["chart_service"]
    engine = components["engine_config"]

    try:
        if args.command == "types":
            print(_format_types(service, args.json_output))
            return 0

        if args.command == "top":
            cursor = PageCursor(offset=args.offset, limit=args.limit or engine.charts_default_limit)
            page = await service.top_charts(args.ranking, cursor, category=args.genre, country=args.country)
            title = f"Top chart {args.ranking} ({args.country or engine.lookup_country})"
            extra: dict[str, Any] = {"total": page.pagination.total_available}
        elif args.command == "v2":
            cursor = PageCursor(offset=args.offset, limit=args.limit or engine.charts_v2_default_limit)
            page = await service.charts_v2(
                args.chart_type,
                cursor,
                genre=args.genre,
                country=args.country,
                max_fetch=args.max_fetch or engine.charts_v2_default_max_fetch,
            )
            title = f"{args.chart_type} ({args.country or engine.lookup_country})"
            extra = {"chartInfo": {"chartType": args.chart_type}}
        else:
            cursor = PageCursor(offset=args.offset, limit=args.limit or engine.search_default_limit)
            page = await service.search(args.term, cursor, country=args.country, language=args.language)
            title = f'Search "{args.term}"'
            extra = {}
    except ChartStackError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        await components["http_client"].aclose()

    if args.json_output:
        print(format_page_json(page, **extra))
    else:
        print(format_page_text(page, title))
    return 0


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {value}")
    return number


def _add_page_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--country", default=None, help="Country code (e.g. US, GB).")
    parser.add_argument("--limit", type=_positive_int, default=None, help="Page size.")
    parser.add_argument("--offset", type=_non_negative_int, default=0, help="Page offset.")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m src.cli.charts",
        description="Browse App Store charts and search results from the command line.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output the API JSON body instead of formatted text.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress log output.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    top = sub.add_parser("top", help="Legacy top chart (pop id or chart key).")
    top.add_argument("ranking", help="Pop id (27) or chart key (topFreeIphone).")
    top.add_argument("--genre", default=None, help="Genre id or name (default: all).")
    _add_page_args(top)

    v2 = sub.add_parser("v2", help="Charts-v2 listing by chart name.")
    v2.add_argument("chart_type", help="Chart name, e.g. FreeAppsV2.")
    v2.add_argument("--genre", default=None, help="Genre id or name (default: all).")
    v2.add_argument("--max-fetch", type=_positive_int, default=None, dest="max_fetch", help="Ids to request from the chart.")
    _add_page_args(v2)

    search = sub.add_parser("search", help="Free-text app search.")
    search.add_argument("term", help="Search term.")
    search.add_argument("--language", default=None, help="Result language, e.g. en-US.")
    _add_page_args(search)

    sub.add_parser("types", help="List known chart names.")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point for the chart browser."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.quiet or args.json_output:
        _suppress_logs()

    sys.exit(asyncio.run(_run(args)))


if __name__ == "__main__":
    main()
