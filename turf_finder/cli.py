"""터프 검색을 터미널에서 실행하는 CLI.

사용 예:
    turf-finder --location "HSR Layout, Bengaluru" --radius-km 4
    turf-finder --lat 12.9121 --lng 77.6446 --keyword "box cricket" --no-output
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
import textwrap
import time
import traceback
from collections.abc import Sequence

from turf_finder.core.config import get_settings
from turf_finder.core.exceptions import REMEDIATION_TIPS, TurfFinderError
from turf_finder.core.geo import format_distance
from turf_finder.schemas.turf import TurfResult, TurfSearchResponse
from turf_finder.services.google_maps_service import GoogleMapsClient
from turf_finder.services.turf_finder_service import find_turfs, resolve_search_query

BOX_WIDTH = 58
DEFAULT_OUTPUT_PATH = "results.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="turf-finder",
        description="Find sports turfs near a location in Bangalore using Google Maps.",
    )
    parser.add_argument("--location", type=str, default=None, help="Address text to geocode.")
    parser.add_argument("--lat", type=float, default=None, help="Origin latitude.")
    parser.add_argument("--lng", type=float, default=None, help="Origin longitude.")
    parser.add_argument("--radius-km", type=float, default=None, help="Search radius in km (0 < r <= 50).")
    parser.add_argument("--keyword", type=str, default=None, help="Keyword to search first.")
    parser.add_argument("--max-results", type=int, default=None, help="Discovery result cap.")
    parser.add_argument("--details-limit", type=int, default=None, help="How many places to enrich.")
    parser.add_argument("--output", type=str, default=DEFAULT_OUTPUT_PATH, help="JSON output file path.")
    parser.add_argument("--no-output", action="store_true", help="Skip writing the JSON file.")
    parser.add_argument("--quiet", action="store_true", help="One line per result.")
    parser.add_argument("--debug", action="store_true", help="Print tracebacks on error.")
    return parser


def _box_line(text: str) -> str:
    return f"│ {text[: BOX_WIDTH - 2].ljust(BOX_WIDTH - 2)} │"


def _stars(rating: float) -> str:
    filled = max(0, min(5, round(rating)))
    return "★" * filled + "☆" * (5 - filled)


def render_result(index: int, result: TurfResult) -> list[str]:
    """결과 한 건을 박스 형태의 출력 줄 목록으로 만듭니다."""
    lines = [
        f"┌{'─' * BOX_WIDTH}┐",
        _box_line(f"{index:2d}. {result.name}"),
        f"├{'─' * BOX_WIDTH}┤",
        _box_line(f"📍 Distance: {format_distance(result.distance_km)}"),
        _box_line(f"📫 {result.address}"),
        _box_line(f"📞 {result.phone}" if result.phone else "📞 Phone not listed on Google"),
    ]
    if result.rating is not None:
        lines.append(
            _box_line(f"⭐ {_stars(result.rating)} {result.rating:.1f} ({result.user_ratings_total or 0} reviews)")
        )
    if result.open_now is not None:
        lines.append(_box_line("   🟢 Open now" if result.open_now else "   🔴 Closed"))
    lines.append(_box_line(f"🗺️  {result.maps_url}"))
    if result.photos:
        lines.append(_box_line(f"📷 {len(result.photos)} photo(s) available"))

    if result.top_reviews:
        lines.append(f"├{'─' * BOX_WIDTH}┤")
        lines.append(_box_line("💬 Top Reviews:"))
        for review in result.top_reviews:
            stars = "★" * round(review.rating) if review.rating else ""
            lines.append(_box_line(f"   {review.author} {stars} ({review.relative_time})"))
            if review.text:
                for wrapped in textwrap.wrap(f'"{review.text}"', width=BOX_WIDTH - 7):
                    lines.append(_box_line(f"    {wrapped}"))

    lines.append(f"└{'─' * BOX_WIDTH}┘")
    return lines


def summarize(results: Sequence[TurfResult]) -> list[str]:
    """결과 목록의 요약 통계 줄을 만듭니다. 결과는 거리순으로 정렬되어 있다고 가정합니다."""
    with_phone = sum(1 for result in results if result.phone)
    ratings = [result.rating for result in results if result.rating is not None]
    average = f"{sum(ratings) / len(ratings):.2f}" if ratings else "N/A"
    closest = results[0].distance_km if results else 0
    farthest = results[-1].distance_km if results else 0
    return [
        "📊 Summary:",
        f"   • {len(results)} turfs found",
        f"   • {with_phone} with phone numbers",
        f"   • Average rating: {average}",
        f"   • Closest: {closest} km",
        f"   • Farthest: {farthest} km",
    ]


def print_response(response: TurfSearchResponse, quiet: bool) -> None:
    if quiet:
        if not response.results:
            print(response.message)
        for index, result in enumerate(response.results, start=1):
            print(f"{index}. {result.name} ({result.distance_km} km) - {result.phone or 'No phone'}")
        return

    if not response.results:
        print(f"❌ {response.message}")
        return

    print(f"✅ Found {response.total_found} turfs within {response.query.radius_km} km")
    print("\n" + "=" * 60)
    print("TURF RESULTS".center(60))
    print("=" * 60 + "\n")
    for index, result in enumerate(response.results, start=1):
        print("\n".join(render_result(index, result)))
        print()
    print("\n".join(summarize(response.results)))


def write_output(response: TurfSearchResponse, path: str) -> None:
    with open(path, "w", encoding="utf-8", newline="\n") as handle:
        json.dump(response.model_dump(mode="json"), handle, ensure_ascii=False, indent=2)
        handle.write("\n")


def print_error(exc: BaseException, debug: bool) -> None:
    """오류 메시지와 해결 팁을 stderr로 출력합니다. 트레이스백은 디버그 모드에서만 출력합니다."""
    print("\n❌ Error:", file=sys.stderr)
    print(f"   {exc}", file=sys.stderr)
    if isinstance(exc, TurfFinderError) and exc.details and debug:
        print(f"\n   Details: {json.dumps(exc.details, ensure_ascii=False, indent=2, default=str)}", file=sys.stderr)
    if debug:
        traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.stderr)

    print("\n💡 Tips:", file=sys.stderr)
    for tip in REMEDIATION_TIPS:
        print(f"   • {tip}", file=sys.stderr)


async def _run(args: argparse.Namespace) -> TurfSearchResponse:
    settings = get_settings()
    client = GoogleMapsClient.from_settings()
    if not args.quiet:
        print("\n🏟️  Bangalore Turf Finder")
        print("=" * 50)

    query = await resolve_search_query(
        client,
        location=args.location,
        lat=args.lat,
        lng=args.lng,
        radius_km=args.radius_km,
        keyword=args.keyword,
        max_results=args.max_results,
        details_limit=args.details_limit,
        settings=settings,
    )
    if not args.quiet:
        if query.resolved_address:
            print(f"   ➜ {query.resolved_address}")
        print(f"\n📍 Search Location: {query.lat:.6f}, {query.lng:.6f}")
        print(f"📏 Radius: {query.radius_km} km")
        if query.keyword:
            print(f"🔍 Keyword: {query.keyword}")
        print("\n🔎 Searching for turfs...\n")

    return await find_turfs(client, query, settings)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    debug = args.debug or os.getenv("DEBUG") == "1"
    started = time.perf_counter()

    try:
        response = asyncio.run(_run(args))
    except Exception as exc:  # noqa: BLE001
        print_error(exc, debug)
        return 1

    print_response(response, args.quiet)

    if not args.no_output and response.results:
        try:
            write_output(response, args.output)
        except OSError as exc:
            print_error(exc, debug)
            return 1
        if not args.quiet:
            print(f"\n💾 Results saved to: {args.output}")

    if not args.quiet:
        print(f"\n⏱️  Completed in {time.perf_counter() - started:.2f}s\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
