"""
TrailQuest CLI entrypoint.

This CLI runs the discovery engine against a local catalog snapshot (JSON) for quick
demos and debugging. It delegates all logic to the engine modules; the catalog
file plays the role of the storage layer and nothing is written back.
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from trailquest.catalog.loader import Catalog, load_catalog
from trailquest.config.settings import get_settings
from trailquest.core.geo import spot_bounding_box
from trailquest.core.logging import configure_logging
from trailquest.core.time import parse_datetime
from trailquest.discovery.access import visible_spots
from trailquest.discovery.engine import outcome_for, process_location_update, process_scan_event
from trailquest.domain.models import GeoLocation, LocationWithDirection
from trailquest.ratings.summary import get_spot_rating_summary
from trailquest.sensor.scan import generate_scan_event
from trailquest.trails.explain import one_line_summary
from trailquest.trails.stats import get_trail_stats


def _dump(payload: Any) -> None:
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json")
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _load(args: argparse.Namespace) -> Catalog:
    return load_catalog(args.catalog or get_settings().catalog.path)


def _at(args: argparse.Namespace) -> datetime | None:
    if not args.at:
        return None
    return parse_datetime(args.at, get_settings().app.timezone)


def _cmd_scan(args: argparse.Namespace) -> int:
    catalog = _load(args)
    trail = catalog.trail(args.trail)
    now = _at(args)

    spots = catalog.spots_for_trail(trail.id)

    event = generate_scan_event(
        args.account,
        GeoLocation(lat=args.lat, lon=args.lon),
        spots,
        float(args.radius) if args.radius is not None else trail.options.scanner_radius,
        catalog.discoveries,
        trail.id,
        now=now,
    )
    new = process_scan_event(
        event, trail, catalog.discoveries, catalog.trail_spot_ids(trail.id), spots=spots, now=now
    )
    _dump(
        {
            "scan_event": event.model_dump(mode="json"),
            "outcome": outcome_for(new).model_dump(mode="json"),
        }
    )
    return 0


def _cmd_locate(args: argparse.Namespace) -> int:
    catalog = _load(args)
    trail = catalog.trail(args.trail)
    record = process_location_update(
        args.account,
        LocationWithDirection(location=GeoLocation(lat=args.lat, lon=args.lon), direction=args.direction),
        catalog.discoveries,
        catalog.spots_for_trail(trail.id),
        trail,
        catalog.trail_spot_ids(trail.id),
        now=_at(args),
    )
    _dump(record)
    return 0


def _cmd_stats(args: argparse.Namespace) -> int:
    catalog = _load(args)
    stats = get_trail_stats(args.account, args.trail, catalog.discoveries, catalog.trail_spot_ids(args.trail))
    if args.json:
        _dump(stats)
    else:
        print(one_line_summary(stats))
    return 0


def _cmd_spots(args: argparse.Namespace) -> int:
    catalog = _load(args)
    spots = visible_spots(catalog.spots_for_trail(args.trail), args.account, catalog.discoveries)
    _dump([s.model_dump(mode="json") for s in spots])
    return 0


def _cmd_rating(args: argparse.Namespace) -> int:
    catalog = _load(args)
    _dump(get_spot_rating_summary(args.spot, catalog.ratings, args.account))
    return 0


def _cmd_bbox(args: argparse.Namespace) -> int:
    catalog = _load(args)
    padding = args.padding if args.padding is not None else get_settings().geo.bounding_box_padding_m
    spots = catalog.spots_for_trail(args.trail)
    _dump(spot_bounding_box([s.location for s in spots], padding))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the TrailQuest CLI."""
    parser = argparse.ArgumentParser(prog="trailquest")
    parser.add_argument("--catalog", type=str, default=None, help="Catalog snapshot JSON (default: settings)")
    parser.add_argument("--log-level", type=str, default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    scan = sub.add_parser("scan", help="Run a scan at a position and show resulting discoveries.")
    scan.add_argument("--account", required=True)
    scan.add_argument("--trail", required=True)
    scan.add_argument("--lat", required=True, type=float)
    scan.add_argument("--lon", required=True, type=float)
    scan.add_argument("--radius", type=float, default=None, help="Scanner radius in meters (default: trail's)")
    scan.add_argument("--at", type=str, default=None, help="ISO datetime of the scan (default: now)")
    scan.set_defaults(func=_cmd_scan)

    loc = sub.add_parser("locate", help="Process a passive location update (discoveries + snap).")
    loc.add_argument("--account", required=True)
    loc.add_argument("--trail", required=True)
    loc.add_argument("--lat", required=True, type=float)
    loc.add_argument("--lon", required=True, type=float)
    loc.add_argument("--direction", type=float, default=None, help="Device heading in degrees")
    loc.add_argument("--at", type=str, default=None, help="ISO datetime of the update (default: now)")
    loc.set_defaults(func=_cmd_locate)

    st = sub.add_parser("stats", help="Trail progress and leaderboard rank for an account.")
    st.add_argument("--account", required=True)
    st.add_argument("--trail", required=True)
    st.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    st.set_defaults(func=_cmd_stats)

    sp = sub.add_parser("spots", help="Trail spots as the account is allowed to see them.")
    sp.add_argument("--account", required=True)
    sp.add_argument("--trail", required=True)
    sp.set_defaults(func=_cmd_spots)

    rt = sub.add_parser("rating", help="Rating summary for a spot.")
    rt.add_argument("--spot", required=True)
    rt.add_argument("--account", required=True)
    rt.set_defaults(func=_cmd_rating)

    bb = sub.add_parser("bbox", help="Bounding box of a trail's spots.")
    bb.add_argument("--trail", required=True)
    bb.add_argument("--padding", type=float, default=None, help="Padding in meters")
    bb.set_defaults(func=_cmd_bbox)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m trailquest.cli`."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    func: Any = getattr(args, "func")
    try:
        return int(func(args))
    except (LookupError, ValueError) as e:
        # pydantic.ValidationError is a ValueError too (bad catalog / bad input).
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
