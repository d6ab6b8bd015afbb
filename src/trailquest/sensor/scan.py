"""
Scan evaluation (sensor).

A scan is a discrete, user-triggered geofence check. This module only *reports*
what the scan saw; it does not create Discovery records (see
`trailquest.discovery.engine.process_scan_event`).

For each spot the account did not create and has not discovered yet:
- inside `discovery_radius`      -> a "candidate" clue, and the scan is successful
- inside `clue_radius` and the scanner radius -> a "hint" clue
- otherwise                      -> invisible to this scan
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from trailquest.core.geo import haversine_m
from trailquest.core.ids import new_id
from trailquest.core.time import utc_now
from trailquest.domain.models import Clue, ClueKind, Discovery, GeoLocation, ScanEvent, Spot

logger = logging.getLogger(__name__)


def _scan_clue(spot: Spot, trail_id: str | None, kind: ClueKind) -> Clue:
    return Clue(
        id=new_id(),
        spot_id=spot.id,
        trail_id=trail_id,
        location=spot.location,
        source="scanEvent",
        discovery_radius=spot.options.discovery_radius,
        kind=kind,
    )


def generate_scan_event(
    account_id: str,
    location: GeoLocation,
    spots: Sequence[Spot],
    scanner_radius: float,
    existing_discoveries: Sequence[Discovery],
    trail_id: str | None = None,
    *,
    now: datetime | None = None,
) -> ScanEvent:
    """Evaluate one scan at `location` against a snapshot of spots and discoveries."""
    discovered_spot_ids = {d.spot_id for d in existing_discoveries if d.account_id == account_id}

    candidates: list[Clue] = []
    hints: list[Clue] = []
    for spot in spots:
        # No self-discovery, and nothing to report for spots already found.
        if spot.created_by == account_id or spot.id in discovered_spot_ids:
            continue

        d = haversine_m(location, spot.location)
        if d <= spot.options.discovery_radius:
            candidates.append(_scan_clue(spot, trail_id, "candidate"))
        elif d <= spot.options.clue_radius and d <= scanner_radius:
            hints.append(_scan_clue(spot, trail_id, "hint"))

    event = ScanEvent(
        id=new_id(),
        account_id=account_id,
        trail_id=trail_id,
        location=location,
        radius_used=scanner_radius,
        successful=bool(candidates),
        clues=[*candidates, *hints],
        scanned_at=now or utc_now(),
    )
    logger.debug(
        "scan %s account=%s trail=%s candidates=%d hints=%d",
        event.id,
        account_id,
        trail_id,
        len(candidates),
        len(hints),
    )
    return event
