"""
Discovery engine.

Turns scans and continuous location updates into new `Discovery` records and
builds the per-trail views clients render (discovered spots, preview clues).

Data flow (one direction only):
    position / ScanEvent -> geofence checks (core.geo) -> Discovery candidates -> caller

The engine computes *candidates* from a snapshot of the discovery history. It does
not serialize concurrent updates for the same (account, trail); the caller must
persist with an idempotent upsert keyed on the deterministic discovery id (see
`create_discovery`) or hold a per-(account, trail) lock around evaluate+persist.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Collection, Iterable, Sequence

from trailquest.config.settings import Settings
from trailquest.core.geo import LatLon, haversine_m, is_in_bounds
from trailquest.core.ids import deterministic_id, new_id
from trailquest.core.time import utc_now
from trailquest.discovery.snap import get_discovery_snap
from trailquest.domain.models import (
    Clue,
    ClueKind,
    ClueSource,
    Discovery,
    DiscoveryLocationRecord,
    DiscoveryOutcome,
    DiscoverySpot,
    DiscoveryTrail,
    LocationWithDirection,
    NewDiscoveries,
    NoChange,
    ScanEvent,
    Spot,
    Trail,
)

logger = logging.getLogger(__name__)


# ---- History projections ----------------------------------------------------


def get_discoveries(account_id: str, discoveries: Iterable[Discovery], trail_id: str | None = None) -> list[Discovery]:
    return [
        d for d in discoveries if d.account_id == account_id and (trail_id is None or d.trail_id == trail_id)
    ]


def get_discovered_spot_ids(
    account_id: str, discoveries: Iterable[Discovery], trail_id: str | None = None
) -> list[str]:
    """Spot ids the account discovered (optionally on one trail), in input order."""
    return [d.spot_id for d in get_discoveries(account_id, discoveries, trail_id)]


def get_discovery_spot(spot_id: str, spots: Iterable[Spot]) -> Spot | None:
    return next((s for s in spots if s.id == spot_id), None)


def get_discovered_spots(
    account_id: str,
    discoveries: Iterable[Discovery],
    spots: Sequence[Spot],
    trail_id: str | None = None,
) -> list[DiscoverySpot]:
    """Discovered spots joined with their discovery record, oldest first."""
    by_id = {s.id: s for s in spots}
    out: list[DiscoverySpot] = []
    for d in sorted(get_discoveries(account_id, discoveries, trail_id), key=lambda d: d.discovered_at):
        spot = by_id.get(d.spot_id)
        if spot is None:
            logger.warning("discovery %s references unknown spot %s", d.id, d.spot_id)
            continue
        out.append(DiscoverySpot(**spot.model_dump(), discovered_at=d.discovered_at, discovery_id=d.id))
    return out


def get_targets(account_id: str, trail: Trail, discoveries: Iterable[Discovery], spots: Sequence[Spot]) -> list[Spot]:
    """Spots the account may still aim for on `trail`."""
    if trail.options.discovery_mode == "free":
        return list(spots)
    discovered = set(get_discovered_spot_ids(account_id, discoveries, trail.id))
    return [s for s in spots if s.id not in discovered]


# ---- Record factories ---------------------------------------------------------


def discovery_id(account_id: str, spot_id: str, trail_id: str) -> str:
    """Idempotency key for a discovery: one record per (account, spot, trail)."""
    return deterministic_id(account_id, spot_id, trail_id)


def create_discovery(
    account_id: str,
    spot_id: str,
    trail_id: str,
    scan_event_id: str | None = None,
    *,
    now: datetime | None = None,
) -> Discovery:
    return Discovery(
        id=discovery_id(account_id, spot_id, trail_id),
        account_id=account_id,
        spot_id=spot_id,
        trail_id=trail_id,
        discovered_at=now or utc_now(),
        scan_event_id=scan_event_id,
    )


def create_clue(spot: Spot, trail_id: str | None, source: ClueSource, *, kind: ClueKind = "hint") -> Clue:
    return Clue(
        id=new_id(),
        spot_id=spot.id,
        trail_id=trail_id,
        location=spot.location,
        source=source,
        discovery_radius=spot.options.discovery_radius,
        kind=kind,
    )


def outcome_for(discoveries: Sequence[Discovery] | None) -> DiscoveryOutcome:
    if not discoveries:
        return NoChange()
    return NewDiscoveries(discoveries=list(discoveries))


# ---- Geofence evaluation --------------------------------------------------------


def _next_in_sequence(order: Iterable[str], done: Collection[str], skip: Collection[str] = ()) -> str | None:
    return next((sid for sid in order if sid not in done and sid not in skip), None)


def get_new_discoveries(
    account_id: str,
    location: LatLon,
    spots: Sequence[Spot],
    existing_discoveries: Iterable[Discovery],
    trail: Trail,
    trail_spot_ids: Sequence[str] | None = None,
    *,
    now: datetime | None = None,
) -> list[Discovery]:
    """Discoveries triggered by standing at `location` (continuous location updates).

    In `sequence` mode only the earliest undiscovered spot in trail order can be
    discovered. Trail order is `trail_spot_ids`, or the order of `spots` when omitted.
    """
    discovered = set(get_discovered_spot_ids(account_id, existing_discoveries, trail.id))
    own = {s.id for s in spots if s.created_by == account_id}
    eligible = [s for s in spots if s.id not in own and s.id not in discovered]

    if trail.options.discovery_mode == "sequence":
        order = trail_spot_ids if trail_spot_ids is not None else [s.id for s in spots]
        # Own spots can never be discovered, so they must not block the sequence.
        next_id = _next_in_sequence(order, discovered, own)
        eligible = [s for s in eligible if s.id == next_id]

    now = now or utc_now()
    new = [
        create_discovery(account_id, s.id, trail.id, now=now)
        for s in eligible
        if haversine_m(location, s.location) <= s.options.discovery_radius
    ]
    if new:
        logger.debug("account=%s trail=%s discovered %s", account_id, trail.id, [d.spot_id for d in new])
    return new


def process_scan_event(
    scan_event: ScanEvent,
    trail: Trail,
    existing_discoveries: Iterable[Discovery],
    trail_spot_ids: Sequence[str],
    *,
    spots: Sequence[Spot] = (),
    now: datetime | None = None,
) -> list[Discovery] | None:
    """Discoveries produced by a scan, or `None` when the scan changes nothing.

    Only "candidate" clues (spots the sensor found inside their discovery radius)
    can become discoveries; "hint" clues are display-only. `spots` are the trail's
    spot records; in `sequence` mode the ones the scanning account created are
    skipped when looking for the next spot, since a scan never reports them.
    """
    if not scan_event.successful or not scan_event.clues:
        return None

    discovered = set(get_discovered_spot_ids(scan_event.account_id, existing_discoveries, trail.id))
    candidates: list[str] = []
    for clue in scan_event.clues:
        if clue.kind == "candidate" and clue.spot_id not in discovered and clue.spot_id not in candidates:
            candidates.append(clue.spot_id)

    if trail.options.discovery_mode == "sequence":
        own = {s.id for s in spots if s.created_by == scan_event.account_id}
        next_id = _next_in_sequence(trail_spot_ids, discovered, own)
        # Later spots in range wait for a future scan.
        candidates = [next_id] if next_id in candidates else []

    if not candidates:
        return None

    now = now or utc_now()
    new = [create_discovery(scan_event.account_id, sid, trail.id, scan_event.id, now=now) for sid in candidates]
    logger.debug("scan %s on trail %s discovered %s", scan_event.id, trail.id, candidates)
    return new


def process_location_update(
    account_id: str,
    location_with_direction: LocationWithDirection,
    discoveries: Sequence[Discovery],
    spots: Sequence[Spot],
    trail: Trail,
    trail_spot_ids: Sequence[str] | None = None,
    *,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> DiscoveryLocationRecord:
    """Evaluate a passive location update: new discoveries plus an updated snap."""
    now = now or utc_now()
    location = location_with_direction.location
    new = get_new_discoveries(account_id, location, spots, discoveries, trail, trail_spot_ids, now=now)

    explored = [*get_discovered_spot_ids(account_id, discoveries, trail.id), *(d.spot_id for d in new)]
    snap_range = trail.options.snap_radius or trail.options.scanner_radius
    snap = get_discovery_snap(location, spots, explored, snap_range, settings=settings)

    return DiscoveryLocationRecord(
        location_with_direction=location_with_direction,
        created_at=now,
        discoveries=new,
        snap=snap,
        outcome=outcome_for(new),
    )


# ---- Trail views ------------------------------------------------------------------


def get_clues_based_on_preview_mode(
    account_id: str,
    trail: Trail,
    discoveries: Iterable[Discovery],
    spots: Sequence[Spot],
    trail_spot_ids: Sequence[str],
) -> list[Clue]:
    """Preview clues for undiscovered trail spots that opt into preview visibility."""
    if trail.options.preview_mode != "preview":
        return []
    discovered = set(get_discovered_spot_ids(account_id, discoveries, trail.id))
    by_id = {s.id: s for s in spots}
    clues: list[Clue] = []
    for sid in trail_spot_ids:
        spot = by_id.get(sid)
        if sid in discovered or spot is None or spot.options.visibility != "preview":
            continue
        clues.append(create_clue(spot, trail.id, "preview"))
    return clues


def create_discovery_trail(
    account_id: str,
    trail: Trail,
    discoveries: Sequence[Discovery],
    spots: Sequence[Spot],
    trail_spot_ids: Sequence[str],
    user_location: LatLon | None = None,
    *,
    now: datetime | None = None,
) -> DiscoveryTrail:
    preview_clues = get_clues_based_on_preview_mode(account_id, trail, discoveries, spots, trail_spot_ids)
    if user_location is not None and trail.boundary is not None:
        preview_clues = [c for c in preview_clues if is_in_bounds(c.location, trail.boundary)]

    return DiscoveryTrail(
        trail=trail,
        spots=get_discovered_spots(account_id, discoveries, spots, trail.id),
        clues=[],
        preview_clues=preview_clues,
        discoveries=get_discoveries(account_id, discoveries, trail.id),
        created_at=now or utc_now(),
    )
