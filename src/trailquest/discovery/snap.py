"""
Proximity "snap" feedback.

The snap tells a client how close the account is to the nearest spot it has not
discovered yet: the raw distance in meters plus an intensity that is 1 when
standing on the spot and falls linearly to 0 at `max_range`.
"""

from __future__ import annotations

from typing import Collection, Sequence

from trailquest.config.settings import Settings, get_settings
from trailquest.core.geo import LatLon, haversine_m
from trailquest.core.numeric import clamp01
from trailquest.domain.models import DiscoverySnap, Spot


def proximity_intensity(distance: float, max_distance: float) -> float:
    if distance <= 0:
        return 1.0
    if distance >= max_distance:
        return 0.0
    return clamp01(1 - distance / max_distance)


def get_discovery_snap(
    location: LatLon,
    spots: Sequence[Spot],
    discovered_spot_ids: Collection[str],
    max_range: float | None = None,
    *,
    settings: Settings | None = None,
) -> DiscoverySnap | None:
    """Snap toward the nearest undiscovered spot, or `None` once everything is explored."""
    explored = set(discovered_spot_ids)
    remaining = [s for s in spots if s.id not in explored]
    if not remaining:
        return None

    if max_range is None:
        max_range = (settings or get_settings()).discovery.snap_max_range_m

    nearest = min(haversine_m(location, s.location) for s in remaining)
    return DiscoverySnap(distance=nearest, intensity=proximity_intensity(nearest, max_range))
