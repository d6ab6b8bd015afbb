"""Statistics for a single discovery (shown on the discovery card)."""

from __future__ import annotations

import math
from typing import Sequence

from trailquest.core.geo import haversine_m
from trailquest.core.numeric import round_half_up
from trailquest.core.time import seconds_between
from trailquest.domain.models import Discovery, DiscoveryStats, Spot


def get_discovery_stats(
    discovery: Discovery,
    all_discoveries_for_spot: Sequence[Discovery],
    user_discoveries: Sequence[Discovery],
    trail_spot_ids: Sequence[str],
    spots: Sequence[Spot],
) -> DiscoveryStats:
    """Rank among the spot's discoverers, trail position, and gap to the previous find."""
    by_time = sorted(all_discoveries_for_spot, key=lambda d: d.discovered_at)
    rank = next((i + 1 for i, d in enumerate(by_time) if d.id == discovery.id), 0)

    trail_ids = set(trail_spot_ids)
    trail_position = len(
        {d.spot_id for d in user_discoveries if d.trail_id == discovery.trail_id and d.spot_id in trail_ids}
    )

    time_since_last: int | None = None
    distance_from_last: int | None = None
    history = sorted(user_discoveries, key=lambda d: d.discovered_at)
    index = next((i for i, d in enumerate(history) if d.id == discovery.id), -1)
    if index > 0:
        previous = history[index - 1]
        time_since_last = math.floor(seconds_between(previous.discovered_at, discovery.discovered_at))

        by_id = {s.id: s for s in spots}
        current_spot = by_id.get(discovery.spot_id)
        previous_spot = by_id.get(previous.spot_id)
        if current_spot is not None and previous_spot is not None:
            distance_from_last = int(round_half_up(haversine_m(previous_spot.location, current_spot.location)))

    return DiscoveryStats(
        discovery_id=discovery.id,
        rank=rank,
        total_discoverers=len(all_discoveries_for_spot),
        trail_position=trail_position,
        trail_total=len(trail_spot_ids),
        time_since_last_discovery=time_since_last,
        distance_from_last_discovery=distance_from_last,
    )
