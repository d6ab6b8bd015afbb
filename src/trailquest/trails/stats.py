"""
Trail progress and leaderboard statistics.

All functions are pure aggregations over a full discovery history supplied by the
caller; nothing here reads or writes storage.

Leaderboard ordering:
1. more distinct trail spots discovered ranks higher
2. on a tie, whoever reached that count first ranks higher (the latest of the
   account's first-discovery times over its counted spots)
3. still tied: `account_id`, so the order never depends on input order
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Sequence

from trailquest.core.numeric import round_half_up
from trailquest.core.time import seconds_between
from trailquest.domain.models import CompletionStatus, Discovery, TrailStats


@dataclass(frozen=True)
class LeaderboardEntry:
    account_id: str
    spots_discovered: int
    reached_at: datetime | None


def _distinct_trail_spots(discoveries: Iterable[Discovery], trail_spot_ids: set[str]) -> set[str]:
    return {d.spot_id for d in discoveries if d.spot_id in trail_spot_ids}


def completion_status(discovered_spots: int, total_spots: int) -> CompletionStatus:
    if discovered_spots == 0:
        return "not_started"
    if total_spots > 0 and discovered_spots >= total_spots:
        return "completed"
    return "in_progress"


def get_trail_completion_percentage(
    account_id: str, trail_id: str, discoveries: Iterable[Discovery], trail_spot_ids: Sequence[str]
) -> int:
    if not trail_spot_ids:
        return 0
    own = [d for d in discoveries if d.account_id == account_id and d.trail_id == trail_id]
    found = _distinct_trail_spots(own, set(trail_spot_ids))
    return int(round_half_up(100 * len(found) / len(trail_spot_ids)))


def is_trail_completed(
    account_id: str, trail_id: str, discoveries: Iterable[Discovery], trail_spot_ids: Sequence[str]
) -> bool:
    if not trail_spot_ids:
        return False
    own = [d for d in discoveries if d.account_id == account_id and d.trail_id == trail_id]
    return set(trail_spot_ids) <= {d.spot_id for d in own}


def build_leaderboard(
    trail_id: str, all_discoveries: Iterable[Discovery], trail_spot_ids: Sequence[str]
) -> list[LeaderboardEntry]:
    """Every account with at least one discovery on the trail, best first."""
    trail_ids = set(trail_spot_ids)
    # account -> spot -> earliest discovery time
    first_found: dict[str, dict[str, datetime]] = {}
    for d in all_discoveries:
        if d.trail_id != trail_id:
            continue
        spots = first_found.setdefault(d.account_id, {})
        if d.spot_id in trail_ids:
            prev = spots.get(d.spot_id)
            if prev is None or d.discovered_at < prev:
                spots[d.spot_id] = d.discovered_at

    entries = [
        LeaderboardEntry(
            account_id=account_id,
            spots_discovered=len(spots),
            reached_at=max(spots.values()) if spots else None,
        )
        for account_id, spots in first_found.items()
    ]

    def sort_key(e: LeaderboardEntry) -> tuple:
        # Accounts with no counted spots have no reached_at; they sort last in their tier.
        reached = e.reached_at.timestamp() if e.reached_at is not None else 0.0
        return (-e.spots_discovered, e.reached_at is None, reached, e.account_id)

    return sorted(entries, key=sort_key)


def get_trail_stats(
    account_id: str,
    trail_id: str,
    all_discoveries: Sequence[Discovery],
    trail_spot_ids: Sequence[str],
) -> TrailStats:
    trail_ids = set(trail_spot_ids)
    own = sorted(
        (d for d in all_discoveries if d.account_id == account_id and d.trail_id == trail_id),
        key=lambda d: d.discovered_at,
    )

    discovered_spots = len(_distinct_trail_spots(own, trail_ids))
    total_spots = len(trail_spot_ids)
    progress = int(round_half_up(100 * discovered_spots / total_spots)) if total_spots else 0

    leaderboard = build_leaderboard(trail_id, all_discoveries, trail_spot_ids)
    rank = 0
    if discovered_spots > 0:
        rank = next(i + 1 for i, e in enumerate(leaderboard) if e.account_id == account_id)

    average_gap: float | None = None
    if len(own) > 1:
        average_gap = seconds_between(own[0].discovered_at, own[-1].discovered_at) / (len(own) - 1)

    return TrailStats(
        trail_id=trail_id,
        discovered_spots=discovered_spots,
        total_spots=total_spots,
        discoveries_count=len(own),
        progress_percentage=min(100, progress),
        completion_status=completion_status(discovered_spots, total_spots),
        rank=rank,
        total_discoverers=len(leaderboard),
        first_discovered_at=own[0].discovered_at if own else None,
        last_discovered_at=own[-1].discovered_at if own else None,
        average_time_between_discoveries=average_gap,
    )
