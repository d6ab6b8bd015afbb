"""
Spot visibility by relationship ("source").

An account sees a spot differently depending on how it relates to it:
- `created`:   the account made the spot -> full data
- `discovery`: the account found the spot -> full data
- `public`:    set by callers for un-gated spots (never derived here) -> full data
- `preview`:   neither of the above -> redacted teaser (no description, no image,
               coordinates rounded to roughly a kilometre)
- no source:   the caller has no right to see the spot at all
"""

from __future__ import annotations

from typing import Sequence

from trailquest.config.settings import Settings, get_settings
from trailquest.core.numeric import round_half_up
from trailquest.domain.models import Discovery, GeoLocation, Spot, SpotSource

_FULL_ACCESS_SOURCES: frozenset[str] = frozenset({"created", "discovery", "public"})


def determine_spot_source(spot: Spot, account_id: str, discoveries: Sequence[Discovery]) -> SpotSource:
    if spot.created_by == account_id:
        return "created"
    if any(d.account_id == account_id and d.spot_id == spot.id for d in discoveries):
        return "discovery"
    return "preview"


def enrich_spot_with_source(spot: Spot, account_id: str, discoveries: Sequence[Discovery]) -> Spot:
    """Return a copy of `spot` with `source` set relative to `account_id`."""
    return spot.model_copy(update={"source": determine_spot_source(spot, account_id, discoveries)})


def enrich_spots_with_source(
    spots: Sequence[Spot], account_id: str, discoveries: Sequence[Discovery]
) -> list[Spot]:
    own = [d for d in discoveries if d.account_id == account_id]
    return [enrich_spot_with_source(s, account_id, own) for s in spots]


def filter_spot_by_source(spot: Spot, *, settings: Settings | None = None) -> Spot | None:
    """Redact `spot` according to its `source`; `None` means "no access"."""
    if spot.source is None:
        return None
    if spot.source in _FULL_ACCESS_SOURCES:
        return spot

    settings = settings or get_settings()
    decimals = settings.discovery.preview_location_decimals
    return spot.model_copy(
        update={
            "description": "",
            "image": None,
            "location": GeoLocation(
                lat=round_half_up(spot.location.lat, decimals),
                lon=round_half_up(spot.location.lon, decimals),
            ),
        }
    )


def visible_spots(
    spots: Sequence[Spot],
    account_id: str,
    discoveries: Sequence[Discovery],
    *,
    settings: Settings | None = None,
) -> list[Spot]:
    """Enrich then filter a batch of spots, dropping the ones the account may not see."""
    settings = settings or get_settings()
    out: list[Spot] = []
    for spot in enrich_spots_with_source(spots, account_id, discoveries):
        filtered = filter_spot_by_source(spot, settings=settings)
        if filtered is not None:
            out.append(filtered)
    return out
