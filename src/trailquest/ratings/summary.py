"""
Star ratings for spots.

A rating's id depends only on (account, spot), so storing a re-rating overwrites
the previous record instead of adding a second one.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from trailquest.config.settings import Settings, get_settings
from trailquest.core.ids import deterministic_id
from trailquest.core.numeric import clamp_int, round_half_up
from trailquest.core.time import utc_now
from trailquest.domain.models import RatingSummary, SpotRating


def to_stars(rating: float, settings: Settings | None = None) -> int:
    """Round half-up, then clamp into the configured star range (never rejects)."""
    settings = settings or get_settings()
    return clamp_int(int(round_half_up(rating)), settings.ratings.min_rating, settings.ratings.max_rating)


def summarize(ratings: list[tuple[str, int]], account_id: str) -> tuple[float, int, int | None]:
    """(average, count, the account's own rating) over `(account_id, stars)` pairs."""
    count = len(ratings)
    average = sum(stars for _, stars in ratings) / count if count else 0.0
    user_rating = next((stars for owner, stars in ratings if owner == account_id), None)
    return average, count, user_rating


def spot_rating_id(account_id: str, spot_id: str) -> str:
    return deterministic_id("spot-rating", account_id, spot_id)


def create_spot_rating(
    account_id: str,
    spot_id: str,
    rating: float,
    *,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> SpotRating:
    """Build a rating record; out-of-range values are clamped, not rejected."""
    return SpotRating(
        id=spot_rating_id(account_id, spot_id),
        spot_id=spot_id,
        account_id=account_id,
        rating=to_stars(rating, settings),
        created_at=now or utc_now(),
    )


def get_spot_rating_summary(spot_id: str, ratings: Iterable[SpotRating], account_id: str) -> RatingSummary:
    average, count, user_rating = summarize(
        [(r.account_id, r.rating) for r in ratings if r.spot_id == spot_id], account_id
    )
    return RatingSummary(average=average, count=count, user_rating=user_rating)
