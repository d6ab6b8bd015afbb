"""
Star reactions on discoveries.

Works like spot ratings but targets a single discovery record. Summaries round the
average to one decimal for display.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from trailquest.config.settings import Settings
from trailquest.core.ids import deterministic_id
from trailquest.core.numeric import round_half_up
from trailquest.core.time import utc_now
from trailquest.domain.models import DiscoveryReaction, ReactionSummary
from trailquest.ratings.summary import summarize, to_stars


def reaction_id(discovery_id: str, account_id: str) -> str:
    return deterministic_id("discovery-reaction", discovery_id, account_id)


def create_reaction(
    account_id: str,
    discovery_id: str,
    rating: float,
    *,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> DiscoveryReaction:
    return DiscoveryReaction(
        id=reaction_id(discovery_id, account_id),
        discovery_id=discovery_id,
        account_id=account_id,
        rating=to_stars(rating, settings),
        created_at=now or utc_now(),
    )


def get_reaction_summary(
    discovery_id: str, reactions: Iterable[DiscoveryReaction], account_id: str
) -> ReactionSummary:
    average, count, user_rating = summarize(
        [(r.account_id, r.rating) for r in reactions if r.discovery_id == discovery_id], account_id
    )
    return ReactionSummary(average=round_half_up(average, 1), count=count, user_rating=user_rating)
