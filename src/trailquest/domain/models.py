"""
Domain models (Pydantic).

These types are the plain-data contract between the discovery engine and its
collaborators (storage, transport, notification layers):
- geo values (`GeoLocation`, `GeoBoundary`, `GeoDirection`)
- catalog entities (`Spot`, `Trail`) and history records (`Discovery`, `SpotRating`)
- transient engine output (`ScanEvent`, `Clue`, `DiscoverySnap`, `DiscoveryOutcome`)
- discovery extras (`DiscoveryReaction`, `DiscoveryContent`)
- derived statistics (`TrailStats`, `DiscoveryStats`, `RatingSummary`, `ReactionSummary`)

The engine never mutates a model it receives; it returns `model_copy(update=...)`
copies instead.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from trailquest.core.time import assume_utc

SpotSource = Literal["created", "discovery", "preview", "public"]
SpotVisibility = Literal["hidden", "preview"]
DiscoveryMode = Literal["free", "sequence"]
PreviewMode = Literal["hidden", "preview", "discovered"]
ClueSource = Literal["preview", "scanEvent"]
# "candidate": the spot is inside its discovery radius (a scan may discover it).
# "hint": the spot is only close enough to be hinted at.
ClueKind = Literal["candidate", "hint"]
CompletionStatus = Literal["not_started", "in_progress", "completed"]
ContentVisibility = Literal["private", "public"]
CardinalDirection = Literal["N", "NE", "E", "SE", "S", "SW", "W", "NW"]
CardinalDirectionName = Literal[
    "north", "northeast", "east", "southeast", "south", "southwest", "west", "northwest"
]

# Naive timestamps (e.g. from a hand-written catalog) are read as UTC.
Timestamp = Annotated[datetime, AfterValidator(assume_utc)]


class GeoLocation(BaseModel):
    """A geographic point in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class GeoBoundary(BaseModel):
    """A lat/lon rectangle (map viewport)."""

    north_east: GeoLocation
    south_west: GeoLocation


class GeoDirection(BaseModel):
    bearing: float = Field(..., ge=0, le=360)
    direction: float = Field(..., ge=0, le=360)
    direction_short: CardinalDirection
    direction_long: CardinalDirectionName


class ImageReference(BaseModel):
    id: str
    url: str


class SpotOptions(BaseModel):
    discovery_radius: float = Field(..., gt=0)
    clue_radius: float = Field(..., gt=0)
    visibility: SpotVisibility = "hidden"


class Spot(BaseModel):
    """A discoverable point of interest."""

    id: str
    name: str
    description: str = ""
    location: GeoLocation
    created_by: str
    options: SpotOptions
    image: ImageReference | None = None
    blurred_image: ImageReference | None = None
    # Relationship of the viewing account to this spot; derived, see discovery.access.
    source: SpotSource | None = None
    created_at: Timestamp | None = None


class TrailOptions(BaseModel):
    discovery_mode: DiscoveryMode = "free"
    preview_mode: PreviewMode = "hidden"
    scanner_radius: float = Field(..., gt=0)
    snap_radius: float | None = Field(default=None, gt=0)


class Trail(BaseModel):
    """A walkable collection of spots. Spot order is supplied separately."""

    id: str
    name: str = ""
    description: str = ""
    boundary: GeoBoundary | None = None
    options: TrailOptions


class Discovery(BaseModel):
    """One account discovering one spot on one trail."""

    id: str
    account_id: str
    spot_id: str
    trail_id: str
    discovered_at: Timestamp
    scan_event_id: str | None = None


class Clue(BaseModel):
    """A transient signal that a spot is nearby."""

    id: str
    spot_id: str
    trail_id: str | None = None
    location: GeoLocation
    source: ClueSource
    discovery_radius: float = Field(..., gt=0)
    kind: ClueKind = "candidate"


class ScanEvent(BaseModel):
    """One discrete, user-triggered scan."""

    id: str
    account_id: str
    trail_id: str | None = None
    location: GeoLocation
    radius_used: float = Field(..., ge=0)
    successful: bool
    clues: list[Clue] = Field(default_factory=list)
    scanned_at: Timestamp


class DiscoverySnap(BaseModel):
    """Proximity feedback toward the nearest undiscovered spot."""

    distance: float = Field(..., ge=0)
    intensity: float = Field(..., ge=0, le=1)


class NoChange(BaseModel):
    kind: Literal["no_change"] = "no_change"


class NewDiscoveries(BaseModel):
    kind: Literal["new_discoveries"] = "new_discoveries"
    discoveries: list[Discovery] = Field(..., min_length=1)


DiscoveryOutcome = Annotated[Union[NoChange, NewDiscoveries], Field(discriminator="kind")]


class LocationWithDirection(BaseModel):
    location: GeoLocation
    # Device heading in degrees. Accepted but not used by the geofence math.
    direction: float | None = None


class DiscoveryLocationRecord(BaseModel):
    """Result of evaluating one continuous location update."""

    location_with_direction: LocationWithDirection
    created_at: Timestamp
    discoveries: list[Discovery] = Field(default_factory=list)
    snap: DiscoverySnap | None = None
    outcome: DiscoveryOutcome = Field(default_factory=NoChange)


class DiscoverySpot(Spot):
    discovered_at: Timestamp
    discovery_id: str


class DiscoveryTrail(BaseModel):
    """Everything a client needs to render one account's progress on a trail."""

    trail: Trail
    spots: list[DiscoverySpot] = Field(default_factory=list)
    clues: list[Clue] = Field(default_factory=list)
    preview_clues: list[Clue] = Field(default_factory=list)
    discoveries: list[Discovery] = Field(default_factory=list)
    created_at: Timestamp


class DiscoveryStats(BaseModel):
    discovery_id: str
    rank: int = Field(..., ge=0)
    total_discoverers: int = Field(..., ge=0)
    trail_position: int = Field(..., ge=0)
    trail_total: int = Field(..., ge=0)
    time_since_last_discovery: int | None = None
    distance_from_last_discovery: int | None = None


class SpotRating(BaseModel):
    id: str
    spot_id: str
    account_id: str
    rating: int = Field(..., ge=1, le=5)
    created_at: Timestamp | None = None


class RatingSummary(BaseModel):
    average: float = Field(..., ge=0, le=5)
    count: int = Field(..., ge=0)
    user_rating: int | None = Field(default=None, ge=1, le=5)


class DiscoveryReaction(BaseModel):
    """A star rating an account gives to a discovery."""

    id: str
    discovery_id: str
    account_id: str
    rating: int = Field(..., ge=1, le=5)
    created_at: Timestamp | None = None


class ReactionSummary(RatingSummary):
    pass


class DiscoveryContent(BaseModel):
    """What the discoverer attached to a discovery: a comment and an image reference."""

    id: str
    discovery_id: str
    account_id: str
    image: ImageReference | None = None
    comment: str | None = None
    visibility: ContentVisibility = "private"
    created_at: Timestamp
    updated_at: Timestamp


class TrailStats(BaseModel):
    """Per (account, trail) progress and leaderboard position."""

    trail_id: str
    discovered_spots: int = Field(..., ge=0)
    total_spots: int = Field(..., ge=0)
    discoveries_count: int = Field(0, ge=0)
    progress_percentage: int = Field(..., ge=0, le=100)
    completion_status: CompletionStatus
    rank: int = Field(..., ge=0)
    total_discoverers: int = Field(..., ge=0)
    first_discovered_at: Timestamp | None = None
    last_discovered_at: Timestamp | None = None
    average_time_between_discoveries: float | None = None
