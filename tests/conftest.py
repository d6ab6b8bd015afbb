from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from trailquest.config.settings import get_settings
from trailquest.core.geo import target_location
from trailquest.discovery.engine import create_discovery
from trailquest.domain.models import GeoBoundary, GeoLocation, Spot, SpotOptions, Trail, TrailOptions


@pytest.fixture
def base() -> GeoLocation:
    """Where the player stands in most tests."""
    return GeoLocation(lat=51.0, lon=7.0)


@pytest.fixture
def t0() -> datetime:
    return datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _fresh_settings():
    # Settings are cached per process; env-override tests must not leak into others.
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_spot(base):
    """Build a spot `distance_m` away from `base` along `bearing`."""

    def _make(
        spot_id: str,
        *,
        distance_m: float = 0.0,
        bearing: float = 0.0,
        created_by: str = "curator",
        discovery_radius: float = 30.0,
        clue_radius: float = 200.0,
        visibility: str = "hidden",
        **extra,
    ) -> Spot:
        location = target_location(base, distance_m, bearing) if distance_m else base
        return Spot(
            id=spot_id,
            name=spot_id.title(),
            description=f"About {spot_id}",
            location=location,
            created_by=created_by,
            options=SpotOptions(
                discovery_radius=discovery_radius,
                clue_radius=clue_radius,
                visibility=visibility,
            ),
            **extra,
        )

    return _make


@pytest.fixture
def make_trail():
    def _make(
        trail_id: str = "trail-1",
        *,
        discovery_mode: str = "free",
        preview_mode: str = "hidden",
        scanner_radius: float = 150.0,
        snap_radius: float | None = None,
        boundary: GeoBoundary | None = None,
    ) -> Trail:
        return Trail(
            id=trail_id,
            name=trail_id,
            boundary=boundary,
            options=TrailOptions(
                discovery_mode=discovery_mode,
                preview_mode=preview_mode,
                scanner_radius=scanner_radius,
                snap_radius=snap_radius,
            ),
        )

    return _make


@pytest.fixture
def make_discovery(t0):
    """Discovery `minutes` after `t0`."""

    def _make(account_id: str, spot_id: str, trail_id: str = "trail-1", *, minutes: float = 0):
        return create_discovery(account_id, spot_id, trail_id, now=t0 + timedelta(minutes=minutes))

    return _make
