"""
Geospatial helpers.

We keep a small geometry layer here so the sensor and discovery modules can do
distance/bearing/bounding-box math without pulling in heavier GIS dependencies.
Every function is pure.
"""

from __future__ import annotations

import math
from math import asin, atan2, cos, degrees, radians, sin, sqrt
from typing import Protocol, Sequence

from trailquest.domain.models import (
    CardinalDirection,
    CardinalDirectionName,
    GeoBoundary,
    GeoDirection,
    GeoLocation,
)

EARTH_RADIUS_M = 6_371_000.0
# Rough metres-per-degree used for padding/viewport math (not for distances).
_KM_PER_DEGREE = 111.0
_EQUAL_EPSILON_DEG = 0.000001

CARDINAL_DIRECTIONS: tuple[CardinalDirection, ...] = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")
CARDINAL_DIRECTION_NAMES: tuple[CardinalDirectionName, ...] = (
    "north",
    "northeast",
    "east",
    "southeast",
    "south",
    "southwest",
    "west",
    "northwest",
)


class LatLon(Protocol):
    lat: float
    lon: float


def haversine_m(a: LatLon, b: LatLon) -> float:
    """Compute great-circle distance in meters between two points."""
    lat1 = radians(a.lat)
    lon1 = radians(a.lon)
    lat2 = radians(b.lat)
    lon2 = radians(b.lon)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Floating error can push h marginally above 1 for antipodal points.
    return 2 * EARTH_RADIUS_M * asin(sqrt(min(1.0, h)))


def bearing_deg(a: LatLon, b: LatLon) -> float:
    """Initial great-circle bearing from `a` to `b`, in degrees [0, 360)."""
    lat1 = radians(a.lat)
    lat2 = radians(b.lat)
    dlon = radians(b.lon - a.lon)

    y = sin(dlon) * cos(lat2)
    x = cos(lat1) * sin(lat2) - sin(lat1) * cos(lat2) * cos(dlon)
    return (degrees(atan2(y, x)) + 360) % 360


def bearing_to_direction(bearing: float) -> GeoDirection:
    """Snap a bearing to the nearest of the 8 compass points.

    A bearing exactly between two points (e.g. 22.5) goes to the next one clockwise.
    """
    normalized = (float(bearing) % 360 + 360) % 360
    index = int(math.floor(normalized / 45 + 0.5)) % 8
    return GeoDirection(
        bearing=normalized,
        direction=index * 45.0,
        direction_short=CARDINAL_DIRECTIONS[index],
        direction_long=CARDINAL_DIRECTION_NAMES[index],
    )


def direction_between(a: LatLon, b: LatLon) -> GeoDirection:
    return bearing_to_direction(bearing_deg(a, b))


def compare_locations(a: LatLon, b: LatLon) -> tuple[bool, float, GeoDirection]:
    """Return (equal within ~0.1 m, distance in meters, direction from a to b)."""
    equal = abs(a.lat - b.lat) < _EQUAL_EPSILON_DEG and abs(a.lon - b.lon) < _EQUAL_EPSILON_DEG
    return equal, haversine_m(a, b), direction_between(a, b)


def format_coordinates(lat: float, lon: float) -> str:
    ns = "N" if lat >= 0 else "S"
    ew = "E" if lon >= 0 else "W"
    return f"{abs(lat):.4f}° {ns}, {abs(lon):.4f}° {ew}"


def find_nearest(origin: LatLon, points: Sequence[LatLon]) -> tuple[int, float]:
    """Index of and distance to the nearest point; (-1, inf) for no points."""
    best_index = -1
    best = math.inf
    for i, p in enumerate(points):
        d = haversine_m(origin, p)
        if d < best:
            best = d
            best_index = i
    return best_index, best


def is_in_bounds(point: LatLon, boundary: GeoBoundary) -> bool:
    ne, sw = boundary.north_east, boundary.south_west
    if not sw.lat <= point.lat <= ne.lat:
        return False
    if sw.lon > ne.lon:
        # Box crosses the antimeridian.
        return point.lon >= sw.lon or point.lon <= ne.lon
    return sw.lon <= point.lon <= ne.lon


def _lat_padding_deg(padding_m: float) -> float:
    return (padding_m / 1000) / _KM_PER_DEGREE


def _lon_padding_deg(padding_m: float, at_lat: float) -> float:
    return (padding_m / 1000) / (_KM_PER_DEGREE * cos(radians(at_lat)))


def boundaries_around(center: LatLon, radius_m: float) -> GeoBoundary:
    """Square-ish viewport of `radius_m` around a center point."""
    dlat = _lat_padding_deg(radius_m)
    dlon = _lon_padding_deg(radius_m, center.lat)
    return GeoBoundary(
        north_east=GeoLocation(lat=min(90.0, center.lat + dlat), lon=normalize_lon(center.lon + dlon)),
        south_west=GeoLocation(lat=max(-90.0, center.lat - dlat), lon=normalize_lon(center.lon - dlon)),
    )


def normalize_lon(lon: float) -> float:
    """Map any longitude into (-180, 180]."""
    normalized = ((lon + 180) % 360) - 180
    return 180.0 if normalized == -180 else normalized


def spot_bounding_box(points: Sequence[LatLon], padding_m: float = 50) -> GeoBoundary:
    """Bounding box covering `points`, padded, with antimeridian handling.

    The longitudes are sorted and the largest gap between neighbours is compared to
    the gap that wraps around the date line; the box skips whichever gap is larger,
    so a trail crossing 180° gets a narrow box instead of one spanning the globe.
    """
    if not points:
        zero = GeoLocation(lat=0, lon=0)
        return GeoBoundary(north_east=zero, south_west=zero)

    valid = [p for p in points if -90 <= p.lat <= 90 and -180 <= p.lon <= 180]
    if not valid:
        raise ValueError("spot_bounding_box: no valid coordinates found")
    if len(valid) == 1:
        return boundaries_around(valid[0], padding_m)

    min_lat = min(p.lat for p in valid)
    max_lat = max(p.lat for p in valid)

    lons = sorted(p.lon for p in valid)
    gaps = [b - a for a, b in zip(lons, lons[1:])]
    widest = max(range(len(gaps)), key=gaps.__getitem__)
    wrap_gap = 360 - (lons[-1] - lons[0])
    if wrap_gap < gaps[widest]:
        # Leave out the widest interior gap: start east of it, wrap past 180 to its west side.
        min_lon, max_lon = lons[widest + 1], lons[widest] + 360
    else:
        min_lon, max_lon = lons[0], lons[-1]

    lat_pad = _lat_padding_deg(padding_m)
    lon_pad = _lon_padding_deg(padding_m, (min_lat + max_lat) / 2)

    return GeoBoundary(
        north_east=GeoLocation(lat=min(90.0, max_lat + lat_pad), lon=normalize_lon(max_lon + lon_pad)),
        south_west=GeoLocation(lat=max(-90.0, min_lat - lat_pad), lon=normalize_lon(min_lon - lon_pad)),
    )


def target_location(origin: LatLon, distance_m: float, bearing: float) -> GeoLocation:
    """Destination point reached from `origin` after `distance_m` along `bearing`."""
    brg = radians(bearing)
    ratio = distance_m / EARTH_RADIUS_M
    lat1 = radians(origin.lat)
    lon1 = radians(origin.lon)

    lat2 = asin(sin(lat1) * cos(ratio) + cos(lat1) * sin(ratio) * cos(brg))
    lon2 = lon1 + atan2(sin(brg) * sin(ratio) * cos(lat1), cos(ratio) - sin(lat1) * sin(lat2))
    return GeoLocation(lat=degrees(lat2), lon=normalize_lon(degrees(lon2)))


def distance_to_boundary(point: LatLon, boundary: GeoBoundary) -> tuple[GeoLocation, float]:
    """Closest point of `boundary` to `point` and the distance to it (0 if inside)."""
    if is_in_bounds(point, boundary):
        return GeoLocation(lat=point.lat, lon=point.lon), 0.0
    ne, sw = boundary.north_east, boundary.south_west
    closest = GeoLocation(
        lat=max(sw.lat, min(ne.lat, point.lat)),
        lon=max(sw.lon, min(ne.lon, point.lon)),
    )
    return closest, haversine_m(point, closest)
