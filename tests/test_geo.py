import math
from types import SimpleNamespace

import pytest

from trailquest.core.geo import (
    EARTH_RADIUS_M,
    bearing_deg,
    bearing_to_direction,
    boundaries_around,
    compare_locations,
    distance_to_boundary,
    find_nearest,
    format_coordinates,
    haversine_m,
    is_in_bounds,
    normalize_lon,
    spot_bounding_box,
    target_location,
)
from trailquest.domain.models import GeoBoundary, GeoLocation


def test_haversine_zero_and_one_degree_of_latitude():
    a = GeoLocation(lat=0, lon=0)
    b = GeoLocation(lat=1, lon=0)

    assert haversine_m(a, a) == 0.0
    assert haversine_m(a, b) == pytest.approx(EARTH_RADIUS_M * math.pi / 180)
    assert haversine_m(a, b) == pytest.approx(haversine_m(b, a))


def test_bearing_cardinal_points():
    origin = GeoLocation(lat=0, lon=0)

    assert bearing_deg(origin, GeoLocation(lat=1, lon=0)) == pytest.approx(0.0)
    assert bearing_deg(origin, GeoLocation(lat=0, lon=1)) == pytest.approx(90.0)
    assert bearing_deg(origin, GeoLocation(lat=-1, lon=0)) == pytest.approx(180.0)
    assert bearing_deg(origin, GeoLocation(lat=0, lon=-1)) == pytest.approx(270.0)


@pytest.mark.parametrize(
    "bearing,short,long",
    [
        (0, "N", "north"),
        (22.4, "N", "north"),
        (22.5, "NE", "northeast"),
        (90, "E", "east"),
        (200, "S", "south"),
        (337.5, "N", "north"),
        (359.9, "N", "north"),
        (-45, "NW", "northwest"),
        (405, "NE", "northeast"),
    ],
)
def test_bearing_to_direction_snaps_to_eight_points(bearing, short, long):
    d = bearing_to_direction(bearing)
    assert d.direction_short == short
    assert d.direction_long == long
    assert 0 <= d.bearing < 360


def test_find_nearest():
    origin = GeoLocation(lat=0, lon=0)
    points = [GeoLocation(lat=2, lon=0), GeoLocation(lat=0.5, lon=0), GeoLocation(lat=1, lon=1)]

    assert find_nearest(origin, []) == (-1, math.inf)
    index, distance = find_nearest(origin, points)
    assert index == 1
    assert distance == pytest.approx(haversine_m(origin, points[1]))


def test_target_location_travels_requested_distance():
    origin = GeoLocation(lat=51.0, lon=7.0)
    dest = target_location(origin, 1000, 90)

    assert haversine_m(origin, dest) == pytest.approx(1000, rel=1e-6)
    assert bearing_to_direction(bearing_deg(origin, dest)).direction_short == "E"


def test_compare_locations_and_format():
    a = GeoLocation(lat=51.5, lon=-0.25)
    equal, distance, _ = compare_locations(a, GeoLocation(lat=51.5, lon=-0.25))

    assert equal is True
    assert distance == 0.0
    assert format_coordinates(51.5, -0.25) == "51.5000° N, 0.2500° W"
    assert format_coordinates(-33.0, 151.0) == "33.0000° S, 151.0000° E"


def test_normalize_lon():
    assert normalize_lon(190) == pytest.approx(-170)
    assert normalize_lon(-180) == 180.0
    assert normalize_lon(45) == 45


def test_bounding_box_empty_input_is_zero_box():
    box = spot_bounding_box([])
    assert box.north_east == GeoLocation(lat=0, lon=0)
    assert box.south_west == GeoLocation(lat=0, lon=0)


def test_bounding_box_single_point_matches_boundaries_around():
    p = GeoLocation(lat=51.0, lon=7.0)
    assert spot_bounding_box([p], 100) == boundaries_around(p, 100)


def test_bounding_box_rejects_all_invalid_points():
    with pytest.raises(ValueError):
        spot_bounding_box([SimpleNamespace(lat=95, lon=0), SimpleNamespace(lat=0, lon=200)])


def test_bounding_box_contains_points_with_padding():
    points = [GeoLocation(lat=51.0, lon=7.0), GeoLocation(lat=51.01, lon=7.02)]
    box = spot_bounding_box(points, 50)

    assert box.south_west.lat < 51.0 and box.north_east.lat > 51.01
    assert box.south_west.lon < 7.0 and box.north_east.lon > 7.02
    assert all(is_in_bounds(p, box) for p in points)


def test_bounding_box_across_antimeridian_stays_narrow():
    points = [GeoLocation(lat=0, lon=179.9), GeoLocation(lat=0.1, lon=-179.9)]
    box = spot_bounding_box(points, 50)

    # West edge sits east of the east edge: the box wraps the date line.
    assert box.south_west.lon > box.north_east.lon
    assert box.south_west.lon == pytest.approx(179.9, abs=0.01)
    assert box.north_east.lon == pytest.approx(-179.9, abs=0.01)
    assert is_in_bounds(GeoLocation(lat=0.05, lon=180), box)
    assert is_in_bounds(GeoLocation(lat=0.05, lon=-179.95), box)
    assert not is_in_bounds(GeoLocation(lat=0.05, lon=0), box)


def test_bounding_box_across_antimeridian_keeps_points_between_clusters():
    points = [GeoLocation(lat=0, lon=-170), GeoLocation(lat=0, lon=0), GeoLocation(lat=0, lon=170)]
    box = spot_bounding_box(points, 50)

    assert all(is_in_bounds(p, box) for p in points)
    # The widest empty stretch (-170 .. 0, westwards of the middle point) is left out.
    assert not is_in_bounds(GeoLocation(lat=0, lon=-90), box)
    assert box.south_west.lon == pytest.approx(0, abs=0.01)
    assert box.north_east.lon == pytest.approx(-170, abs=0.01)


def test_boundaries_around_clamps_at_pole():
    box = boundaries_around(GeoLocation(lat=89.9999, lon=0), 1000)
    assert box.north_east.lat == 90.0


def test_distance_to_boundary():
    boundary = GeoBoundary(
        north_east=GeoLocation(lat=1, lon=1),
        south_west=GeoLocation(lat=0, lon=0),
    )
    inside = GeoLocation(lat=0.5, lon=0.5)
    closest, distance = distance_to_boundary(inside, boundary)
    assert distance == 0.0
    assert closest == inside

    closest, distance = distance_to_boundary(GeoLocation(lat=2, lon=0.5), boundary)
    assert closest == GeoLocation(lat=1, lon=0.5)
    assert distance == pytest.approx(haversine_m(GeoLocation(lat=2, lon=0.5), closest))
