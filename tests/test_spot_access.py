from trailquest.config.settings import DiscoverySettings, Settings
from trailquest.discovery.access import (
    determine_spot_source,
    enrich_spot_with_source,
    enrich_spots_with_source,
    filter_spot_by_source,
    visible_spots,
)
from trailquest.domain.models import GeoLocation, ImageReference


def _teaser(make_spot):
    spot = make_spot("s1", image=ImageReference(id="img", url="https://example.org/s1.jpg"))
    return spot.model_copy(update={"location": GeoLocation(lat=51.12345, lon=7.98765), "source": "preview"})


def test_source_priority(make_spot, make_discovery):
    mine = make_spot("mine", created_by="alice")
    found = make_spot("found")
    other = make_spot("other")
    history = [make_discovery("alice", "found"), make_discovery("alice", "mine"), make_discovery("bob", "other")]

    assert determine_spot_source(mine, "alice", history) == "created"
    assert determine_spot_source(found, "alice", history) == "discovery"
    assert determine_spot_source(other, "alice", history) == "preview"


def test_enrich_returns_copy(make_spot):
    spot = make_spot("s1")
    enriched = enrich_spot_with_source(spot, "alice", [])

    assert enriched.source == "preview"
    assert spot.source is None


def test_batch_enrich_uses_only_the_accounts_discoveries(make_spot, make_discovery):
    spots = [make_spot("s1"), make_spot("s2")]
    history = [make_discovery("bob", "s1"), make_discovery("alice", "s2")]

    assert [s.source for s in enrich_spots_with_source(spots, "alice", history)] == ["preview", "discovery"]


def test_filter_without_source_denies_access(make_spot):
    assert filter_spot_by_source(make_spot("s1")) is None


def test_filter_full_access_returns_spot_unchanged(make_spot):
    for source in ("created", "discovery", "public"):
        spot = make_spot("s1").model_copy(update={"source": source})
        assert filter_spot_by_source(spot) is spot


def test_filter_preview_redacts_and_rounds(make_spot):
    spot = _teaser(make_spot)

    out = filter_spot_by_source(spot)

    assert out.location == GeoLocation(lat=51.12, lon=7.99)
    assert out.description == ""
    assert out.image is None
    assert out.name == spot.name
    # the input is untouched
    assert spot.location.lat == 51.12345
    assert spot.image is not None


def test_filter_preview_is_idempotent(make_spot):
    once = filter_spot_by_source(_teaser(make_spot))
    assert filter_spot_by_source(once) == once


def test_filter_preview_uses_configured_precision(make_spot):
    settings = Settings(discovery=DiscoverySettings(preview_location_decimals=1))

    out = filter_spot_by_source(_teaser(make_spot), settings=settings)

    assert out.location == GeoLocation(lat=51.1, lon=8.0)


def test_visible_spots(make_spot, make_discovery):
    spots = [make_spot("mine", created_by="alice"), make_spot("other")]

    out = visible_spots(spots, "alice", [])

    assert [s.source for s in out] == ["created", "preview"]
    assert out[0].description == "About mine"
    assert out[1].description == ""
