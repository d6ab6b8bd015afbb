import pytest
from pydantic import ValidationError

from trailquest.config.settings import RatingSettings, Settings
from trailquest.ratings.summary import create_spot_rating, get_spot_rating_summary, spot_rating_id


@pytest.mark.parametrize("raw,stars", [(7, 5), (0, 1), (-3, 1), (3.5, 4), (2.5, 3), (2.49, 2), (4, 4)])
def test_create_spot_rating_rounds_then_clamps(raw, stars, t0):
    rating = create_spot_rating("alice", "s1", raw, now=t0)
    assert rating.rating == stars
    assert rating.created_at == t0


def test_rerating_keeps_the_same_id():
    first = create_spot_rating("alice", "s1", 2)
    second = create_spot_rating("alice", "s1", 5)

    assert first.id == second.id == spot_rating_id("alice", "s1")
    assert spot_rating_id("alice", "s2") != first.id
    assert spot_rating_id("bob", "s1") != first.id


def test_rating_range_can_be_narrowed_by_settings():
    settings = Settings(ratings=RatingSettings(min_rating=2, max_rating=4))

    assert create_spot_rating("alice", "s1", 1, settings=settings).rating == 2
    assert create_spot_rating("alice", "s1", 5, settings=settings).rating == 4


def test_rating_settings_reject_inverted_range():
    with pytest.raises(ValidationError):
        RatingSettings(min_rating=4, max_rating=2)


def test_rating_summary():
    ratings = [
        create_spot_rating("alice", "s1", 5),
        create_spot_rating("bob", "s1", 4),
        create_spot_rating("carol", "s1", 2),
        create_spot_rating("alice", "s2", 1),
    ]

    summary = get_spot_rating_summary("s1", ratings, "bob")

    assert summary.count == 3
    assert summary.average == pytest.approx(11 / 3)
    assert summary.user_rating == 4
    assert get_spot_rating_summary("s1", ratings, "dave").user_rating is None


def test_rating_summary_without_ratings():
    summary = get_spot_rating_summary("s1", [], "alice")

    assert summary.average == 0.0
    assert summary.count == 0
    assert summary.user_rating is None
