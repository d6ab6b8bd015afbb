from trailquest.sensor.scan import generate_scan_event


def test_scan_reports_candidates_before_hints(base, t0, make_spot, make_discovery):
    spots = [
        make_spot("far-hint", distance_m=100, bearing=90, clue_radius=200),
        make_spot("candidate", distance_m=10, discovery_radius=30),
        make_spot("outside-scanner", distance_m=180, clue_radius=250),
        make_spot("too-far", distance_m=300),
        make_spot("own", created_by="alice"),
        make_spot("already-found", distance_m=5),
    ]
    history = [make_discovery("alice", "already-found", "other-trail")]

    event = generate_scan_event("alice", base, spots, 150, history, "trail-1", now=t0)

    assert event.successful is True
    assert [(c.spot_id, c.kind) for c in event.clues] == [("candidate", "candidate"), ("far-hint", "hint")]
    assert all(c.source == "scanEvent" and c.trail_id == "trail-1" for c in event.clues)
    assert event.radius_used == 150
    assert event.scanned_at == t0
    assert event.account_id == "alice"


def test_scan_with_only_hints_is_unsuccessful(base, make_spot):
    spots = [make_spot("hint", distance_m=120, discovery_radius=30, clue_radius=200)]

    event = generate_scan_event("bob", base, spots, 150, [])

    assert event.successful is False
    assert [c.kind for c in event.clues] == ["hint"]
    assert event.trail_id is None


def test_scan_ignores_other_accounts_discoveries(base, make_spot, make_discovery):
    spots = [make_spot("s1")]
    event = generate_scan_event("bob", base, spots, 150, [make_discovery("alice", "s1")])

    assert event.successful is True
    assert event.clues[0].spot_id == "s1"
    assert event.clues[0].discovery_radius == 30


def test_scan_ids_are_unique(base, make_spot):
    spots = [make_spot("s1"), make_spot("s2", distance_m=10)]

    first = generate_scan_event("bob", base, spots, 150, [])
    second = generate_scan_event("bob", base, spots, 150, [])

    assert first.id != second.id
    assert len({c.id for c in first.clues + second.clues}) == 4
