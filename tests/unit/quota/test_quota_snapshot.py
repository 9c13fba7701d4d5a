from src.mediashelf.quota.quota_service import build_snapshot


def test_percentage_is_float_share_of_total():
    snapshot = build_snapshot(600, 1000)

    assert snapshot.percentage == 60.0
    assert snapshot.as_dict() == {"used": 600, "total": 1000, "percentage": 60.0}


def test_zero_total_reports_zero_percent():
    assert build_snapshot(10, 0).percentage == 0.0


def test_locked_assets_count_and_trashed_do_not(stack):
    locked = stack.upload("alice", "locked.jpg", 40)
    trashed = stack.upload("alice", "trashed.jpg", 60)
    stack.upload("bob", "other.jpg", 500)
    stack.media.toggle_lock(locked.id, "alice")
    stack.media.trash(trashed.id, "alice")

    snapshot = stack.quota.snapshot("alice")

    assert snapshot.used == 40
    assert snapshot.percentage == 4.0
