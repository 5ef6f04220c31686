import pytest
from sqlalchemy import text

from app.core.exceptions import NoVectorForReference, VectorDimensionMismatch


def test_get_vector_missing_returns_none(store, make_user):
    user = make_user()
    assert store.get_vector(user.id) is None
    assert store.has_vector(user.id) is False


def test_upsert_replaces_previous_vector(store, make_user):
    user = make_user()
    store.upsert(user.id, [1.0, 0.5, 0.25])
    store.upsert(user.id, [0.0, -0.5, 2.0])

    assert store.get_vector(user.id) == [0.0, -0.5, 2.0]


def test_upsert_rejects_wrong_dimension(store, make_user):
    user = make_user()
    with pytest.raises(VectorDimensionMismatch):
        store.upsert(user.id, [1.0, 2.0])
    assert store.get_vector(user.id) is None


def test_nearest_orders_by_distance_and_excludes(store, make_user):
    me, near, mid, far = make_user(), make_user(), make_user(), make_user()
    store.upsert(me.id, [0.0, 0.0, 0.0])
    store.upsert(far.id, [3.0, 0.0, 0.0])
    store.upsert(near.id, [0.5, 0.0, 0.0])
    store.upsert(mid.id, [0.0, 2.0, 0.0])

    neighbors = store.nearest(me.id, exclude_user_id=me.id, eligible_only=True, limit=10)

    assert [n.user_id for n in neighbors] == [near.id, mid.id, far.id]
    assert [n.distance for n in neighbors] == pytest.approx([0.5, 2.0, 3.0])


def test_nearest_respects_limit(store, make_user):
    me = make_user()
    store.upsert(me.id, [0.0, 0.0, 0.0])
    for i in range(5):
        other = make_user()
        store.upsert(other.id, [float(i + 1), 0.0, 0.0])

    assert len(store.nearest(me.id, exclude_user_id=me.id, limit=2)) == 2


def test_nearest_skips_ineligible_users(store, make_user):
    me = make_user()
    inactive = make_user(active=False)
    unverified = make_user(verified=False)
    ok = make_user()
    for user in (me, inactive, unverified):
        store.upsert(user.id, [0.0, 0.0, 0.0])
    store.upsert(ok.id, [1.0, 1.0, 1.0])

    neighbors = store.nearest(me.id, exclude_user_id=me.id, eligible_only=True, limit=10)
    assert [n.user_id for n in neighbors] == [ok.id]

    everyone = store.nearest(me.id, exclude_user_id=me.id, eligible_only=False, limit=10)
    assert {n.user_id for n in everyone} == {inactive.id, unverified.id, ok.id}


def test_equal_distances_break_ties_by_user_id(store, make_user):
    me = make_user()
    store.upsert(me.id, [0.0, 0.0, 0.0])
    others = [make_user() for _ in range(4)]
    for other in others:
        store.upsert(other.id, [0.0, 0.0, 1.0])

    first = store.nearest(me.id, exclude_user_id=me.id, limit=10)
    second = store.nearest(me.id, exclude_user_id=me.id, limit=10)

    assert [n.user_id for n in first] == sorted(o.id for o in others)
    assert [n.user_id for n in first] == [n.user_id for n in second]


def test_nearest_without_reference_vector(store, make_user):
    me, other = make_user(), make_user()
    store.upsert(other.id, [1.0, 0.0, 0.0])

    with pytest.raises(NoVectorForReference):
        store.nearest(me.id, exclude_user_id=me.id)


def test_nearest_rejects_zero_limit(store, make_user):
    me = make_user()
    store.upsert(me.id, [1.0, 0.0, 0.0])
    with pytest.raises(ValueError):
        store.nearest(me.id, limit=0)


def test_nearest_rejects_stored_vector_of_other_dimension(db, store, make_user):
    me, broken = make_user(), make_user()
    store.upsert(me.id, [0.0, 0.0, 0.0])
    # bypasses the typed column, which refuses the wrong length on write
    db.execute(
        text("INSERT INTO user_embeddings (user_id, vector, updated_at) VALUES (:user_id, :vector, :updated_at)"),
        {"user_id": broken.id.hex, "vector": "[1.0,2.0]", "updated_at": "2026-01-01 00:00:00"},
    )
    db.commit()

    with pytest.raises(VectorDimensionMismatch) as exc_info:
        store.nearest(me.id, exclude_user_id=me.id, eligible_only=True, limit=10)

    assert exc_info.value.expected == 3
    assert exc_info.value.actual == 2
