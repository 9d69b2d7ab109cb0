"""Store and seed tests."""

from virtual_backend.db.seed import SEED_TIMESTAMP
from virtual_backend.db.store import Store
from virtual_backend.schemas.like import Like


def test_seed_shape(store):
    """Seed holds 3 users (1 admin), 2 reports, 2 comments, 1 like, 0 moderations."""
    assert len(store.rows("users")) == 3
    assert [u.id for u in store.rows("users") if u.role == "admin"] == ["admin-1"]
    assert [d.id for d in store.rows("denuncias")] == ["denuncia-1", "denuncia-2"]
    assert len(store.rows("comentarios")) == 2
    assert len(store.rows("likes")) == 1
    assert store.rows("moderaciones") == []


def test_seed_counters_match_relations(store):
    for denuncia in store.rows("denuncias"):
        likes = [l for l in store.rows("likes") if l.denuncia_id == denuncia.id]
        comentarios = [c for c in store.rows("comentarios") if c.denuncia_id == denuncia.id]
        assert denuncia.likes_count == len(likes)
        assert denuncia.comentarios_count == len(comentarios)


def test_seed_timestamps_are_fixed(store):
    assert all(d.created_at == SEED_TIMESTAMP for d in store.rows("denuncias"))


def test_reset_is_idempotent(store):
    store.reset()
    once = store.snapshot()
    store.reset()
    assert store.snapshot() == once


def test_reset_discards_mutations(store):
    fresh = store.snapshot()
    store.rows("likes").append(
        Like(id="like-x", denuncia_id="denuncia-2", user_id="user-1", created_at=SEED_TIMESTAMP)
    )
    store.rows("denuncias")[0].estado = "resuelta"
    store.reset()
    assert store.snapshot() == fresh


def test_instances_are_independent():
    a = Store()
    b = Store()
    a.rows("denuncias").clear()
    assert len(b.rows("denuncias")) == 2


def test_find_user_by_email_ignores_case(store):
    user = store.find_user_by_email("ADMIN@Example.com")
    assert user is not None
    assert user.id == "admin-1"
    assert store.find_user_by_email("nobody@example.com") is None
