from app.config.categories_config import CATEGORIES
from app.scripts.seed_categories import seed_categories
from tests.fakes import FakeBackend


def test_seed_is_idempotent():
    backend = FakeBackend()
    client = backend.client(storage=None)
    backend.insert("categories", id="retired", name="Retired", description="")

    assert seed_categories(client) == len(CATEGORIES)
    assert seed_categories(client) == len(CATEGORIES)

    rows = backend.rows("categories")
    assert len(rows) == len(CATEGORIES) + 1
    assert {c["id"] for c in CATEGORIES} <= {r["id"] for r in rows}
