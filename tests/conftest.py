import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# In-memory database for the whole session; must be set before the app is imported
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from worldsmith import create_app, db  # noqa: E402
from worldsmith.dungeon import DungeonGenerationParams, generate_dungeon  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app = create_app()
    app.config.update({"TESTING": True})
    return app


@pytest.fixture(autouse=True)
def _push_app_context(test_app):
    ctx = test_app.app_context()
    ctx.push()
    try:
        yield
    finally:
        db.session.remove()
        ctx.pop()


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture()
def make_dungeon():
    """Factory: make_dungeon(seed=..., **param_overrides) -> DungeonDetail."""

    def _make(seed=12345, **overrides):
        return generate_dungeon(DungeonGenerationParams(**overrides), seed=seed)

    return _make
