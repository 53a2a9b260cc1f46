"""
project: Worldsmith
module: __init__.py
License: MIT

Flask application and core extensions setup.

This module wires together the Flask app and SQLAlchemy. Configuration is
sourced from environment variables with reasonable defaults for development.
A local `instance/` directory is used for SQLite, logs and other runtime data.
"""

import logging
import os
import uuid
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy

# Load .env if present so `SECRET_KEY`, `DATABASE_URL`, etc. can be supplied
# without exporting shell variables during development.
load_dotenv()

# Instance-relative config so ./instance holds the SQLite database and logs
app = Flask(__name__, instance_relative_config=True)

try:
    os.makedirs(app.instance_path, exist_ok=True)
except OSError:
    # Read-only checkouts still work with an explicit DATABASE_URL
    logging.getLogger(__name__).warning("could not create instance path %s", app.instance_path)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


secret_key = os.getenv("SECRET_KEY", "dev-secret-change-me")
database_url = os.getenv("DATABASE_URL")
if not database_url:
    db_path = Path(app.instance_path) / "worldsmith.db"
    # Use POSIX path for SQLAlchemy URI compatibility across OS
    database_url = f"sqlite:///{db_path.as_posix()}"

app.config.update(
    SECRET_KEY=secret_key,
    SQLALCHEMY_DATABASE_URI=database_url,
    SQLALCHEMY_TRACK_MODIFICATIONS=False,
    # Dungeon generation caps / metrics
    DUNGEON_MAX_GRID_CELLS=int(os.getenv("DUNGEON_MAX_GRID_CELLS", "40000")),
    DUNGEON_MAX_LEVELS=int(os.getenv("DUNGEON_MAX_LEVELS", "5")),
    DUNGEON_ENABLE_GENERATION_METRICS=_env_flag("DUNGEON_ENABLE_GENERATION_METRICS", "1"),
)

engine_opts = {}
if database_url.startswith("sqlite:"):
    engine_opts["connect_args"] = {
        "timeout": 10,  # busy timeout (seconds) for sqlite
        "check_same_thread": False,  # test client and CLI share the engine
    }
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        from sqlalchemy.pool import StaticPool

        # One shared connection, otherwise each checkout sees an empty database
        engine_opts["poolclass"] = StaticPool
db = SQLAlchemy(app, session_options={"expire_on_commit": False}, engine_options=engine_opts)


# Register HTTP blueprints (import after app/db created)
from worldsmith.routes.dungeon_api import bp_dungeon  # noqa: E402

app.register_blueprint(bp_dungeon)


def create_app():
    """Return the Flask app instance with all tables created."""
    from worldsmith import models  # noqa: F401  (register tables on the metadata)

    with app.app_context():
        db.create_all()
    return app


@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal server error", "error_id": error_id}), 500
