"""
project: Worldsmith
module: server.py
License: MIT

Server bootstrap utilities.

Exposes helpers to create the database tables and start the Flask development
server with logging to both console and a rotating file in instance/.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from worldsmith import app, create_app, db


def init_db():
    """Create all tables (idempotent)."""
    create_app()
    with app.app_context():
        tables = sorted(db.metadata.tables)
    return tables


def start_server(host="0.0.0.0", port=5000, debug: bool = False):  # pragma: no cover (runtime only)
    """Start the HTTP server and ensure DB tables exist.

    When debug=True, Flask's debugger and reloader provide verbose tracebacks.
    """
    create_app()
    _configure_logging()
    try:
        print(f"[INFO] Starting Worldsmith server on {host}:{port}")
        app.run(host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        print("\n[INFO] Server stopped by user (Ctrl+C)")
        sys.exit(0)


def _configure_logging():
    """Configure logging to both console and a rotating file in instance/.

    The file path will be instance/app.log. Retains a few backups to avoid growth.
    """
    log_dir = app.instance_path
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, "app.log")

    root = logging.getLogger()
    root.setLevel(logging.INFO)

    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    # Rotating file handler
    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)

    # Console handler (for terminals/tasks that show output)
    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(formatter)

    # Avoid duplicate handlers if reconfigured
    for h in list(root.handlers):
        root.removeHandler(h)

    root.addHandler(file_handler)
    root.addHandler(console)
    return log_path
