"""HTTP server of the task planner: the JSON API plus the web front end."""

from __future__ import annotations

import argparse
import os
from pathlib import Path

from flask import Flask, abort, send_from_directory

from .api import register_api
from .storage import TaskStore, create_table

__all__ = ["prepare", "create_app", "run", "main"]

DEFAULT_PORT = ":7540"
DEFAULT_DB_FILE = "scheduler.db"
DEFAULT_WEB_DIR = "web"


def prepare(db_file: str) -> TaskStore:
    """Create the database at ``db_file`` if it is missing and return its store."""
    if not os.path.exists(db_file):
        create_table(db_file)
    return TaskStore(db_file)


def create_app(db_file: str = DEFAULT_DB_FILE, web_dir: str = DEFAULT_WEB_DIR) -> Flask:
    """Build the application serving the API and the files under ``web_dir``."""
    app = Flask(__name__, static_folder=None)
    store = prepare(db_file)
    register_api(app, store)
    root = Path(web_dir).resolve()

    def serve_file(path: str = ""):
        candidate = (root / path).resolve()
        if candidate != root and root not in candidate.parents:
            abort(404)
        if candidate.is_dir():
            path = os.path.join(path, "index.html") if path else "index.html"
        return send_from_directory(str(root), path)

    app.add_url_rule("/", "web_root", serve_file)
    app.add_url_rule("/<path:path>", "web_file", serve_file)
    return app


def _split_address(address: str) -> tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid listen address {address!r}")
    return host, int(port)


def run(
    port: str = DEFAULT_PORT,
    db_file: str = DEFAULT_DB_FILE,
    web_dir: str = DEFAULT_WEB_DIR,
) -> None:
    """Serve the application on ``port``, an address such as ':7540'."""
    host, number = _split_address(port)
    app = create_app(db_file, web_dir)
    app.run(host=host or "0.0.0.0", port=number)


def main(argv: list[str] | None = None) -> int:
    """Start the server, listening on TODO_PORT or the default address."""
    parser = argparse.ArgumentParser(description="Task planner server.")
    parser.add_argument("--db", default=DEFAULT_DB_FILE, help="database file")
    parser.add_argument("--web", default=DEFAULT_WEB_DIR, help="directory of web files")
    args = parser.parse_args(argv)

    port = os.environ.get("TODO_PORT", "")
    print("port is: ", port)
    if not port:
        port = DEFAULT_PORT
        print("port is empty, setting to default: ", port)
    try:
        run(port, args.db, args.web)
    except (OSError, ValueError) as exc:
        print(exc)
        return 1
    return 0