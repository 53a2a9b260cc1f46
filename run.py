"""Worldsmith CLI entry point.

Provides subcommands for running the HTTP server, generating a dungeon from
the command line and creating the database tables. Accepts configuration via
flags and environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()
# Disable colors if output is not a real terminal (e.g., during pytest capture)
_COLOR_ENABLED = sys.stdout.isatty()


def _load_version() -> str:
    path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Worldsmith dungeon generation service

    Run the JSON API server, generate a dungeon layout straight to stdout, or
    create the database tables. Configuration can be provided via CLI flags or
    environment variables. If both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                     Bind address for the web server (default: 0.0.0.0)
          PORT                     Port for the web server (default: 5000)
          DATABASE_URL             SQLAlchemy database URI (default: sqlite:///instance/worldsmith.db)
          DUNGEON_MAX_GRID_CELLS   Largest grid accepted by the API (default: 40000)
          DUNGEON_MAX_LEVELS       Most levels accepted by the API (default: 5)
          WORLDSMITH_LOG_LEVEL     debug | info | warn | error (default: info)
          WORLDSMITH_LOG_JSON      1 to emit JSON log lines

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Generate a reproducible three-level crypt and print the JSON
          python run.py generate --levels 3 --theme "haunted crypt" --seed 42

          # Show an ASCII preview instead of JSON
          python run.py generate --width 40 --height 30 --ascii

          # Quieter JSON logs while generating
          python run.py --log-level warn --log-json generate --seed 7

          # Load variables from .env then create tables
          python run.py --env-file .env init-db
        """
    )

    parser = argparse.ArgumentParser(
        prog="worldsmith",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=["debug", "info", "warn", "error"],
        default=None,
        help="Structured log level (default: env WORLDSMITH_LOG_LEVEL or info)",
    )
    parser.add_argument(
        "--log-json",
        dest="log_json",
        action="store_true",
        help="Emit structured log lines as JSON (default: env WORLDSMITH_LOG_JSON)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Worldsmith {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the JSON API server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask API server",
    )
    server_parser.add_argument(
        "--host",
        default=None,
        help="Host interface to bind (default: env HOST or 0.0.0.0)",
    )
    server_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: env PORT or 5000)",
    )
    server_parser.add_argument(
        "--db",
        dest="db_uri",
        default=None,
        help="Database URI (default: env DATABASE_URL or sqlite:///instance/worldsmith.db)",
    )
    server_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode with verbose error pages",
    )
    server_parser.set_defaults(command="server")

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate a dungeon and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the procedural generator once; no database needed.",
    )
    gen_parser.add_argument("--width", type=int, default=50, help="Grid width in cells (default: 50)")
    gen_parser.add_argument("--height", type=int, default=50, help="Grid height in cells (default: 50)")
    gen_parser.add_argument("--levels", type=int, default=1, help="Number of levels (default: 1)")
    gen_parser.add_argument("--min-room", dest="min_room", type=int, default=2, help="Smallest room side (default: 2)")
    gen_parser.add_argument("--max-room", dest="max_room", type=int, default=10, help="Largest room side (default: 10)")
    gen_parser.add_argument("--theme", default="dungeon", help="Theme text, e.g. 'goblin lair' (default: dungeon)")
    gen_parser.add_argument(
        "--difficulty",
        default="medium",
        choices=["easy", "medium", "hard", "deadly"],
        help="Difficulty (default: medium)",
    )
    gen_parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible layout")
    gen_parser.add_argument("--name", default=None, help="Dungeon name (default: generated)")
    gen_parser.add_argument("--ascii", action="store_true", help="Print an ASCII preview per level instead of JSON")
    gen_parser.add_argument("--out", default=None, help="Write the JSON document to this file")
    gen_parser.set_defaults(command="generate")

    # init-db subcommand
    init_parser = subparsers.add_parser(
        "init-db",
        help="Create database tables",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    init_parser.add_argument("--db", dest="db_uri", default=None, help="Database URI (default: env DATABASE_URL)")
    init_parser.set_defaults(command="init-db")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]

    args = parser.parse_args(argv)
    return args


def _color(text, fore) -> str:
    return f"{fore}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else str(text)


def _apply_log_flags(args) -> None:
    # Imports the worldsmith package, so DATABASE_URL must already be final
    from worldsmith.logging_utils import configure

    configure(level=args.log_level, json_mode=True if args.log_json else None)


def _run_generate(args) -> int:
    from worldsmith.dungeon import (
        DungeonGenerationParams,
        DungeonGenerator,
        InvalidParametersError,
        render_ascii,
    )

    params = DungeonGenerationParams(
        grid_width=args.width,
        grid_height=args.height,
        num_levels=args.levels,
        min_room_size=args.min_room,
        max_room_size=args.max_room,
        theme=args.theme,
        difficulty=args.difficulty,
        name=args.name,
    )
    try:
        generator = DungeonGenerator(params, seed=args.seed)
    except InvalidParametersError as exc:
        for err in exc.errors:
            print(f"{_color('[ERROR]', Fore.RED)} {err}", file=sys.stderr)
        return 2
    detail = generator.run()
    document = detail.to_dict()
    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2)
    if args.ascii:
        print(_color(f"{detail.name} ({detail.type}, {detail.difficulty}) seed={detail.seed}", Fore.CYAN))
        for level in detail.levels:
            print(_color(f"-- {level.name} ({len(level.rooms)} rooms, {len(level.corridors)} corridors)", Fore.YELLOW))
            print(render_ascii(level))
    elif not args.out:
        print(json.dumps(document, indent=2))
    return 0


def main(argv: list[str]) -> int:
    # Load .env if requested, else the default .env if present (no error if missing)
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()
    if mode == "generate":
        _apply_log_flags(args)
        return _run_generate(args)

    # Resolve configuration from CLI flags or env vars
    env_host = os.getenv("HOST", "0.0.0.0")
    env_port = int(os.getenv("PORT", "5000"))
    env_db = os.getenv("DATABASE_URL")

    host = getattr(args, "host", None) or env_host
    port = int(getattr(args, "port", None) or env_port)
    db_uri_cli = getattr(args, "db_uri", None)

    # Make DATABASE_URL available to the Flask app BEFORE importing it
    if db_uri_cli:
        os.environ["DATABASE_URL"] = db_uri_cli

    # For display purposes only
    db_banner = db_uri_cli or env_db or "auto (instance/worldsmith.db)"

    # Import server entrypoints only after environment is ready
    _apply_log_flags(args)
    from worldsmith.logging_utils import log
    from worldsmith.server import init_db, start_server

    if mode == "init-db":
        tables = init_db()
        print(f"{_color('[OK]', Fore.GREEN)} tables: {', '.join(tables)}")
        return 0

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    title = _color("Worldsmith Server Bootup", Fore.CYAN + Style.BRIGHT)

    def label(text: str) -> str:
        return _color(text, Fore.YELLOW)

    def value(val: str | int) -> str:
        return _color(val, Fore.GREEN)

    divider = _color("=" * 40, Fore.MAGENTA)
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Mode:'):12} {value(mode.upper())}",
        f"  {label('Host:'):12} {value(host)}",
        f"  {label('Port:'):12} {value(port)}",
        f"  {label('Database:'):12} {value(db_banner)}",
        divider,
        "",
    ]
    print("\n".join(lines))
    log.info(event="startup", mode=mode, host=host, port=port, db=db_banner)

    debug = bool(getattr(args, "debug", False) or os.getenv("FLASK_DEBUG") == "1")
    log.info(event="listen", host=host, port=port, debug=debug)
    start_server(host=host, port=port, debug=debug)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
