"""
static-cache-server - Main Entry Point

Serve thu muc hien tai (hoac --root) qua HTTP tren loopback, voi
in-memory cache tu invalidate khi file .html/.css/.js thay doi.

Usage:
    python main.py --port 8000
    python main.py -p 9000 --root ./site --debug
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from config.server_settings import ServerSettings, load_server_settings
from core.errors import StaticServerError
from core.logging_config import flush_logs, log_error, set_debug_mode
from services.static_server import run


def port_number(value: str) -> int:
    port = int(value)
    if not 0 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"port must be in 0..65535, got {port}")
    return port


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="static-cache-server",
        description="Serve a directory over HTTP with a self-invalidating in-memory cache.",
    )
    parser.add_argument("-p", "--port", type=port_number, default=None, help="Port to serve on (default: 8000)")
    parser.add_argument("-r", "--root", default=None, help="Directory to serve (default: current directory)")
    parser.add_argument("--config", type=Path, default=None, help="Path to a JSON settings file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def resolve_settings(args: argparse.Namespace) -> ServerSettings:
    """CLI arguments override file settings."""
    settings = load_server_settings(args.config)
    if args.port is not None:
        settings.port = args.port
    if args.root is not None:
        settings.root = args.root
    return settings


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.debug:
        set_debug_mode(True)

    settings = resolve_settings(args)
    try:
        run(settings)
    except StaticServerError as e:
        log_error(f"Error: {e}")
        return 1
    finally:
        flush_logs()
    return 0


if __name__ == "__main__":
    sys.exit(main())
