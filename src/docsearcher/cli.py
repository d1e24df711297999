"""CLI entry point for the doc-searcher server."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi import FastAPI

    from docsearcher.config.settings import Settings


def main() -> None:
    """Main CLI entry point for the doc-searcher server."""
    parser = argparse.ArgumentParser(
        prog="docsearcher",
        description="doc-searcher — Search-service façade over pluggable search engines",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Server bind address (overrides config)",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=None,
        help="Server port (overrides config)",
    )
    parser.add_argument(
        "--workers",
        "-w",
        type=int,
        default=None,
        help="Number of worker processes",
    )
    parser.add_argument(
        "--backend",
        "-b",
        type=str,
        choices=["elasticsearch", "opensearch", "null"],
        default=None,
        help="Search backend (overrides config)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"doc-searcher {_get_version()}",
    )

    args = parser.parse_args()

    log_level = (args.log_level or "info").upper()

    from pydantic import ValidationError

    # Overrides travel through the environment so that every worker
    # process builds identical settings.
    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        os.environ["DOCSEARCHER_CONFIG"] = str(config_path.resolve())
    if args.backend:
        os.environ["DOCSEARCHER_BACKEND__KIND"] = args.backend
    if args.host:
        os.environ["DOCSEARCHER_SERVER__HOST"] = args.host
    if args.port:
        os.environ["DOCSEARCHER_SERVER__PORT"] = str(args.port)
    if args.log_level:
        os.environ["DOCSEARCHER_OBSERVABILITY__LOG_LEVEL"] = args.log_level

    try:
        settings = load_settings()
    except ValidationError as e:
        print(f"Error: Invalid configuration:\n{e}", file=sys.stderr)
        sys.exit(1)

    if args.workers:
        settings.server.workers = args.workers

    _check_port(settings.server.host, settings.server.port)

    import uvicorn

    uvicorn.run(
        "docsearcher.cli:app_factory",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        workers=settings.server.workers if not args.reload else 1,
        reload=args.reload,
        log_level=log_level.lower(),
    )


def load_settings() -> Settings:
    """Load settings from ``DOCSEARCHER_CONFIG`` (YAML) or the environment."""
    from docsearcher.config.settings import Settings

    config = os.environ.get("DOCSEARCHER_CONFIG")
    if config:
        return Settings.from_yaml(config)
    return Settings()


def app_factory() -> FastAPI:
    """Build the application inside a uvicorn worker."""
    from docsearcher.api.app import create_app

    return create_app(load_settings())


def _check_port(host: str, port: int) -> None:
    """Exit with an error if the port is already in use."""
    import socket

    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.bind((host if host != "0.0.0.0" else "127.0.0.1", port))
    except OSError:
        print(f"\n{'=' * 60}", file=sys.stderr)
        print(f"  ERROR: Port {port} is already in use!", file=sys.stderr)
        print(f"  Run 'lsof -i :{port}' to find the process.", file=sys.stderr)
        print(f"{'=' * 60}\n", file=sys.stderr)
        sys.exit(1)
    finally:
        sock.close()


def _get_version() -> str:
    """Get the package version."""
    try:
        from docsearcher import __version__

        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    main()
