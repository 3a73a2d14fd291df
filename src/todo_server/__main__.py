"""Command-line entry point: ``python -m todo_server``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from todo_server.app import create_app
from todo_server.config import load_settings
from todo_server.exceptions import ServerStartupError
from todo_server.log import setup_logging
from todo_server.server import ApplicationServer

logger = logging.getLogger("todo_server")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="todo-server", description="Run the todo API server."
    )
    parser.add_argument("--host", help="Interface to bind (default: HOST or 0.0.0.0)")
    parser.add_argument(
        "--port", type=int, help="Port to listen on (default: PORT or 3000)"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
    except ValidationError as exc:
        print(f"Invalid configuration:\n{exc}", file=sys.stderr)
        return 2

    setup_logging(settings.LOG_LEVEL)
    server = ApplicationServer(
        create_app(settings),
        host=args.host or settings.HOST,
        port=args.port if args.port is not None else settings.PORT,
    )

    try:
        asyncio.run(server.serve())
    except ServerStartupError as exc:
        logger.critical("Server failed to start: %s", exc)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
