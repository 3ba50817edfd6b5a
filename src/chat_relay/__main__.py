"""Command-line entry point: ``python -m chat_relay`` or ``chat-relay``."""

from __future__ import annotations

import argparse
import errno
import logging
import socket
import sys
from typing import Optional, Sequence

import uvicorn

from chat_relay.config import Settings
from chat_relay.server import create_app

logger = logging.getLogger("chat_relay")


def find_free_port(host: str, start: int, attempts: int) -> Optional[int]:
    """Return the first bindable port in ``start .. start + attempts``, or None."""
    for port in range(start, start + attempts + 1):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            try:
                sock.bind((host, port))
            except OSError as exc:
                if exc.errno != errno.EADDRINUSE:
                    raise
                logger.warning("Port %d is in use. Trying %d...", port, port + 1)
                continue
        return port
    return None


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = Settings.from_env()

    parser = argparse.ArgumentParser(prog="chat-relay", description=__doc__)
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--log-level", default=settings.log_level)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    port = find_free_port(args.host, args.port, settings.port_attempts)
    if port is None:
        logger.error(
            "Could not find a free port in range %d-%d",
            args.port,
            args.port + settings.port_attempts,
        )
        return 1

    logger.info("Server running at http://localhost:%d", port)
    uvicorn.run(create_app(settings), host=args.host, port=port, log_level=args.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
