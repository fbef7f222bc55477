"""
Run the message board API with uvicorn.
"""

from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

import uvicorn

from board.config import get_settings

logger = logging.getLogger(__name__)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="NXT message board API server")
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Interface to bind (defaults to HOST setting)",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=None,
        help="Port to listen on (defaults to PORT setting)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Reload on source changes (development only)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )

    settings = get_settings()
    host = args.host or settings.host
    port = args.port or settings.port
    logger.info("Server running on %s:%d", host, port)
    uvicorn.run(
        "board.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=args.reload,
        log_level="info",
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
