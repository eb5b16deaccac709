from __future__ import annotations

import argparse
import logging
from typing import Sequence

import uvicorn

from config import config

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> None:
    settings = config()
    parser = argparse.ArgumentParser(description="Serve the USD-BRL quote on GET /cotacao.")
    parser.add_argument("--host", default=settings.server_host)
    parser.add_argument("--port", type=int, default=settings.server_port)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    logger.info("Starting quote server on %s:%d", args.host, args.port)
    uvicorn.run("api.api:app", host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
