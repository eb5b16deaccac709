from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from clients.quote_client import QuoteClient
from config import config


def main(argv: Sequence[str] | None = None) -> int:
    settings = config()
    parser = argparse.ArgumentParser(description="Fetch the dollar quote from the quote server and save it to a file.")
    parser.add_argument("--url", default=settings.server_url)
    parser.add_argument("--output", type=Path, default=settings.output_file)
    parser.add_argument("--timeout-ms", type=int, default=settings.client_timeout_ms)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    client = QuoteClient(url=args.url, output_path=args.output, timeout=args.timeout_ms / 1000)
    return client.run()


if __name__ == "__main__":
    raise SystemExit(main())
