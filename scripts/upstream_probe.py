# flake8: noqa E402
# Run via uv to load project deps, e.g.:
# uv run scripts/upstream_probe.py --timeout-ms 500
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from time import perf_counter

# Ensure the src directory is importable when the script is invoked via uv/python directly.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from config import config
from domain.deadline import Deadline
from domain.errors import QuoteError
from services.upstream_fetcher import UpstreamFetcher


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch the USD-BRL bid once, straight from the provider.")
    parser.add_argument("--url", default=config().upstream_url, help="Provider endpoint.")
    parser.add_argument(
        "--timeout-ms",
        type=int,
        default=config().fetch_timeout_ms,
        help="Fetch budget in milliseconds (default: server fetch budget).",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    fetcher = UpstreamFetcher(url=args.url, timeout=args.timeout_ms / 1000)

    started = perf_counter()
    payload: dict[str, object] = {"url": args.url, "timeout_ms": args.timeout_ms}
    try:
        quote = fetcher.fetch(Deadline.unbounded())
        payload["bid"] = quote.bid
    except QuoteError as exc:
        payload["error"] = type(exc).__name__
        payload["message"] = str(exc)
    payload["elapsed_ms"] = round((perf_counter() - started) * 1000, 1)
    print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
