"""CLI for merter."""

import argparse
import asyncio
import logging
import os
import sys
from decimal import Decimal, InvalidOperation

import httpx
from dotenv import load_dotenv

from ingest.block_ingest import block_candidates
from ingest.csv_ingest import is_csv, read_candidates, top_candidates
from scanner.dispatch import classify_candidates
from scanner.errors import InputError, TransportError
from scanner.rpc import DEFAULT_TIMEOUT
from settings.store import load_settings
from settings.wizard import run_setup

logger = logging.getLogger("scanner.cli")


def _decimal(raw: str) -> Decimal:
    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise argparse.ArgumentTypeError("--balance option must be a number") from None
    if not value.is_finite():
        raise argparse.ArgumentTypeError("--balance option must be a number")
    return value


def _non_negative(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError("--limit option must be a positive number") from None
    if value < 0:
        raise argparse.ArgumentTypeError("--limit option must be a positive number")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="merter",
        description="Find contracts among token holders or in the latest block.",
    )
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument(
        "-c",
        "--csv",
        metavar="CSV",
        help="Token holder csv exported from etherscan/bscscan (/exportData?type=tokenholders&contract=<addr>)",
    )
    mode.add_argument(
        "-f",
        "--find",
        action="store_true",
        help="Classify every sender and recipient of the latest block (balance filter not applied)",
    )
    mode.add_argument("--config", action="store_true", help="Set Json-RPC endpoints, latencies and api keys")

    chain = parser.add_mutually_exclusive_group(required=True)
    chain.add_argument("--eth", dest="chain", action="store_const", const="eth", help="Use the ethereum settings")
    chain.add_argument("--bsc", dest="chain", action="store_const", const="bsc", help="Use the binance smart chain settings")

    parser.add_argument("-b", "--balance", type=_decimal, default=Decimal(0), help="Minimum balance, in the csv's token")
    parser.add_argument("-l", "--limit", type=_non_negative, default=0, help="Only classify the N largest holders (0 = all)")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


async def _scan(args, timeout: float):
    endpoints = load_settings(args.chain).endpoints()
    if args.csv:
        if not is_csv(args.csv):
            raise InputError(f"{args.csv} is not a csv file")
        candidates = top_candidates(read_candidates(args.csv, args.balance), args.limit)
    else:
        async with httpx.AsyncClient() as http:
            candidates = top_candidates(await block_candidates(http, endpoints, timeout), args.limit)

    logger.info("Classifying %s addresses", len(candidates))
    return await classify_candidates(candidates, endpoints, timeout=timeout)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    load_dotenv()
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.config:
        run_setup(args.chain)
        return 0

    try:
        timeout = args.timeout or float(os.getenv("MERTER_RPC_TIMEOUT", DEFAULT_TIMEOUT))
    except ValueError:
        parser.error("MERTER_RPC_TIMEOUT must be a number of seconds")
    if args.csv:
        logger.info("Running in csv mode")
    else:
        logger.info("Running in find mode")

    try:
        contracts, stats = asyncio.run(_scan(args, timeout))
    except (InputError, TransportError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for address, flag in contracts.items():
        print(f"{address}, {str(flag).lower()}")
    logger.info("Done: %s", ", ".join(f"{k}={v}" for k, v in stats.as_dict().items()))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
