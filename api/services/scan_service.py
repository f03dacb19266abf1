import os
from decimal import Decimal

from ingest.csv_ingest import filter_candidates, top_candidates
from scanner.dispatch import classify_candidates
from scanner.errors import InputError
from scanner.models import CandidateEntry
from scanner.rpc import DEFAULT_TIMEOUT
from settings.store import load_settings


async def scan_candidates(chain: str, rows: list[tuple[str, Decimal]], min_balance: Decimal = Decimal(0), limit: int = 0):
    endpoints = load_settings(chain).endpoints()
    entries = [CandidateEntry(address=a, balance=b) for a, b in rows]
    candidates = top_candidates(filter_candidates(entries, min_balance), limit)
    try:
        timeout = float(os.getenv("MERTER_RPC_TIMEOUT", DEFAULT_TIMEOUT))
    except ValueError:
        raise InputError("MERTER_RPC_TIMEOUT must be a number of seconds") from None

    contracts, stats = await classify_candidates(candidates, endpoints, timeout=timeout)
    return {
        "chain": chain,
        "candidates": len(candidates),
        "contracts": sorted(contracts.all()),
        "stats": stats.as_dict(),
    }
