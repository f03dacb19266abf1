"""Latest-block address discovery ("find mode").

Pulls the newest block with full transaction objects and turns every
sender/recipient into a candidate for classification.
"""

import logging
from decimal import Decimal

import httpx

from scanner.errors import TransportError
from scanner.models import CandidateEntry, Endpoints
from scanner.rpc import DEFAULT_TIMEOUT, rpc_call

logger = logging.getLogger(__name__)


def h2i(x):
    if x is None:
        return 0
    if isinstance(x, int):
        return x
    return int(x, 16)


async def rpc_call_any(client: httpx.AsyncClient, rpc_urls: list[str], method: str, params: list, timeout: float = DEFAULT_TIMEOUT):
    last_err = None
    for rpc_url in rpc_urls:
        if not rpc_url:
            continue
        try:
            return await rpc_call(client, rpc_url, method, params, timeout=timeout), rpc_url
        except TransportError as e:
            logger.info("%s failed on %s: %s", method, rpc_url, e.message)
            last_err = e
    raise TransportError(", ".join(u for u in rpc_urls if u), f"{method} failed across providers: {last_err}")


def block_addresses(block: dict) -> list[str]:
    seen = {}
    for tx in block.get("transactions", []):
        if not isinstance(tx, dict):
            continue
        for key in ("from", "to"):
            a = (tx.get(key) or "").lower()
            # "to" is null for contract creations
            if a:
                seen.setdefault(a, None)
    return list(seen)


async def latest_block_addresses(client: httpx.AsyncClient, endpoints: Endpoints, timeout: float = DEFAULT_TIMEOUT) -> list[str]:
    block, rpc_used = await rpc_call_any(
        client,
        [endpoints.primary.url, endpoints.secondary.url],
        "eth_getBlockByNumber",
        ["latest", True],
        timeout=timeout,
    )
    if not block:
        return []
    addresses = block_addresses(block)
    logger.info("[find] block=%s tx=%s addresses=%s rpc=%s", h2i(block.get("number")), len(block.get("transactions", [])), len(addresses), rpc_used)
    return addresses


async def block_candidates(client: httpx.AsyncClient, endpoints: Endpoints, timeout: float = DEFAULT_TIMEOUT) -> list[CandidateEntry]:
    # balances are not looked up in find mode, so no threshold applies
    return [CandidateEntry(address=a, balance=Decimal(0)) for a in await latest_block_addresses(client, endpoints, timeout)]
