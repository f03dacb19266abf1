"""Concurrent fan-out of eth_getCode lookups with pacing, retry and failover."""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import asdict, dataclass

import httpx

from scanner.contracts import ContractSet
from scanner.errors import TransportError
from scanner.models import (
    CandidateEntry,
    ClassificationOutcome,
    ClassificationRequest,
    Contract,
    EndpointConfig,
    Endpoints,
    Failed,
    NotContract,
)
from scanner.rpc import DEFAULT_TIMEOUT, ClassificationClient
from scanner.timers import DelayAccumulator, shared_accumulator

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 5


@dataclass
class DispatchStats:
    dispatched: int = 0
    retried: int = 0
    contracts: int = 0
    abandoned: int = 0
    dropped: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


class Dispatcher:
    def __init__(self, client: ClassificationClient, accumulator: DelayAccumulator, max_attempts: int = MAX_ATTEMPTS):
        self.client = client
        self.accumulator = accumulator
        self.max_attempts = max_attempts
        self.stats = DispatchStats()

    async def run(self, candidates: Iterable[CandidateEntry], endpoints: Endpoints) -> ContractSet:
        self.stats = DispatchStats()
        contracts = ContractSet()
        pending: dict[asyncio.Task, ClassificationRequest] = {}

        for entry in candidates:
            request = ClassificationRequest(address=entry.address)
            pending[self._submit(request, endpoints.primary)] = request
            self.stats.dispatched += 1

        while pending:
            done, _ = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                request = pending.pop(task)
                outcome = self._outcome(task, request)
                if outcome is None:
                    continue
                follow_up = self._handle(outcome, endpoints, contracts)
                if follow_up is not None:
                    pending[follow_up] = request

        return contracts

    def _submit(self, request: ClassificationRequest, endpoint: EndpointConfig) -> asyncio.Task:
        wait_ms = self.accumulator.reserve(endpoint.latency_ms)
        return asyncio.create_task(self._attempt(request, endpoint.url, wait_ms))

    async def _attempt(self, request: ClassificationRequest, url: str, wait_ms: int) -> ClassificationOutcome:
        if wait_ms:
            await asyncio.sleep(wait_ms / 1000)
        try:
            is_contract = await self.client.classify(request.address, url)
        except TransportError as e:
            return Failed(request, e)
        return Contract(request.address) if is_contract else NotContract(request.address)

    def _outcome(self, task: asyncio.Task, request: ClassificationRequest) -> ClassificationOutcome | None:
        address = request.address
        if task.cancelled():
            logger.error("Task for %s was cancelled, dropping it", address)
            self.stats.dropped += 1
            return None
        exc = task.exception()
        if exc is not None:
            logger.error("Task for %s could not complete, dropping it: %r", address, exc)
            self.stats.dropped += 1
            return None
        return task.result()

    def _handle(self, outcome: ClassificationOutcome, endpoints: Endpoints, contracts: ContractSet) -> asyncio.Task | None:
        if isinstance(outcome, Contract):
            if outcome.address not in contracts:
                self.stats.contracts += 1
            contracts.insert(outcome.address)
            return None
        if isinstance(outcome, NotContract):
            return None

        request = outcome.request
        request.attempt_count += 1
        if request.attempt_count > self.max_attempts:
            logger.warning("Can't see if %s is a contract, skipping: %s", request.address, outcome.error)
            self.stats.abandoned += 1
            return None

        logger.info("Error while checking %s, retrying: %s", request.address, outcome.error)
        self.stats.retried += 1
        return self._submit(request, endpoints.for_attempt(request.attempt_count))


async def classify_candidates(
    candidates: Iterable[CandidateEntry],
    endpoints: Endpoints,
    accumulator: DelayAccumulator | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> tuple[ContractSet, DispatchStats]:
    accumulator = accumulator or shared_accumulator()
    async with httpx.AsyncClient() as http:
        dispatcher = Dispatcher(ClassificationClient(http, timeout=timeout), accumulator)
        contracts = await dispatcher.run(candidates, endpoints)
    return contracts, dispatcher.stats


def run(
    candidates: Iterable[CandidateEntry],
    endpoints: Endpoints,
    accumulator: DelayAccumulator | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> ContractSet:
    contracts, _ = asyncio.run(classify_candidates(candidates, endpoints, accumulator, timeout))
    return contracts
