from dataclasses import dataclass
from decimal import Decimal

from scanner.errors import TransportError


@dataclass(frozen=True)
class CandidateEntry:
    address: str
    balance: Decimal


@dataclass
class ClassificationRequest:
    address: str
    attempt_count: int = 0


@dataclass(frozen=True)
class EndpointConfig:
    url: str
    latency_ms: int


@dataclass(frozen=True)
class Endpoints:
    primary: EndpointConfig
    secondary: EndpointConfig

    def for_attempt(self, attempt_count: int) -> EndpointConfig:
        # even -> primary, odd -> secondary, regardless of which one failed last
        return self.primary if attempt_count % 2 == 0 else self.secondary


@dataclass(frozen=True)
class Contract:
    address: str


@dataclass(frozen=True)
class NotContract:
    address: str


@dataclass(frozen=True)
class Failed:
    request: ClassificationRequest
    error: TransportError


ClassificationOutcome = Contract | NotContract | Failed
