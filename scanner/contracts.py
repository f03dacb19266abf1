from collections.abc import Iterator


class ContractSet:
    """Addresses confirmed as contracts during one run.

    The flag value is reserved for per-contract metadata and is always False
    for now. Insertion is idempotent and nothing is ever removed.
    """

    def __init__(self):
        self._contracts: dict[str, bool] = {}

    def insert(self, address: str, flag: bool = False) -> None:
        self._contracts[address] = self._contracts.get(address, False) or flag

    def all(self) -> Iterator[str]:
        yield from self._contracts

    def items(self) -> Iterator[tuple[str, bool]]:
        yield from self._contracts.items()

    def __contains__(self, address: object) -> bool:
        return address in self._contracts

    def __len__(self) -> int:
        return len(self._contracts)

    def __repr__(self) -> str:
        return f"ContractSet({sorted(self._contracts)!r})"
