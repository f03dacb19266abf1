"""Token-holder csv input.

Expects the etherscan/bscscan holder export layout
(``/exportData?type=tokenholders&contract=<addr>``): a header row, then
address in the first column and balance in the second.
"""

import csv
from collections.abc import Iterable
from decimal import Decimal, InvalidOperation
from pathlib import Path, PureWindowsPath

from scanner.errors import InputError
from scanner.models import CandidateEntry


def is_csv(filename: str) -> bool:
    # PureWindowsPath splits on both separators
    return PureWindowsPath(filename).suffix == ".csv"


def parse_balance(raw: str) -> Decimal:
    cleaned = (raw or "").strip().strip('"').replace(",", "")
    try:
        value = Decimal(cleaned)
    except InvalidOperation as e:
        raise InputError(f"not a number: {raw!r}") from e
    if not value.is_finite():
        raise InputError(f"not a finite number: {raw!r}")
    return value


def read_candidates(path: str | Path, min_balance: Decimal) -> list[CandidateEntry]:
    file_path = Path(path)
    entries = []
    try:
        with file_path.open(newline="", encoding="utf-8-sig") as fh:
            reader = csv.reader(fh)
            next(reader, None)
            for line_no, row in enumerate(reader, start=2):
                if not row or not any(cell.strip() for cell in row):
                    continue
                if len(row) < 2:
                    raise InputError(f"{file_path}:{line_no}: expected address and balance columns")
                try:
                    balance = parse_balance(row[1])
                except InputError as e:
                    raise InputError(f"{file_path}:{line_no}: {e}") from e
                entries.append(CandidateEntry(address=row[0].strip(), balance=balance))
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(f"can't read {file_path}: {e}") from e
    except csv.Error as e:
        raise InputError(f"{file_path}: {e}") from e

    return filter_candidates(entries, min_balance)


def filter_candidates(entries: Iterable[CandidateEntry], min_balance: Decimal) -> list[CandidateEntry]:
    """Keep balances strictly above ``min_balance``, largest first."""
    kept = [e for e in entries if e.balance > min_balance]
    kept.sort(key=lambda e: e.balance, reverse=True)
    return kept


def top_candidates(entries: list[CandidateEntry], limit: int) -> list[CandidateEntry]:
    if limit <= 0:
        return entries
    return entries[:limit]
