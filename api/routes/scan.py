from decimal import Decimal

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from api.services.scan_service import scan_candidates
from scanner.errors import InputError

router = APIRouter()


class Candidate(BaseModel):
    address: str
    balance: Decimal


class ScanRequest(BaseModel):
    chain: str = "eth"
    min_balance: Decimal = Decimal(0)
    limit: int = Field(default=0, ge=0)
    candidates: list[Candidate] = Field(default_factory=list)


@router.post("")
async def scan(body: ScanRequest):
    try:
        return await scan_candidates(
            body.chain,
            [(c.address, c.balance) for c in body.candidates],
            min_balance=body.min_balance,
            limit=body.limit,
        )
    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e))
