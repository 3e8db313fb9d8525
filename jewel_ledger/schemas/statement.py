from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel

from jewel_ledger.models.transaction import TransactionKind


class RunningTotals(BaseModel):
    cash: float = 0.0
    gold: float = 0.0
    silver: float = 0.0


class RunningBalanceRow(BaseModel):
    transaction_id: str
    date: Optional[datetime]
    kind: TransactionKind
    type: str
    bill_no: str
    items: str
    gold_fine: float
    silver_fine: float
    melting: Optional[float]
    rate: float
    amount: float
    cash_received: float
    run_cash: float
    run_gold: float
    run_silver: float


class Statement(BaseModel):
    ledger_id: str
    customer_name: str
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    opening: RunningTotals
    closing: RunningTotals
    rows: List[RunningBalanceRow]
