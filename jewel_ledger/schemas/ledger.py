from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from jewel_ledger.models.ledger import Ledger
from jewel_ledger.models.transaction import TransactionKind
from jewel_ledger.schemas.balance import LedgerSummary, SettlementProperties


class TransactionView(BaseModel):
    id: str
    date: Optional[datetime]
    kind: TransactionKind
    type: str
    bill_no: str
    payment_type: Optional[str] = None
    total: float
    cash_received: float
    settlement: Optional[SettlementProperties] = None


class LedgerView(BaseModel):
    ledger: Ledger
    transactions: List[TransactionView]
    summary: LedgerSummary


class TransactionShare(BaseModel):
    text: str
    share_url: str
