"""
Ledger transactions: vouchers and settlements.

A voucher whose payment type is one of the settlement payment types is
economically a settlement even though the API stores it as a voucher.
``classify`` resolves that once; callers switch on the returned kind.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, Iterable, List, Optional, Union

from pydantic import BeforeValidator, Field

from jewel_ledger.models.base import ApiModel, ApiRecord, ListIfNone, Number, OptionalDatetime

SETTLEMENT_PAYMENT_TYPES = frozenset(
    {"add_cash", "add_gold", "add_silver", "money_to_gold", "money_to_silver"}
)


def _ref_id(value: Any) -> Any:
    # Populated references arrive as {"_id": ..., "name": ...}
    if isinstance(value, dict):
        return value.get("_id") or value.get("id")
    return value


RefId = Annotated[Optional[str], BeforeValidator(_ref_id)]


class TransactionKind(str, Enum):
    SALE = "sale"
    PURCHASE = "purchase"
    SETTLEMENT = "settlement"
    SETTLEMENT_VOUCHER = "settlement_voucher"

    @property
    def is_settlement(self) -> bool:
        return self in (TransactionKind.SETTLEMENT, TransactionKind.SETTLEMENT_VOUCHER)


class VoucherItem(ApiModel):
    item_name: Optional[str] = None
    metal_type: Optional[str] = None  # gold | silver
    pieces: Number = None
    gross_weight: Number = None
    less_weight: Number = None
    net_weight: Number = None
    melting: Number = None
    wastage: Number = None
    fine_weight: Number = None
    labour_rate: Number = None
    amount: Number = None


class OldBalance(ApiModel):
    total_amount: Number = None
    gold_fine_weight: Number = None
    silver_fine_weight: Number = None


class BalanceSnapshot(ApiModel):
    old_balance: Optional[OldBalance] = None


class LegacyOldBalance(ApiModel):
    amount: Number = None


class TransactionBase(ApiRecord):
    date: OptionalDatetime = None
    ledger_id: RefId = None
    payment_type: Optional[str] = None
    narration: Optional[str] = None

    @property
    def effective_date(self) -> Optional[datetime]:
        return self.date or self.created_at


class Voucher(TransactionBase):
    type: str = "voucher"
    voucher_number: Optional[str] = None
    customer_name: Optional[str] = None
    items: Annotated[List[VoucherItem], ListIfNone] = Field(default_factory=list)
    stone_amount: Number = None
    fine_amount: Number = None
    round_off: Number = None
    total: Number = None
    amount: Number = None
    cash_received: Number = None
    voucher_type: Optional[str] = None  # sale (default) | purchase
    invoice_type: Optional[str] = None  # normal | gst
    gold_rate: Number = None
    silver_rate: Number = None
    balance_snapshot: Optional[BalanceSnapshot] = None
    old_balance: Optional[LegacyOldBalance] = None


class Settlement(TransactionBase):
    """Record from the settlement collection."""

    type: str = "settlement"
    metal_type: Optional[str] = None
    metal_rate: Number = None
    fine_given: Number = None
    amount: Number = None


Transaction = Union[Voucher, Settlement]


def parse_transaction(raw: Dict[str, Any]) -> Transaction:
    if raw.get("type") == "settlement":
        return Settlement.model_validate(raw)
    return Voucher.model_validate(raw)


def parse_transactions(raws: Optional[Iterable[Dict[str, Any]]]) -> List[Transaction]:
    return [parse_transaction(raw) for raw in raws or []]


def classify(txn: Transaction) -> TransactionKind:
    if isinstance(txn, Settlement):
        return TransactionKind.SETTLEMENT
    if txn.payment_type in SETTLEMENT_PAYMENT_TYPES:
        return TransactionKind.SETTLEMENT_VOUCHER
    if txn.voucher_type == "purchase":
        return TransactionKind.PURCHASE
    return TransactionKind.SALE


def kind_label(txn: Transaction, kind: Optional[TransactionKind] = None) -> str:
    kind = kind or classify(txn)
    if kind.is_settlement:
        return "Settlement"
    if kind is TransactionKind.PURCHASE:
        return "Purchase"
    if isinstance(txn, Voucher) and txn.invoice_type == "gst":
        return "GST Sale"
    return "Sale"


def bill_number(txn: Transaction, kind: Optional[TransactionKind] = None, default: str = "-") -> str:
    kind = kind or classify(txn)
    if kind.is_settlement:
        return f"SET-{txn.id[:6].upper()}"
    return txn.voucher_number or default
