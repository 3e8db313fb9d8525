"""
Customer ledger as returned by the shop API.

Sign convention: a positive cash, gold or silver balance on the record is the
shop's liability, i.e. the customer is owed. Convert with
``SignedBalance.to_perspective`` instead of negating at call sites.

The API has moved from a single ``amount`` balance to a cash/credit split.
Both shapes are accepted; when the split fields are present
``cash_balance + credit_balance`` is the amount balance.
"""

from typing import Annotated, Optional

from pydantic import Field

from jewel_ledger.models.base import ApiModel, ApiRecord, EmptyIfNone, Number


class LedgerBalances(ApiModel):
    cash_balance: Number = None
    credit_balance: Number = None
    amount: Number = None
    gold_fine_weight: Number = None
    silver_fine_weight: Number = None


class OpeningBalance(ApiModel):
    amount: Number = None
    gold_fine_weight: Number = None
    silver_fine_weight: Number = None


class Ledger(ApiRecord):
    name: str = ""
    phone_number: Optional[str] = None
    ledger_type: str = "regular"  # regular | gst
    balances: Annotated[LedgerBalances, EmptyIfNone] = Field(default_factory=LedgerBalances)
    opening_balance: Annotated[OpeningBalance, EmptyIfNone] = Field(default_factory=OpeningBalance)

    @property
    def is_gst(self) -> bool:
        return self.ledger_type == "gst"
