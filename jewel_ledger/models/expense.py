from typing import Optional

from jewel_ledger.models.base import ApiRecord, Number, OptionalDatetime


class Expense(ApiRecord):
    date: OptionalDatetime = None
    category: Optional[str] = None
    amount: Number = None
    payment_method: Optional[str] = None  # cash | online
    description: Optional[str] = None

    @property
    def is_cash(self) -> bool:
        return self.payment_method == "cash"
