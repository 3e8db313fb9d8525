from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel


class Perspective(str, Enum):
    """Whose liability a positive balance represents."""
    SHOP_LIABILITY = "shop_liability"
    CUSTOMER_LIABILITY = "customer_liability"


class SignedBalance(BaseModel):
    cash: float = 0.0
    gold: float = 0.0
    silver: float = 0.0
    perspective: Perspective = Perspective.SHOP_LIABILITY

    def to_perspective(self, target: Perspective) -> "SignedBalance":
        if target == self.perspective:
            return self.model_copy()
        return SignedBalance(
            cash=-self.cash,
            gold=-self.gold,
            silver=-self.silver,
            perspective=target,
        )


class VoucherTotals(BaseModel):
    voucher_total: float
    gold_fine_weight: float
    silver_fine_weight: float
    receipt_gross: float


class VoucherBalanceDetails(BaseModel):
    old_amount: float
    old_gold: float
    old_silver: float
    current_amount: float
    current_gold: float
    current_silver: float
    voucher_total: float
    receipt_gross: float


class SettlementProperties(BaseModel):
    metal_type: Optional[str]
    metal_rate: Optional[float]
    fine_given: Optional[float]
    amount: float


class LedgerSummary(BaseModel):
    total_credit: float
    total_cash: float
    total_amount: float
    gold_credit_amount: float
    silver_credit_amount: float
    gold_credit_fine_weight: float
    silver_credit_fine_weight: float
    amount_balance: float
    balance: SignedBalance
    customer_balance: SignedBalance
    counts: Dict[str, int]
