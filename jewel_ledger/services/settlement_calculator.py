"""
Settlement entry calculator.

Rate, fine weight and amount depend on each other through
``amount = rate * fine``. The field the user edited last decides which of
the other two is derived, so the two derived fields never chase each other.
"""

from typing import Optional

from jewel_ledger.schemas.settlement import CalculationSource, SettlementCalculation, SettlementCreate
from jewel_ledger.utils.numbers import parse_finite, to_finite_number


class SettlementCalculator:
    def __init__(
        self,
        metal_rate: Optional[float] = None,
        fine_given: Optional[float] = None,
        amount: Optional[float] = None,
        calculation_source: CalculationSource = None,
    ):
        self.metal_rate = parse_finite(metal_rate)
        self.fine_given = parse_finite(fine_given)
        self.amount = parse_finite(amount)
        self.calculation_source = calculation_source

    @classmethod
    def from_state(cls, state: SettlementCalculation) -> "SettlementCalculator":
        calculator = cls(state.metal_rate, state.fine_given, state.amount, state.calculation_source)
        calculator.recalculate()
        return calculator

    def set_metal_rate(self, value) -> None:
        self.metal_rate = parse_finite(value)
        self.recalculate()

    def set_fine_given(self, value) -> None:
        self.fine_given = parse_finite(value)
        self.calculation_source = "fine"
        self.recalculate()

    def set_amount(self, value) -> None:
        self.amount = parse_finite(value)
        self.calculation_source = "amount"
        self.recalculate()

    def recalculate(self) -> None:
        rate = to_finite_number(self.metal_rate)
        fine = to_finite_number(self.fine_given)
        amount = to_finite_number(self.amount)

        if self.calculation_source in (None, "fine"):
            calculated = rate * fine
            self.amount = calculated if calculated > 0 else None
        elif self.calculation_source == "amount" and rate > 0:
            calculated = amount / rate
            self.fine_given = calculated if calculated > 0 else None
        # Amount-driven with no rate: nothing to divide by, fine stays as is

    def state(self) -> SettlementCalculation:
        return SettlementCalculation(
            metal_rate=self.metal_rate,
            fine_given=self.fine_given,
            amount=self.amount,
            calculation_source=self.calculation_source,
        )

    def to_payload(self, ledger_id: str, metal_type: str, narration: str = "") -> SettlementCreate:
        return SettlementCreate(
            ledger_id=ledger_id,
            metal_type=metal_type,
            metal_rate=to_finite_number(self.metal_rate),
            fine_given=to_finite_number(self.fine_given),
            amount=to_finite_number(self.amount),
            narration=narration,
        )
