from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

CalculationSource = Optional[Literal["fine", "amount"]]


class SettlementCalculation(BaseModel):
    """Settlement form state: rate, fine and amount kept consistent."""
    metal_rate: Optional[float] = None
    fine_given: Optional[float] = None
    amount: Optional[float] = None
    calculation_source: CalculationSource = None


class SettlementCreate(BaseModel):
    """Body for creating a settlement on the shop API."""
    ledger_id: str
    metal_type: str
    metal_rate: float
    fine_given: float
    amount: float
    narration: str = ""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SettlementCreateRequest(SettlementCalculation):
    ledger_id: str
    metal_type: Literal["gold", "silver"]
    narration: str = ""
