from jewel_ledger.clients.remote_api import RemoteApi
from jewel_ledger.core.exceptions import SettlementValidationError
from jewel_ledger.core.logger import logger
from jewel_ledger.models.ledger import Ledger
from jewel_ledger.schemas.ledger import LedgerView
from jewel_ledger.schemas.settlement import SettlementCalculation, SettlementCreateRequest
from jewel_ledger.services.ledger_service import LedgerService
from jewel_ledger.services.settlement_calculator import SettlementCalculator
from jewel_ledger.utils.numbers import to_finite_number


class SettlementService:
    @staticmethod
    def calculate(state: SettlementCalculation) -> SettlementCalculation:
        return SettlementCalculator.from_state(state).state()

    @staticmethod
    def create(api: RemoteApi, settlement_in: SettlementCreateRequest) -> LedgerView:
        """
        Validate and forward a settlement, then return the refreshed ledger.

        The fine given cannot exceed the ledger's fine balance of that metal.
        """
        calculator = SettlementCalculator.from_state(settlement_in)
        if not calculator.fine_given and not calculator.amount:
            raise SettlementValidationError("Please enter either Fine Given or Settlement Amount")

        ledger = Ledger.model_validate(api.ledger.get_one(settlement_in.ledger_id))
        if settlement_in.metal_type == "gold":
            available = to_finite_number(ledger.balances.gold_fine_weight)
        else:
            available = to_finite_number(ledger.balances.silver_fine_weight)
        if to_finite_number(calculator.fine_given) > available:
            raise SettlementValidationError(
                "Insufficient balance for this settlement",
                details={"available": available, "fine_given": calculator.fine_given},
            )

        payload = calculator.to_payload(settlement_in.ledger_id, settlement_in.metal_type, settlement_in.narration)
        api.settlement.create(payload.model_dump(by_alias=True))
        logger.info(f"Created {settlement_in.metal_type} settlement of {payload.amount} for ledger {settlement_in.ledger_id}")

        return LedgerService(api).get_view(settlement_in.ledger_id)
