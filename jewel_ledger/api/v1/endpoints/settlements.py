from fastapi import APIRouter, Depends, status

from jewel_ledger.clients.remote_api import RemoteApi
from jewel_ledger.core.auth import get_remote_api
from jewel_ledger.schemas.ledger import LedgerView
from jewel_ledger.schemas.settlement import SettlementCalculation, SettlementCreateRequest
from jewel_ledger.services.settlement_service import SettlementService

router = APIRouter()


@router.post("/calculate", response_model=SettlementCalculation)
def calculate_settlement(state: SettlementCalculation):
    """Derive amount or fine weight from whichever field was edited last"""
    return SettlementService.calculate(state)


@router.post("", response_model=LedgerView, status_code=status.HTTP_201_CREATED)
def create_settlement(settlement_in: SettlementCreateRequest, api: RemoteApi = Depends(get_remote_api)):
    return SettlementService.create(api, settlement_in)
