from fastapi import APIRouter
from jewel_ledger.api.v1.endpoints import auth, ledger, settlements, reports

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(ledger.router, prefix="/ledger", tags=["ledger"])
api_router.include_router(settlements.router, prefix="/settlements", tags=["settlements"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
