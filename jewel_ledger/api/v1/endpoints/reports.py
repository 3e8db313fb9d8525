from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends

from jewel_ledger.clients.remote_api import RemoteApi
from jewel_ledger.core.auth import get_remote_api
from jewel_ledger.core.config import settings
from jewel_ledger.models.expense import Expense
from jewel_ledger.models.ledger import Ledger
from jewel_ledger.models.transaction import Voucher
from jewel_ledger.schemas.report import CashInHand, PeriodReport
from jewel_ledger.services.report_service import ReportService

router = APIRouter()


@router.get("/summary", response_model=PeriodReport)
def get_period_report(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    api: RemoteApi = Depends(get_remote_api),
):
    """Sales, purchases, expenses and forecast for a period (last 30 days by default)"""
    end_date = end_date or date.today()
    start_date = start_date or end_date - timedelta(days=30)
    page = {"limit": settings.REPORT_FETCH_LIMIT}

    vouchers = api.report.get_vouchers({**page, "dateFrom": start_date.isoformat(), "dateTo": end_date.isoformat()})
    expenses = api.report.get_expenses(page)
    ledgers = api.report.get_ledgers(page)
    return ReportService.build_period_report(
        [Voucher.model_validate(v) for v in vouchers],
        [Expense.model_validate(e) for e in expenses],
        [Ledger.model_validate(ledger) for ledger in ledgers],
        start_date,
        end_date,
    )


@router.get("/cash-in-hand", response_model=CashInHand)
def get_cash_in_hand(api: RemoteApi = Depends(get_remote_api)):
    ledgers = [Ledger.model_validate(ledger) for ledger in api.ledger.get_all()]
    vouchers = [Voucher.model_validate(v) for v in api.voucher.get_all()]
    expenses = [Expense.model_validate(e) for e in api.expense.get_all()]
    return ReportService.cash_in_hand(ledgers, vouchers, expenses)
