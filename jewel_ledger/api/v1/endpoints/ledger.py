from datetime import date
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Response

from jewel_ledger.clients.remote_api import RemoteApi
from jewel_ledger.core.auth import get_remote_api
from jewel_ledger.core.logger import logger
from jewel_ledger.schemas.balance import VoucherBalanceDetails
from jewel_ledger.schemas.ledger import LedgerView, TransactionShare
from jewel_ledger.schemas.statement import Statement
from jewel_ledger.services.export_service import ExportService, ShopInfo
from jewel_ledger.services.ledger_service import LedgerService
from jewel_ledger.services.statement_service import StatementService
from jewel_ledger.utils.share import export_filename, statement_share_text, whatsapp_share_url

router = APIRouter()


def _shop_info(api: RemoteApi) -> ShopInfo:
    api.auth.get_me()
    return ShopInfo(shop_name=api.session.shop_name, phone_number=api.session.phone_number)


def _share_url(ledger, transactions, start_date, end_date) -> str:
    closing = StatementService.build_statement(ledger, transactions, start_date, end_date).closing
    return whatsapp_share_url(statement_share_text(ledger.name, closing.cash))


def _file_response(content, media_type: str, filename: str, share_url: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}",
            "X-Share-Url": share_url,
        },
    )


@router.get("/{ledger_id}", response_model=LedgerView)
def get_ledger(
    ledger_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    api: RemoteApi = Depends(get_remote_api),
):
    """Ledger with classified transactions and balance summary"""
    return LedgerService(api).get_view(ledger_id, start_date, end_date)


@router.post("/{ledger_id}/recalculate", response_model=LedgerView)
def recalculate_balance(ledger_id: str, api: RemoteApi = Depends(get_remote_api)):
    return LedgerService(api).recalculate(ledger_id)


@router.delete("/{ledger_id}/vouchers", response_model=LedgerView)
def delete_all_vouchers(ledger_id: str, api: RemoteApi = Depends(get_remote_api)):
    return LedgerService(api).delete_all_vouchers(ledger_id)


@router.delete("/{ledger_id}/transactions/{transaction_id}", response_model=LedgerView)
def delete_transaction(ledger_id: str, transaction_id: str, api: RemoteApi = Depends(get_remote_api)):
    """Delete a voucher or settlement, then return the refreshed ledger"""
    return LedgerService(api).delete_transaction(ledger_id, transaction_id)


@router.get("/{ledger_id}/transactions/{transaction_id}/share", response_model=TransactionShare)
def share_transaction(ledger_id: str, transaction_id: str, api: RemoteApi = Depends(get_remote_api)):
    return LedgerService(api).share_transaction(ledger_id, transaction_id)


@router.get("/{ledger_id}/vouchers/{voucher_id}/balance", response_model=VoucherBalanceDetails)
def get_voucher_balance(ledger_id: str, voucher_id: str, api: RemoteApi = Depends(get_remote_api)):
    """Balance before and after a voucher"""
    return LedgerService(api).voucher_balance(ledger_id, voucher_id)


@router.get("/{ledger_id}/statement", response_model=Statement)
def get_statement(
    ledger_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    api: RemoteApi = Depends(get_remote_api),
):
    """Running-balance statement for the period"""
    ledger, transactions = LedgerService(api).get_snapshot(ledger_id)
    return StatementService.build_statement(ledger, transactions, start_date, end_date)


@router.get("/{ledger_id}/export/csv")
def export_csv(
    ledger_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    api: RemoteApi = Depends(get_remote_api),
):
    ledger, transactions = LedgerService(api).get_snapshot(ledger_id)
    content = ExportService.build_csv(ledger, transactions, _shop_info(api), start_date, end_date)
    filename = export_filename("Ledger", ledger.name, "csv")
    logger.info(f"Exported CSV {filename}")

    share_url = _share_url(ledger, transactions, start_date, end_date)
    return _file_response(content, "text/csv; charset=utf-8", filename, share_url)


@router.get("/{ledger_id}/export/pdf")
def export_pdf(
    ledger_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    api: RemoteApi = Depends(get_remote_api),
):
    ledger, transactions = LedgerService(api).get_snapshot(ledger_id)
    content = ExportService.build_pdf(ledger, transactions, _shop_info(api), start_date, end_date)
    filename = export_filename("Statement", ledger.name, "pdf")
    logger.info(f"Exported PDF {filename}")

    share_url = _share_url(ledger, transactions, start_date, end_date)
    return _file_response(content, "application/pdf", filename, share_url)
