from datetime import date
from typing import List, Optional, Tuple

from jewel_ledger.clients.remote_api import RemoteApi
from jewel_ledger.core.exceptions import TransactionNotFoundError
from jewel_ledger.core.logger import logger
from jewel_ledger.models.ledger import Ledger
from jewel_ledger.models.transaction import (
    Settlement,
    Transaction,
    Voucher,
    bill_number,
    classify,
    kind_label,
    parse_transactions,
)
from jewel_ledger.schemas.balance import VoucherBalanceDetails
from jewel_ledger.schemas.ledger import LedgerView, TransactionShare, TransactionView
from jewel_ledger.services.balance_service import BalanceService, transaction_total
from jewel_ledger.utils.numbers import to_finite_number
from jewel_ledger.utils.share import settlement_share_text, voucher_share_text, whatsapp_share_url


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def transaction_view(txn: Transaction) -> TransactionView:
    kind = classify(txn)
    is_voucher = isinstance(txn, Voucher)
    return TransactionView(
        id=txn.id,
        date=txn.effective_date,
        kind=kind,
        type=kind_label(txn, kind),
        bill_no=bill_number(txn, kind),
        payment_type=txn.payment_type,
        total=transaction_total(txn),
        cash_received=to_finite_number(txn.cash_received) if is_voucher else 0.0,
        settlement=BalanceService.extract_settlement_properties(txn) if kind.is_settlement else None,
    )


class LedgerService:
    """Reads a ledger snapshot from the shop API and forwards ledger writes.

    Every write is followed by a fresh read; balances are never patched
    locally.
    """

    def __init__(self, api: RemoteApi):
        self.api = api

    def get_snapshot(
        self,
        ledger_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Tuple[Ledger, List[Transaction]]:
        data = self.api.ledger.get_transactions(ledger_id, _iso(start_date), _iso(end_date))
        raw_ledger = data.get("ledger") or self.api.ledger.get_one(ledger_id)
        ledger = Ledger.model_validate(raw_ledger)
        transactions = parse_transactions(data.get("transactions"))
        logger.info(f"Fetched ledger {ledger_id} with {len(transactions)} transactions")
        return ledger, transactions

    def get_view(
        self,
        ledger_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> LedgerView:
        ledger, transactions = self.get_snapshot(ledger_id, start_date, end_date)
        return LedgerView(
            ledger=ledger,
            transactions=[transaction_view(txn) for txn in transactions],
            summary=BalanceService.summarize_ledger(ledger, transactions),
        )

    def _find(self, ledger_id: str, transaction_id: str) -> Tuple[Ledger, Transaction]:
        ledger, transactions = self.get_snapshot(ledger_id)
        for txn in transactions:
            if txn.id == transaction_id:
                return ledger, txn
        raise TransactionNotFoundError(transaction_id)

    def recalculate(self, ledger_id: str) -> LedgerView:
        self.api.ledger.recalculate_balance(ledger_id)
        logger.info(f"Recalculated balance of ledger {ledger_id}")
        return self.get_view(ledger_id)

    def delete_all_vouchers(self, ledger_id: str) -> LedgerView:
        self.api.ledger.delete_all_vouchers(ledger_id)
        logger.info(f"Deleted all vouchers of ledger {ledger_id}")
        return self.get_view(ledger_id)

    def delete_transaction(self, ledger_id: str, transaction_id: str) -> LedgerView:
        _, txn = self._find(ledger_id, transaction_id)

        # Settlement vouchers live in the voucher collection
        if isinstance(txn, Settlement):
            self.api.settlement.delete(transaction_id)
        else:
            self.api.voucher.delete(transaction_id)
        logger.info(f"Deleted {classify(txn).value} {transaction_id} from ledger {ledger_id}")
        return self.get_view(ledger_id)

    def voucher_balance(self, ledger_id: str, voucher_id: str) -> VoucherBalanceDetails:
        ledger = Ledger.model_validate(self.api.ledger.get_one(ledger_id))
        voucher = Voucher.model_validate(self.api.voucher.get_one(voucher_id))
        return BalanceService.get_voucher_balance_details(voucher, ledger)

    def share_transaction(self, ledger_id: str, transaction_id: str) -> TransactionShare:
        ledger, txn = self._find(ledger_id, transaction_id)

        kind = classify(txn)
        if kind.is_settlement:
            amount = BalanceService.extract_settlement_properties(txn).amount
            text = settlement_share_text(ledger.name, amount)
        else:
            total = BalanceService.get_voucher_totals(txn).voucher_total
            text = voucher_share_text(ledger.name, txn.voucher_number, total)
        return TransactionShare(text=text, share_url=whatsapp_share_url(text))
