"""
Chronological ledger statement with a running balance.

Transactions in the requested window are sorted by date and replayed from the
ledger's opening balance. When the window covers every transaction, the
closing balance equals the ledger's live balance.
"""

from datetime import date, datetime, time
from functools import reduce
from typing import List, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo

from jewel_ledger.core.config import settings
from jewel_ledger.core.exceptions import NothingToExportError
from jewel_ledger.models.ledger import Ledger
from jewel_ledger.models.transaction import (
    Transaction,
    TransactionKind,
    Voucher,
    bill_number,
    classify,
    kind_label,
)
from jewel_ledger.schemas.statement import RunningBalanceRow, RunningTotals, Statement
from jewel_ledger.services.balance_service import BalanceService, metal_fine_weight, transaction_total
from jewel_ledger.utils.numbers import to_finite_number

END_OF_DAY = time(23, 59, 59, 999000)


def local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Shop-local wall-clock time, so aware and naive dates compare."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(ZoneInfo(settings.TIMEZONE)).replace(tzinfo=None)


def _sort_key(txn: Transaction) -> datetime:
    return local_naive(txn.effective_date) or datetime.min


def _transaction_fines(txn: Transaction) -> Tuple[float, float]:
    items = txn.items if isinstance(txn, Voucher) else []
    return metal_fine_weight(items, "gold"), metal_fine_weight(items, "silver")


def _apply(totals: RunningTotals, txn: Transaction) -> RunningTotals:
    """Running totals after one transaction. Never mutates its inputs."""
    kind = classify(txn)
    total = transaction_total(txn)
    gold_fine, silver_fine = _transaction_fines(txn)
    cash, gold, silver = totals.cash, totals.gold, totals.silver

    if kind is TransactionKind.PURCHASE:
        # Shop pays cash and takes metal in
        cash -= to_finite_number(txn.cash_received)
        gold += gold_fine
        silver += silver_fine
    elif kind is TransactionKind.SETTLEMENT_VOUCHER:
        settled = BalanceService.extract_settlement_properties(txn)
        cash_delta = total or settled.amount
        fine_delta = to_finite_number(settled.fine_given)
        payment_type = txn.payment_type
        if payment_type == "add_cash":
            cash += cash_delta
        elif payment_type == "add_gold":
            gold += gold_fine or fine_delta
        elif payment_type == "add_silver":
            silver += silver_fine or fine_delta
        elif payment_type == "money_to_gold":
            cash += cash_delta
            gold -= gold_fine or fine_delta
        elif payment_type == "money_to_silver":
            cash += cash_delta
            silver -= silver_fine or fine_delta
    elif kind is TransactionKind.SALE:
        cash += total
        gold += gold_fine
        silver += silver_fine
    # Settlement-collection records carry no settlement payment type and
    # leave the running totals as they are

    return RunningTotals(cash=cash, gold=gold, silver=silver)


def opening_totals(ledger: Ledger) -> RunningTotals:
    opening = ledger.opening_balance
    return RunningTotals(
        cash=to_finite_number(opening.amount),
        gold=to_finite_number(opening.gold_fine_weight),
        silver=to_finite_number(opening.silver_fine_weight),
    )


def summarize_items(txn: Transaction, kind: TransactionKind) -> str:
    items = txn.items if isinstance(txn, Voucher) else []
    names = ", ".join(item.item_name for item in items if item.item_name)
    if names:
        return names
    if kind.is_settlement and txn.payment_type:
        # Only the first underscore, "money to_gold"
        return txn.payment_type.replace("_", " ", 1)
    return "-"


def _display_rate(txn: Transaction) -> float:
    if not isinstance(txn, Voucher) or not txn.items:
        return 0.0
    if txn.items[0].metal_type == "gold":
        return to_finite_number(txn.gold_rate)
    return to_finite_number(txn.silver_rate)


def _row(txn: Transaction, totals: RunningTotals) -> RunningBalanceRow:
    kind = classify(txn)
    gold_fine, silver_fine = _transaction_fines(txn)
    is_voucher = isinstance(txn, Voucher)
    return RunningBalanceRow(
        transaction_id=txn.id,
        date=txn.effective_date,
        kind=kind,
        type=kind_label(txn, kind),
        bill_no=bill_number(txn, kind),
        items=summarize_items(txn, kind),
        gold_fine=gold_fine,
        silver_fine=silver_fine,
        melting=to_finite_number(txn.items[0].melting) if is_voucher and txn.items else None,
        rate=_display_rate(txn),
        amount=transaction_total(txn),
        cash_received=to_finite_number(txn.cash_received) if is_voucher else 0.0,
        run_cash=totals.cash,
        run_gold=totals.gold,
        run_silver=totals.silver,
    )


class StatementService:
    @staticmethod
    def filter_by_window(
        transactions: Sequence[Transaction],
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> List[Transaction]:
        """Transactions dated within [from_date 00:00, to_date 23:59:59.999]."""
        start = datetime.combine(from_date, time.min) if from_date else None
        end = datetime.combine(to_date, END_OF_DAY) if to_date else None

        selected = []
        for txn in transactions:
            when = local_naive(txn.effective_date)
            if (start or end) and when is None:
                continue
            if start and when < start:
                continue
            if end and when > end:
                continue
            selected.append(txn)
        return selected

    @staticmethod
    def sort_chronologically(transactions: Sequence[Transaction]) -> List[Transaction]:
        # sorted() is stable: same-instant entries keep their source order
        return sorted(transactions, key=_sort_key)

    @staticmethod
    def select(
        transactions: Sequence[Transaction],
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> List[Transaction]:
        """Window and sort; an empty selection cannot be exported."""
        selected = StatementService.filter_by_window(transactions, from_date, to_date)
        if not selected:
            raise NothingToExportError()
        return StatementService.sort_chronologically(selected)

    @staticmethod
    def replay(opening: RunningTotals, transactions: Sequence[Transaction]) -> List[RunningBalanceRow]:
        """Fold the transactions, in the given order, into running-balance rows."""

        def step(acc: Tuple[RunningTotals, List[RunningBalanceRow]], txn: Transaction):
            totals, rows = acc
            after = _apply(totals, txn)
            return after, rows + [_row(txn, after)]

        _, rows = reduce(step, transactions, (opening, []))
        return rows

    @staticmethod
    def closing_totals(opening: RunningTotals, transactions: Sequence[Transaction]) -> RunningTotals:
        return reduce(_apply, transactions, opening)

    @staticmethod
    def build_statement(
        ledger: Ledger,
        transactions: Sequence[Transaction],
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> Statement:
        selected = StatementService.select(transactions, from_date, to_date)
        opening = opening_totals(ledger)
        rows = StatementService.replay(opening, selected)
        last = rows[-1]

        return Statement(
            ledger_id=ledger.id,
            customer_name=ledger.name or "Customer",
            from_date=from_date,
            to_date=to_date,
            opening=opening,
            closing=RunningTotals(cash=last.run_cash, gold=last.run_gold, silver=last.run_silver),
            rows=rows,
        )
