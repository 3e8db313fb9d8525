from typing import Dict, Iterable, List, Optional

from jewel_ledger.models.ledger import Ledger
from jewel_ledger.models.transaction import (
    Settlement,
    Transaction,
    TransactionKind,
    Voucher,
    VoucherItem,
    classify,
)
from jewel_ledger.schemas.balance import (
    LedgerSummary,
    Perspective,
    SettlementProperties,
    SignedBalance,
    VoucherBalanceDetails,
    VoucherTotals,
)
from jewel_ledger.utils.numbers import parse_finite, pick_first_finite, to_finite_number


def metal_fine_weight(items: Iterable[VoucherItem], metal: str) -> float:
    return sum(to_finite_number(item.fine_weight) for item in items if item.metal_type == metal)


def metal_amount(items: Iterable[VoucherItem], metal: str) -> float:
    return sum(to_finite_number(item.amount) for item in items if item.metal_type == metal)


class BalanceService:
    @staticmethod
    def get_ledger_amount_balance(ledger: Optional[Ledger]) -> float:
        """
        Amount balance of a ledger.

        cash_balance + credit_balance when either split field is present,
        otherwise the legacy single ``amount`` field.
        """
        if ledger is None:
            return 0.0
        balances = ledger.balances
        if parse_finite(balances.cash_balance) is not None or parse_finite(balances.credit_balance) is not None:
            return to_finite_number(balances.cash_balance) + to_finite_number(balances.credit_balance)
        return to_finite_number(balances.amount)

    @staticmethod
    def ledger_balance(ledger: Optional[Ledger]) -> SignedBalance:
        """Live ledger balance as recorded, i.e. from the shop's liability side."""
        if ledger is None:
            return SignedBalance()
        return SignedBalance(
            cash=BalanceService.get_ledger_amount_balance(ledger),
            gold=to_finite_number(ledger.balances.gold_fine_weight),
            silver=to_finite_number(ledger.balances.silver_fine_weight),
            perspective=Perspective.SHOP_LIABILITY,
        )

    @staticmethod
    def get_voucher_totals(voucher: Voucher) -> VoucherTotals:
        items = voucher.items or []
        amount_from_items = sum(to_finite_number(item.amount) for item in items)
        computed = (
            amount_from_items
            + to_finite_number(voucher.stone_amount)
            + to_finite_number(voucher.fine_amount)
        )
        # An explicit total replaces the computed one, it is never added to it
        voucher_total = to_finite_number(voucher.total, computed)

        return VoucherTotals(
            voucher_total=voucher_total,
            gold_fine_weight=metal_fine_weight(items, "gold"),
            silver_fine_weight=metal_fine_weight(items, "silver"),
            receipt_gross=sum(to_finite_number(item.fine_weight) for item in items),
        )

    @staticmethod
    def get_voucher_balance_details(voucher: Voucher, ledger: Optional[Ledger]) -> VoucherBalanceDetails:
        """
        Balance before and after a voucher.

        The old side prefers the snapshot recorded when the voucher was
        created, then the legacy ``old_balance`` field, and finally derives it
        from the live ledger minus this voucher's contribution. The current
        side is always the live ledger, so two vouchers previewed one after
        the other both show today's standing.
        """
        totals = BalanceService.get_voucher_totals(voucher)
        balances = ledger.balances if ledger else None

        snapshot = voucher.balance_snapshot.old_balance if voucher.balance_snapshot else None
        legacy = voucher.old_balance

        old_amount = pick_first_finite(
            snapshot.total_amount if snapshot else None,
            legacy.amount if legacy else None,
            to_finite_number(balances.amount if balances else None) - totals.voucher_total,
        )
        old_gold = pick_first_finite(
            snapshot.gold_fine_weight if snapshot else None,
            to_finite_number(balances.gold_fine_weight if balances else None) - totals.gold_fine_weight,
        )
        old_silver = pick_first_finite(
            snapshot.silver_fine_weight if snapshot else None,
            to_finite_number(balances.silver_fine_weight if balances else None) - totals.silver_fine_weight,
        )

        current = BalanceService.ledger_balance(ledger)

        return VoucherBalanceDetails(
            old_amount=old_amount,
            old_gold=old_gold,
            old_silver=old_silver,
            current_amount=current.cash,
            current_gold=current.gold,
            current_silver=current.silver,
            voucher_total=totals.voucher_total,
            receipt_gross=totals.receipt_gross,
        )

    @staticmethod
    def extract_settlement_properties(txn: Transaction) -> SettlementProperties:
        """
        Uniform (metal, rate, fine, amount) view of a settlement.

        Settlement vouchers overload ``cash_received``: it is a fine weight
        for add_gold/add_silver and a cash amount for money_to_gold/
        money_to_silver.
        """
        if isinstance(txn, Settlement):
            return SettlementProperties(
                metal_type=txn.metal_type,
                metal_rate=parse_finite(txn.metal_rate),
                fine_given=parse_finite(txn.fine_given),
                amount=to_finite_number(txn.amount),
            )

        cash_received = to_finite_number(txn.cash_received)
        gold_rate = to_finite_number(txn.gold_rate)
        silver_rate = to_finite_number(txn.silver_rate)
        payment_type = txn.payment_type

        if payment_type == "add_cash":
            return SettlementProperties(metal_type="Cash", metal_rate=None, fine_given=None, amount=cash_received)
        if payment_type in ("add_gold", "add_silver"):
            rate = gold_rate if payment_type == "add_gold" else silver_rate
            return SettlementProperties(
                metal_type=payment_type[len("add_"):],
                metal_rate=rate,
                fine_given=cash_received,
                amount=cash_received * rate,
            )
        if payment_type in ("money_to_gold", "money_to_silver"):
            rate = gold_rate if payment_type == "money_to_gold" else silver_rate
            return SettlementProperties(
                metal_type=payment_type[len("money_to_"):],
                metal_rate=rate,
                fine_given=cash_received / rate if rate else 0.0,
                amount=cash_received,
            )
        return SettlementProperties(metal_type="Unknown", metal_rate=0.0, fine_given=0.0, amount=cash_received)

    @staticmethod
    def count_by_kind(transactions: Iterable[Transaction]) -> Dict[str, int]:
        counts = {"total": 0, "sales": 0, "purchases": 0, "settlements": 0}
        for txn in transactions:
            kind = classify(txn)
            counts["total"] += 1
            if kind.is_settlement:
                counts["settlements"] += 1
            elif kind is TransactionKind.PURCHASE:
                counts["purchases"] += 1
            else:
                counts["sales"] += 1
        return counts

    @staticmethod
    def summarize_ledger(ledger: Ledger, transactions: List[Transaction]) -> LedgerSummary:
        vouchers = [txn for txn in transactions if isinstance(txn, Voucher)]
        credit = [v for v in vouchers if v.payment_type == "credit"]
        cash = [v for v in vouchers if v.payment_type == "cash"]

        total_credit = sum(to_finite_number(v.total) for v in credit)
        total_cash = sum(to_finite_number(v.total) for v in cash)
        balance = BalanceService.ledger_balance(ledger)

        return LedgerSummary(
            total_credit=total_credit,
            total_cash=total_cash,
            total_amount=total_cash + total_credit,
            gold_credit_amount=sum(metal_amount(v.items, "gold") for v in credit),
            silver_credit_amount=sum(metal_amount(v.items, "silver") for v in credit),
            gold_credit_fine_weight=sum(metal_fine_weight(v.items, "gold") for v in credit),
            silver_credit_fine_weight=sum(metal_fine_weight(v.items, "silver") for v in credit),
            amount_balance=balance.cash,
            balance=balance,
            customer_balance=balance.to_perspective(Perspective.CUSTOMER_LIABILITY),
            counts=BalanceService.count_by_kind(transactions),
        )


def transaction_total(txn: Transaction) -> float:
    """Bill total of a transaction. A voucher with neither total nor amount is priced from its lines."""
    if not isinstance(txn, Voucher):
        return to_finite_number(txn.amount)
    if parse_finite(txn.total) is None and parse_finite(txn.amount) is None:
        return BalanceService.get_voucher_totals(txn).voucher_total
    return to_finite_number(txn.total or txn.amount)
