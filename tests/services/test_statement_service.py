from datetime import date

import pytest

from jewel_ledger.core.exceptions import NothingToExportError
from jewel_ledger.models.ledger import Ledger
from jewel_ledger.models.transaction import TransactionKind, Voucher, parse_transactions
from jewel_ledger.schemas.statement import RunningTotals
from jewel_ledger.services.balance_service import BalanceService
from jewel_ledger.services.statement_service import StatementService


def test_single_sale_closes_at_live_balance():
    sale = Voucher.model_validate(
        {"_id": "s1", "date": "2024-01-02T00:00:00", "total": 1000, "items": [{"metalType": "gold", "fineWeight": 2}]}
    )
    # A ledger whose balance was accumulated from that one sale
    ledger = Ledger.model_validate({"name": "A", "balances": {"amount": 1000, "goldFineWeight": 2}})

    rows = StatementService.replay(RunningTotals(), [sale])

    assert len(rows) == 1
    assert rows[0].run_cash == 1000
    assert rows[0].run_gold == 2
    assert rows[0].run_cash == BalanceService.get_ledger_amount_balance(ledger)
    assert rows[0].run_gold == ledger.balances.gold_fine_weight


def test_replay_in_date_order(ledger_doc, transaction_docs):
    ledger = Ledger.model_validate(ledger_doc)

    statement = StatementService.build_statement(ledger, parse_transactions(transaction_docs))

    assert [row.bill_no for row in statement.rows] == ["P-7", "V-101", "SET-SETV00", "SET-ABCDEF"]
    purchase, sale, settlement_voucher, settlement = statement.rows

    assert (purchase.run_cash, purchase.run_gold) == (-3000, 0.5)
    assert (sale.run_cash, sale.run_gold) == (-2000, 3.5)
    # money_to_gold with a zero total falls back to the normalized amount and fine
    assert settlement_voucher.run_cash == pytest.approx(-800)
    assert settlement_voucher.run_gold == pytest.approx(3.3)
    # Settlement records leave the running totals as they are
    assert settlement.run_cash == settlement_voucher.run_cash
    assert settlement.run_gold == settlement_voucher.run_gold
    assert statement.closing.cash == pytest.approx(-800)


def test_row_details(ledger_doc, transaction_docs):
    ledger = Ledger.model_validate(ledger_doc)

    rows = StatementService.build_statement(ledger, parse_transactions(transaction_docs)).rows
    sale, settlement_voucher = rows[1], rows[2]

    assert sale.kind is TransactionKind.SALE
    assert sale.items == "Chain, Ring"
    assert sale.gold_fine == 3
    assert sale.melting == 91.6
    assert sale.rate == 6000
    assert settlement_voucher.type == "Settlement"
    assert settlement_voucher.items == "money to_gold"
    assert settlement_voucher.melting is None


def test_opening_balance_is_the_starting_point():
    ledger = Ledger.model_validate(
        {"name": "A", "openingBalance": {"amount": 500, "goldFineWeight": 1, "silverFineWeight": 10}}
    )
    sale = Voucher.model_validate({"date": "2024-01-02T00:00:00", "total": 100, "items": [{"metalType": "silver", "fineWeight": 5}]})

    statement = StatementService.build_statement(ledger, [sale])

    assert statement.opening == RunningTotals(cash=500, gold=1, silver=10)
    assert statement.closing == RunningTotals(cash=600, gold=1, silver=15)
    assert StatementService.closing_totals(statement.opening, [sale]) == statement.closing


def test_window_is_inclusive_to_end_of_day():
    late = Voucher.model_validate({"_id": "late", "date": "2024-03-10T23:59:59"})
    early = Voucher.model_validate({"_id": "early", "date": "2024-03-04T00:00:00"})
    before = Voucher.model_validate({"_id": "before", "date": "2024-03-03T23:59:59"})

    selected = StatementService.filter_by_window([late, early, before], date(2024, 3, 4), date(2024, 3, 10))

    assert [t.id for t in selected] == ["late", "early"]


def test_window_compares_in_shop_local_time():
    # 20:00 UTC on the 10th is already the 11th in the shop
    utc_evening = Voucher.model_validate({"_id": "utc", "date": "2024-03-10T20:00:00Z"})

    assert StatementService.filter_by_window([utc_evening], date(2024, 3, 1), date(2024, 3, 10)) == []
    assert len(StatementService.filter_by_window([utc_evening], date(2024, 3, 11), date(2024, 3, 11))) == 1


def test_undated_transactions_only_without_window():
    undated = Voucher.model_validate({"_id": "u"})

    assert StatementService.filter_by_window([undated]) == [undated]
    assert StatementService.filter_by_window([undated], from_date=date(2024, 1, 1)) == []


def test_sort_is_stable_for_same_instant():
    first = Voucher.model_validate({"_id": "a", "date": "2024-03-01T10:00:00"})
    second = Voucher.model_validate({"_id": "b", "date": "2024-03-01T10:00:00"})
    earlier = Voucher.model_validate({"_id": "c", "date": "2024-02-01T10:00:00"})

    ordered = StatementService.sort_chronologically([first, second, earlier])

    assert [t.id for t in ordered] == ["c", "a", "b"]


def test_created_at_stands_in_for_missing_date():
    dated = Voucher.model_validate({"_id": "d", "date": "2024-03-02T00:00:00"})
    created = Voucher.model_validate({"_id": "c", "createdAt": "2024-03-01T08:00:00"})

    assert [t.id for t in StatementService.sort_chronologically([dated, created])] == ["c", "d"]


def test_empty_window_cannot_be_exported(transaction_docs):
    with pytest.raises(NothingToExportError):
        StatementService.select(parse_transactions(transaction_docs), date(2023, 1, 1), date(2023, 1, 31))


def test_replay_does_not_mutate_opening(transaction_docs):
    opening = RunningTotals(cash=10)
    transactions = parse_transactions(transaction_docs)

    StatementService.replay(opening, transactions)

    assert opening == RunningTotals(cash=10)
    assert StatementService.replay(opening, transactions) == StatementService.replay(opening, transactions)


def test_voucher_without_total_is_priced_from_its_lines():
    sale = Voucher.model_validate(
        {"_id": "s1", "date": "2024-01-02T00:00:00", "stoneAmount": 10, "items": [{"amount": 100}, {"amount": 50}]}
    )
    ledger = Ledger.model_validate({"name": "A", "balances": {"amount": 160}})

    statement = StatementService.build_statement(ledger, [sale])

    assert statement.rows[0].amount == 160
    assert statement.closing.cash == 160
    assert statement.closing.cash == BalanceService.get_ledger_amount_balance(ledger)
