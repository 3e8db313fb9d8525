"""
Shop-wide reports: cash in hand, a period summary and a simple demand forecast.

Sales here are non-purchase vouchers paid in cash or on credit; settlement
vouchers are neither sales nor purchases.
"""

import math
from datetime import date, datetime, time
from typing import Dict, List, Sequence

from jewel_ledger.models.expense import Expense
from jewel_ledger.models.ledger import Ledger
from jewel_ledger.models.transaction import Voucher
from jewel_ledger.schemas.report import (
    CashInHand,
    CustomerTotal,
    DailyTotal,
    DayOfWeekDemand,
    DueCustomer,
    Forecast,
    ItemPopularity,
    PeriodReport,
)
from jewel_ledger.services.balance_service import metal_amount, metal_fine_weight
from jewel_ledger.services.statement_service import END_OF_DAY, local_naive
from jewel_ledger.utils.numbers import to_finite_number

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def is_sale(voucher: Voucher) -> bool:
    return voucher.voucher_type != "purchase" and voucher.payment_type in ("cash", "credit")


def is_purchase(voucher: Voucher) -> bool:
    return voucher.voucher_type == "purchase"


class ReportService:
    @staticmethod
    def cash_in_hand(
        ledgers: Sequence[Ledger],
        vouchers: Sequence[Voucher],
        expenses: Sequence[Expense],
    ) -> CashInHand:
        """Billed but unpaid voucher value, less ledger balances and cash expenses."""
        voucher_outstanding = sum(
            sum(to_finite_number(item.amount) for item in v.items)
            + to_finite_number(v.stone_amount)
            + to_finite_number(v.round_off)
            - to_finite_number(v.cash_received)
            for v in vouchers
        )
        ledger_balance = sum(
            to_finite_number(ledger.balances.credit_balance) + to_finite_number(ledger.balances.cash_balance)
            for ledger in ledgers
        )
        cash_expenses = sum(to_finite_number(e.amount) for e in expenses if e.is_cash)

        return CashInHand(
            voucher_outstanding=voucher_outstanding,
            ledger_balance=ledger_balance,
            cash_expenses=cash_expenses,
            cash_in_hand=voucher_outstanding - ledger_balance - cash_expenses,
        )

    @staticmethod
    def build_period_report(
        vouchers: Sequence[Voucher],
        expenses: Sequence[Expense],
        ledgers: Sequence[Ledger],
        from_date: date,
        to_date: date,
    ) -> PeriodReport:
        start = datetime.combine(from_date, time.min)
        end = datetime.combine(to_date, END_OF_DAY)

        def in_range(value) -> bool:
            value = local_naive(value)
            return value is not None and start <= value <= end

        range_vouchers = [v for v in vouchers if in_range(v.effective_date)]
        range_expenses = [e for e in expenses if in_range(e.date or e.created_at)]
        sales = [v for v in range_vouchers if is_sale(v)]
        purchases = [v for v in range_vouchers if is_purchase(v)]
        credit = [v for v in sales if v.payment_type == "credit"]

        total_sales = sum(to_finite_number(v.total) for v in sales)
        gold_sold = sum(metal_fine_weight(v.items, "gold") for v in sales)
        silver_sold = sum(metal_fine_weight(v.items, "silver") for v in sales)

        expenses_by_category: Dict[str, float] = {}
        for expense in range_expenses:
            category = expense.category or "Other"
            expenses_by_category[category] = expenses_by_category.get(category, 0.0) + to_finite_number(expense.amount)

        daily = ReportService.daily_totals(range_vouchers)

        return PeriodReport(
            from_date=from_date,
            to_date=to_date,
            total_sales=total_sales,
            total_purchase=sum(to_finite_number(v.total) for v in purchases),
            gold_sold=gold_sold,
            silver_sold=silver_sold,
            gold_bought=sum(metal_fine_weight(v.items, "gold") for v in purchases),
            total_cash_received=sum(to_finite_number(v.cash_received) for v in sales),
            total_expenses=sum(to_finite_number(e.amount) for e in range_expenses),
            total_credit_value=sum(to_finite_number(v.total) for v in credit),
            credit_voucher_count=len(credit),
            voucher_count=len(range_vouchers),
            sale_count=len(sales),
            top_customers=ReportService.top_customers(range_vouchers),
            daily=daily,
            expenses_by_category=expenses_by_category,
            due_customers=ReportService.due_customers(ledgers),
            forecast=ReportService.build_forecast(sales, daily, total_sales, gold_sold, silver_sold),
        )

    @staticmethod
    def top_customers(vouchers: Sequence[Voucher], limit: int = 5) -> List[CustomerTotal]:
        customers: Dict[str, CustomerTotal] = {}
        for v in vouchers:
            if not v.ledger_id:
                continue
            entry = customers.setdefault(
                v.ledger_id,
                CustomerTotal(ledger_id=v.ledger_id, name=v.customer_name or "Unknown", count=0, amount=0.0),
            )
            entry.count += 1
            entry.amount += to_finite_number(v.total)
        return sorted(customers.values(), key=lambda c: c.amount, reverse=True)[:limit]

    @staticmethod
    def daily_totals(vouchers: Sequence[Voucher]) -> List[DailyTotal]:
        """Per-day voucher counts; amounts and metal only from sales. Newest first."""
        days: Dict[date, DailyTotal] = {}
        for v in vouchers:
            day = local_naive(v.effective_date).date()
            entry = days.setdefault(day, DailyTotal(date=day, count=0, amount=0.0, gold=0.0, silver=0.0))
            entry.count += 1
            if is_sale(v):
                entry.amount += to_finite_number(v.total)
                entry.gold += metal_fine_weight(v.items, "gold")
                entry.silver += metal_fine_weight(v.items, "silver")
        return sorted(days.values(), key=lambda d: d.date, reverse=True)

    @staticmethod
    def due_customers(ledgers: Sequence[Ledger], limit: int = 5) -> List[DueCustomer]:
        due = [ledger for ledger in ledgers if to_finite_number(ledger.balances.cash_balance) > 0]
        due.sort(key=lambda ledger: to_finite_number(ledger.balances.cash_balance), reverse=True)
        return [
            DueCustomer(ledger_id=ledger.id, name=ledger.name, cash_balance=to_finite_number(ledger.balances.cash_balance))
            for ledger in due[:limit]
        ]

    @staticmethod
    def build_forecast(
        sales: Sequence[Voucher],
        daily: Sequence[DailyTotal],
        total_sales: float,
        gold_sold: float,
        silver_sold: float,
    ) -> Forecast:
        by_weekday = {
            index: DayOfWeekDemand(day=name, count=0, amount=0.0, gold=0.0, silver=0.0)
            for index, name in enumerate(DAY_NAMES)
        }
        items: Dict[str, ItemPopularity] = {}
        for v in sales:
            demand = by_weekday[local_naive(v.effective_date).weekday()]
            demand.count += 1
            demand.amount += to_finite_number(v.total)
            demand.gold += metal_fine_weight(v.items, "gold")
            demand.silver += metal_fine_weight(v.items, "silver")

            for item in v.items:
                key = (item.item_name or "Unknown").lower().strip()
                entry = items.setdefault(
                    key,
                    ItemPopularity(
                        name=item.item_name or "Unknown",
                        metal=item.metal_type,
                        count=0,
                        total_weight=0.0,
                        total_amount=0.0,
                    ),
                )
                entry.count += 1
                entry.total_weight += to_finite_number(item.fine_weight)
                entry.total_amount += to_finite_number(item.amount)

        gold_amount = sum(metal_amount(v.items, "gold") for v in sales)
        silver_amount = sum(metal_amount(v.items, "silver") for v in sales)

        total_days = len(daily) or 1
        avg_daily_revenue = total_sales / total_days

        # Trend: average daily revenue of the later half against the earlier half
        chronological = sorted(daily, key=lambda d: d.date)
        half = math.ceil(len(chronological) / 2)
        first_half, second_half = chronological[:half], chronological[half:]
        first_avg = sum(d.amount for d in first_half) / len(first_half) if first_half else 0.0
        second_avg = sum(d.amount for d in second_half) / len(second_half) if second_half else 0.0
        growth_rate = (second_avg - first_avg) / first_avg * 100 if first_avg > 0 else 0.0

        return Forecast(
            day_of_week=sorted(
                (d for d in by_weekday.values() if d.count > 0), key=lambda d: d.amount, reverse=True
            ),
            top_items=sorted(items.values(), key=lambda i: i.count, reverse=True)[:8],
            gold_ratio=gold_amount / total_sales * 100 if total_sales > 0 else 0.0,
            silver_ratio=silver_amount / total_sales * 100 if total_sales > 0 else 0.0,
            avg_daily_revenue=avg_daily_revenue,
            avg_daily_gold=gold_sold / total_days,
            avg_daily_silver=silver_sold / total_days,
            growth_rate=growth_rate,
            projected_next_period=avg_daily_revenue * total_days * (1 + growth_rate / 100),
            total_days=total_days,
        )
