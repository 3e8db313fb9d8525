from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel


class CashInHand(BaseModel):
    voucher_outstanding: float
    ledger_balance: float
    cash_expenses: float
    cash_in_hand: float


class CustomerTotal(BaseModel):
    ledger_id: str
    name: str
    count: int
    amount: float


class DailyTotal(BaseModel):
    date: date
    count: int
    amount: float
    gold: float
    silver: float


class DueCustomer(BaseModel):
    ledger_id: str
    name: str
    cash_balance: float


class DayOfWeekDemand(BaseModel):
    day: str
    count: int
    amount: float
    gold: float
    silver: float


class ItemPopularity(BaseModel):
    name: str
    metal: Optional[str]
    count: int
    total_weight: float
    total_amount: float


class Forecast(BaseModel):
    day_of_week: List[DayOfWeekDemand]
    top_items: List[ItemPopularity]
    gold_ratio: float
    silver_ratio: float
    avg_daily_revenue: float
    avg_daily_gold: float
    avg_daily_silver: float
    growth_rate: float
    projected_next_period: float
    total_days: int


class PeriodReport(BaseModel):
    from_date: date
    to_date: date
    total_sales: float
    total_purchase: float
    gold_sold: float
    silver_sold: float
    gold_bought: float
    total_cash_received: float
    total_expenses: float
    total_credit_value: float
    credit_voucher_count: int
    voucher_count: int
    sale_count: int
    top_customers: List[CustomerTotal]
    daily: List[DailyTotal]
    expenses_by_category: Dict[str, float]
    due_customers: List[DueCustomer]
    forecast: Forecast
