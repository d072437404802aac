"""Credits payloads.

The credits endpoint returns a summary with URLs to filtered views
(income items, expense items, transactions, transfers, members), each of
which is a paginated list.
"""

from __future__ import annotations

from pydantic import Field

from atlas_api.models.base import Payload


class Credits(Payload):
    current_balance: int = 0
    credit_checked: bool = False
    max_daily_credits: int = 0
    estimated_daily_income: int = 0
    estimated_daily_expenditure: int = 0
    estimated_daily_balance: int = 0
    calculation_time: str | None = None
    estimated_runout_seconds: int | None = None
    past_day_measurement_results: int = 0
    past_day_credits_spent: int = 0
    last_date_debited: str | None = None
    last_date_credited: str | None = None
    income_items: str | None = None
    expense_items: str | None = None
    transactions: str | None = None


class IncomeItem(Payload):
    date: str | None = None
    amount: int = 0
    kind: str = Field(default="", alias="type")
    probe: int | None = None


class ExpenseItem(Payload):
    date: str | None = None
    amount: int = 0
    kind: str = Field(default="", alias="type")
    measurement: int | None = None


class Transaction(Payload):
    id: int
    timestamp: str | None = None
    amount: int = 0
    description: str = ""


class Transfer(Payload):
    id: int | None = None
    recipient: str | None = None
    amount: int = 0
    timestamp: str | None = None


class Member(Payload):
    email: str | None = None
    uuid: str | None = None
    is_active: bool = False
