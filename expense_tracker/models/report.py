"""
Report Models

Read-only results built by the ReportBuilder. Amounts are Decimal,
shares of a total are float percentages.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from expense_tracker.models.records import Category, Expense


class CategoryShare(BaseModel):
    """One row of the category breakdown."""

    category: Category
    total: Decimal
    percentage: float = Field(
        ...,
        ge=0.0,
        description="Share of the overall total, 0-100"
    )


class MonthlySummary(BaseModel):
    """Statistics for one calendar month."""

    year: int
    month: int = Field(..., ge=1, le=12)
    total: Decimal
    transaction_count: int = Field(..., ge=0)
    average_expense: Decimal
    average_daily: Decimal
    highest: Optional[Expense] = None
    lowest: Optional[Expense] = None


class DailySummary(BaseModel):
    """Per-day totals for one month with their statistics."""

    year: int
    month: int = Field(..., ge=1, le=12)
    daily_totals: dict[str, Decimal] = Field(
        default_factory=dict,
        description="YYYY-MM-DD -> total, ascending"
    )
    total: Decimal
    average_per_day: Decimal
    highest_day: Optional[str] = None
    highest_amount: Decimal = Decimal("0")


class MonthTrendPoint(BaseModel):
    """One month in a spending trend."""

    year: int
    month: int = Field(..., ge=1, le=12)
    label: str
    total: Decimal
    transaction_count: int
    average_per_day: Decimal


class MonthlyTrend(BaseModel):
    """Spending over consecutive months, oldest first."""

    points: list[MonthTrendPoint] = Field(default_factory=list)
    grand_total: Decimal
    average_per_month: Decimal
