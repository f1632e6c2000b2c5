"""
Report Builder

DESIGN DECISION: Reports are computed from the ledger's aggregations only.
They never read the record store directly, so user isolation stays the
ledger's responsibility.

These are the category, monthly, daily and trend views of the reports
screens, as plain data the presentation layer formats itself.
"""

import calendar
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Optional

from expense_tracker.ledger import ExpenseLedger, sum_amounts
from expense_tracker.models.records import Expense
from expense_tracker.models.report import (
    CategoryShare,
    DailySummary,
    MonthlySummary,
    MonthlyTrend,
    MonthTrendPoint,
)

CENT = Decimal("0.01")
ZERO = Decimal("0")


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move (year, month) by `delta` months, negative to go back."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


class ReportBuilder:
    """
    Builds report views for one ledger.

    GUARANTEES:
    - Only the ledger user's expenses are counted
    - Empty periods give zero totals, never errors
    """

    def __init__(
        self,
        ledger: ExpenseLedger,
        today: Optional[Callable[[], date]] = None,
        trend_months: int = 6,
        recent_limit: int = 20,
    ):
        """
        Args:
            ledger: Ledger of the user being reported on
            today: Clock; defaults to the ledger's
            trend_months: Default span of monthly_trend()
            recent_limit: Default length of recent_expenses()
        """
        self._ledger = ledger
        self._today = today or ledger.today
        self._trend_months = trend_months
        self._recent_limit = recent_limit

    def recent_expenses(self, limit: Optional[int] = None) -> list[Expense]:
        """Newest expenses first, `recent_limit` of them unless told otherwise."""
        return self._ledger.get_recent_expenses(
            self._recent_limit if limit is None else limit
        )

    def category_breakdown(self) -> list[CategoryShare]:
        """
        Per-category totals with their share of the overall total.

        Ranked by total, largest first; ties by category id.
        """
        totals = self._ledger.get_category_wise_expenses()
        overall = self._ledger.get_total_expenses()

        shares = []
        for category, total in totals.items():
            percentage = float(total / overall * 100) if overall > 0 else 0.0
            shares.append(CategoryShare(
                category=category,
                total=total,
                percentage=max(percentage, 0.0),
            ))

        shares.sort(key=lambda s: (-s.total, s.category.id))
        return shares

    def top_categories(self, limit: int = 3) -> list[CategoryShare]:
        if limit <= 0:
            return []
        return self.category_breakdown()[:limit]

    def monthly_summary(self, year: int, month: int) -> MonthlySummary:
        expenses = self._ledger.get_expenses_by_month(year, month)
        total = sum_amounts(expenses)
        count = len(expenses)

        days = self._days_counted(year, month)
        average_daily = quantize_money(total / days) if days else ZERO
        average_expense = quantize_money(total / count) if count else ZERO

        # max/min keep the first of equal amounts
        highest = max(expenses, key=lambda e: e.amount) if expenses else None
        lowest = min(expenses, key=lambda e: e.amount) if expenses else None

        return MonthlySummary(
            year=year,
            month=month,
            total=total,
            transaction_count=count,
            average_expense=average_expense,
            average_daily=average_daily,
            highest=highest,
            lowest=lowest,
        )

    def _days_counted(self, year: int, month: int) -> int:
        """
        Days to average over: elapsed days for the current month, all days
        for past months, none for future months.
        """
        today = self._today()
        if (year, month) == (today.year, today.month):
            return today.day
        if (year, month) > (today.year, today.month):
            return 0
        return calendar.monthrange(year, month)[1]

    def daily_summary(self, year: int, month: int) -> DailySummary:
        daily = self._ledger.get_daily_expenses(year, month)
        total = sum(daily.values(), ZERO)

        highest_day = None
        highest_amount = ZERO
        for day, amount in daily.items():
            if highest_day is None or amount > highest_amount:
                highest_day, highest_amount = day, amount

        return DailySummary(
            year=year,
            month=month,
            daily_totals=daily,
            total=total,
            average_per_day=quantize_money(total / len(daily)) if daily else ZERO,
            highest_day=highest_day,
            highest_amount=highest_amount,
        )

    def monthly_trend(self, months: Optional[int] = None) -> MonthlyTrend:
        """
        Totals for the last `months` calendar months, ending with the
        current one, oldest first. Defaults to `trend_months`.
        """
        if months is None:
            months = self._trend_months
        if months < 1:
            raise ValueError(f"months must be at least 1, got {months}")

        today = self._today()
        points = []
        for offset in range(months - 1, -1, -1):
            year, month = shift_month(today.year, today.month, -offset)
            expenses = self._ledger.get_expenses_by_month(year, month)
            total = sum_amounts(expenses)
            days_in_month = calendar.monthrange(year, month)[1]

            points.append(MonthTrendPoint(
                year=year,
                month=month,
                label=f"{calendar.month_name[month].upper()} {year}",
                total=total,
                transaction_count=len(expenses),
                average_per_day=quantize_money(total / days_in_month),
            ))

        grand_total = sum((p.total for p in points), ZERO)
        return MonthlyTrend(
            points=points,
            grand_total=grand_total,
            average_per_month=quantize_money(grand_total / months),
        )
