"""Dashboard aggregation over the mirrored payments."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from paytrack.domain.entities import Payment, PaymentStatus
from paytrack.utils.amount_parser import coerce_amount
from paytrack.utils.date_parser import month_range, to_date

UPCOMING_LIMIT = 5


@dataclass(frozen=True)
class DashboardSummary:
    """Derived payment statistics.

    total_paid covers every paid payment regardless of date. paid_this_month
    is the subset whose expected date falls in the current calendar month.
    """

    total_outstanding: Decimal
    total_paid: Decimal
    paid_this_month: Decimal
    outstanding_count: int
    paid_count: int
    upcoming: tuple[Payment, ...]


def is_paid(payment: Payment) -> bool:
    """Only the paid status counts as resolved; anything else is outstanding."""
    return payment.status == PaymentStatus.PAID.value


def summarize_payments(
    payments: Sequence[Payment], today: Optional[date] = None
) -> DashboardSummary:
    """Compute dashboard totals and the upcoming list.

    Args:
        payments: Payments in delivery order (expected date, newest first)
        today: Reference date for the current month (defaults to date.today())

    Returns:
        DashboardSummary for the payments
    """
    month_start, month_end = month_range(today)

    total_outstanding = Decimal(0)
    total_paid = Decimal(0)
    paid_this_month = Decimal(0)
    outstanding: list[Payment] = []
    paid_count = 0

    for payment in payments:
        amount = coerce_amount(payment.amount)
        if is_paid(payment):
            paid_count += 1
            total_paid += amount
            expected = to_date(payment.expected_date)
            if expected is not None and month_start <= expected <= month_end:
                paid_this_month += amount
        else:
            total_outstanding += amount
            outstanding.append(payment)

    return DashboardSummary(
        total_outstanding=total_outstanding,
        total_paid=total_paid,
        paid_this_month=paid_this_month,
        outstanding_count=len(outstanding),
        paid_count=paid_count,
        # Inherits delivery order; no re-sorting here
        upcoming=tuple(outstanding[:UPCOMING_LIMIT]),
    )


class DashboardAggregator:
    """Memoizes summarize_payments on the payments sequence and the date."""

    def __init__(self):
        self._payments: Optional[Sequence[Payment]] = None
        self._today: Optional[date] = None
        self._summary: Optional[DashboardSummary] = None
        self.computations = 0

    def summary(self, payments: Sequence[Payment], today: Optional[date] = None) -> DashboardSummary:
        today = today or date.today()
        if self._summary is None or payments is not self._payments or today != self._today:
            self._summary = summarize_payments(payments, today=today)
            self._payments = payments
            self._today = today
            self.computations += 1
        return self._summary
