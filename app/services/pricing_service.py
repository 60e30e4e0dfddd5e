"""
Pricing Calculator

Lease pricing uses a fixed 30-day month: the inclusive day count is divided
by 30 and rounded up. It is not calendar-month aware, so a 31-day July
costs two months. Displayed prices depend on this rule; keep it.
"""

import math
from decimal import Decimal

DAYS_PER_MONTH = 30


def calculate_cost(start, end, price_per_month):
    """Calculate lease length and total for an inclusive date range.

    Returns a dict with ``days``, ``months`` and ``total`` (Decimal).
    """
    if end < start:
        raise ValueError('End date must not be before start date')

    days = (end - start).days + 1
    months = math.ceil(days / DAYS_PER_MONTH)
    total = Decimal(str(price_per_month)) * months

    return {
        'days': days,
        'months': months,
        'monthly_rate': Decimal(str(price_per_month)),
        'total': total,
    }
