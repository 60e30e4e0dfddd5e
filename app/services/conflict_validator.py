"""
Conflict Validator

Decides whether a candidate date range can be booked. Pure functions over
anything exposing ``start_date`` / ``end_date`` (and ``status`` for
bookings), so the API and the client library apply identical semantics:
the server uses ORM rows, the client uses the intervals it fetched.

All intervals are inclusive on both ends, so a range starting on the day
another one ends is a conflict (no same-day turnover).
"""

import calendar
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, Optional

from app.errors import DatesUnavailableError, ValidationError
from app.booking_status import OCCUPYING_STATUSES
from app.services.pricing_service import DAYS_PER_MONTH


class ConflictReason(str, Enum):
    END_BEFORE_START = 'end_before_start'
    START_IN_PAST = 'start_in_past'
    BELOW_MINIMUM_LEASE = 'below_minimum_lease'
    OVERLAPS_BOOKING = 'overlaps_booking'
    OVERLAPS_BLOCK = 'overlaps_block'


class DayStatus(str, Enum):
    AVAILABLE = 'available'
    BOOKED = 'booked'
    BLOCKED = 'blocked'
    PAST = 'past'


CONFLICT_MESSAGES = {
    ConflictReason.END_BEFORE_START: 'End date must not be before start date',
    ConflictReason.START_IN_PAST: 'Start date cannot be in the past',
    ConflictReason.BELOW_MINIMUM_LEASE: 'Selected range is shorter than the minimum lease',
    ConflictReason.OVERLAPS_BOOKING: 'This plot is already booked for the selected dates',
    ConflictReason.OVERLAPS_BLOCK: 'The owner has blocked some of the selected dates',
}

# Reasons that mean "the calendar is taken" rather than "the request is bad"
AVAILABILITY_CONFLICTS = (ConflictReason.OVERLAPS_BOOKING, ConflictReason.OVERLAPS_BLOCK)


def parse_iso_date(value):
    """Parse an ISO-8601 date or timestamp, keeping only the calendar date.

    Time of day and offset are dropped: ``2024-06-01T23:30:00Z`` is June 1.
    Raises ValueError on anything unparseable.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f'Invalid date: {value!r}')

    value = value.strip()
    if len(value) == 10:
        return datetime.strptime(value, '%Y-%m-%d').date()
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    return datetime.fromisoformat(value).date()


def intervals_overlap(a_start, a_end, b_start, b_end):
    """Two inclusive intervals [a,b] and [c,d] overlap iff a <= d and c <= b"""
    return a_start <= b_end and b_start <= a_end


def duration_days(start, end):
    """Inclusive length of a range in days"""
    return (end - start).days + 1


def occupying(bookings):
    """Bookings that hold dates; cancelled and rejected ones are history only"""
    return [b for b in bookings if b.status in OCCUPYING_STATUSES]


def overlapping(intervals, start, end):
    return [i for i in intervals if intervals_overlap(start, end, i.start_date, i.end_date)]


def find_conflict(start, end, bookings: Iterable, blocked_dates: Iterable,
                  today: date, minimum_lease: Optional[int] = None) -> Optional[ConflictReason]:
    """Return the first reason the range cannot be booked, or None.

    ``minimum_lease`` is in months of DAYS_PER_MONTH days; None or 0 skips
    the check. Interval tests are O(1) per booking/block, equivalent to
    scanning every day of the candidate range.
    """
    if start > end:
        return ConflictReason.END_BEFORE_START
    if start < today:
        return ConflictReason.START_IN_PAST
    if minimum_lease and duration_days(start, end) < minimum_lease * DAYS_PER_MONTH:
        return ConflictReason.BELOW_MINIMUM_LEASE
    if overlapping(occupying(bookings), start, end):
        return ConflictReason.OVERLAPS_BOOKING
    if overlapping(blocked_dates, start, end):
        return ConflictReason.OVERLAPS_BLOCK
    return None


def is_bookable(start, end, bookings, blocked_dates, today, minimum_lease=None):
    return find_conflict(start, end, bookings, blocked_dates, today,
                         minimum_lease=minimum_lease) is None


def raise_for_conflict(reason):
    """Turn a conflict reason into the matching API error"""
    if reason is None:
        return
    message = CONFLICT_MESSAGES[reason]
    if reason in AVAILABILITY_CONFLICTS:
        raise DatesUnavailableError(message, details={'reason': reason.value})
    raise ValidationError(message, details={'reason': reason.value})


def day_status(day, bookings, blocked_dates, today):
    """Status of a single calendar day; past wins over booked over blocked"""
    if day < today:
        return DayStatus.PAST
    if any(b.start_date <= day <= b.end_date for b in occupying(bookings)):
        return DayStatus.BOOKED
    if any(b.start_date <= day <= b.end_date for b in blocked_dates):
        return DayStatus.BLOCKED
    return DayStatus.AVAILABLE


def range_is_free(start, end, bookings, blocked_dates):
    """Day-by-day scan used by the calendar when extending a selection"""
    day = start
    while day <= end:
        status = day_status(day, bookings, blocked_dates, date.min)
        if status is not DayStatus.AVAILABLE:
            return False
        day += timedelta(days=1)
    return True


def month_bounds(year, month):
    """First and last day of a calendar month"""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def add_months(year, month, count):
    index = year * 12 + (month - 1) + count
    return index // 12, index % 12 + 1


def calendar_days(year, month, bookings, blocked_dates, today):
    """Per-day status for every day of a month, in order"""
    first, last = month_bounds(year, month)
    days = []
    day = first
    while day <= last:
        days.append((day, day_status(day, bookings, blocked_dates, today)))
        day += timedelta(days=1)
    return days
