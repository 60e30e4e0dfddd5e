"""
Calendar session for one plot.

A session owns the availability cache for the plot being viewed, the
renter's in-progress date selection, and the guard that keeps a second
mutation from being sent while one is still in flight. Local checks are a
fast path only; the server re-validates every mutation.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from typing import Optional

from app.errors import DatesUnavailableError, ValidationError
from app.client.availability_cache import AvailabilityCache, CacheEntry
from app.services.conflict_validator import (
    DayStatus,
    add_months,
    calendar_days,
    day_status,
    find_conflict,
    month_bounds,
    raise_for_conflict,
    range_is_free,
)
from app.services.pricing_service import calculate_cost

logger = logging.getLogger(__name__)


class MutationInFlightError(Exception):
    """A booking or block request for this session has not answered yet"""


@dataclass
class SelectionRange:
    start: Optional[date] = None
    end: Optional[date] = None

    @property
    def is_complete(self):
        return self.start is not None and self.end is not None


class PlotCalendarSession:
    """Availability view, selection and mutations for one plot"""

    def __init__(self, client, plot_id, today=None, cache=None):
        self.client = client
        self.plot_id = plot_id
        self.cache = cache if cache is not None else AvailabilityCache()
        self.selection = SelectionRange()
        self.plot = None
        self._today = today
        self._mutation_lock = threading.Lock()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def today(self):
        return self._today or date.today()

    @property
    def mutation_in_flight(self):
        return self._mutation_lock.locked()

    def close(self):
        """End of session: nothing cached outlives the page"""
        self.cache.invalidate_all()
        self.clear_selection()

    # Reads

    def month_availability(self, year, month) -> CacheEntry:
        """Cached intervals for the two-month window starting at year/month"""
        entry = self.cache.get(self.plot_id, year, month)
        if entry is not None:
            return entry

        window_start, _ = month_bounds(year, month)
        _, window_end = month_bounds(*add_months(year, month, 1))
        data = self.client.get_availability(self.plot_id, window_start, window_end)

        entry = self.cache.new_entry(data['bookings'], data['blocked_dates'], plot=data['plot'])
        self.cache.set(self.plot_id, year, month, entry)
        if data['plot']:
            self.plot = data['plot']
        return entry

    def intervals_between(self, start, end):
        """Bookings and blocks touching [start, end], across as many months as needed"""
        bookings, blocked_dates = {}, {}
        year, month = start.year, start.month
        while (year, month) <= (end.year, end.month):
            entry = self.month_availability(year, month)
            bookings.update((b.id, b) for b in entry.bookings)
            blocked_dates.update((b.id, b) for b in entry.blocked_dates)
            year, month = add_months(year, month, 2)
        return list(bookings.values()), list(blocked_dates.values())

    def calendar(self, year, month):
        """(day, DayStatus) for every day of the month"""
        entry = self.month_availability(year, month)
        return calendar_days(year, month, entry.bookings, entry.blocked_dates, self.today)

    def status_of(self, day):
        entry = self.month_availability(day.year, day.month)
        return day_status(day, entry.bookings, entry.blocked_dates, self.today)

    # Selection

    def select_date(self, day) -> SelectionRange:
        """Apply a click on ``day`` to the selection.

        Unavailable and past days are ignored. The first click sets the
        start; a later click completes the range unless it crosses an
        unavailable day, in which case it starts a new selection instead.
        """
        if self.status_of(day) is not DayStatus.AVAILABLE:
            return self.selection

        start = self.selection.start
        if start is None or self.selection.is_complete or day < start:
            self.selection = SelectionRange(start=day)
            return self.selection

        bookings, blocked_dates = self.intervals_between(start, day)
        if range_is_free(start, day, bookings, blocked_dates):
            self.selection = SelectionRange(start=start, end=day)
        else:
            self.selection = SelectionRange(start=day)
        return self.selection

    def clear_selection(self):
        self.selection = SelectionRange()

    def quote(self):
        """Months and total for the completed selection, or None"""
        if not self.selection.is_complete or not self.plot:
            return None
        return calculate_cost(self.selection.start, self.selection.end, self.plot['pricePerMonth'])

    def check_selection(self):
        """Advisory conflict check of the selection against cached data"""
        if not self.selection.is_complete:
            raise ValidationError('Select a start and an end date')
        start, end = self.selection.start, self.selection.end
        bookings, blocked_dates = self.intervals_between(start, end)
        minimum_lease = self.plot.get('minimumLease') if self.plot else None
        return find_conflict(start, end, bookings, blocked_dates, self.today,
                             minimum_lease=minimum_lease)

    # Mutations

    @contextmanager
    def _mutation(self, action):
        if not self._mutation_lock.acquire(blocking=False):
            raise MutationInFlightError(f'Cannot {action} while another request is in flight')
        try:
            yield
        except DatesUnavailableError:
            # What we showed was stale; refetch before the user picks again
            self.cache.invalidate_all()
            raise
        finally:
            self._mutation_lock.release()
        self.cache.invalidate_all()

    def submit_booking(self, message=None):
        """Send the selection as a booking request and return the booking"""
        raise_for_conflict(self.check_selection())

        start, end = self.selection.start, self.selection.end
        with self._mutation('book'):
            booking = self.client.create_booking(self.plot_id, start, end, message=message)
        logger.info('Booked plot %s from %s to %s', self.plot_id, start, end)
        self.clear_selection()
        return booking

    def block_dates(self, start, end, reason=None):
        with self._mutation('block dates'):
            block = self.client.create_block(self.plot_id, start, end, reason=reason)
        logger.info('Blocked plot %s from %s to %s', self.plot_id, start, end)
        return block

    def unblock(self, block_id):
        with self._mutation('unblock dates'):
            self.client.remove_block(self.plot_id, block_id)
        logger.info('Removed block %s on plot %s', block_id, self.plot_id)
