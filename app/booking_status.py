"""
Booking statuses, shared by the models, the calendar rules and the client
"""

from enum import Enum


class BookingStatus(str, Enum):
    """Booking status enum"""
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    REJECTED = 'rejected'


# Statuses that hold dates on the calendar
OCCUPYING_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)
