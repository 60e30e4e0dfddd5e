"""
Models package initialization
Import all models here for easy access
"""

from app.models.user import User
from app.models.plot import Plot
from app.models.booking import Booking, BookingStatus, OCCUPYING_STATUSES
from app.models.blocked_date import BlockedDate

__all__ = [
    'User',
    'Plot',
    'Booking',
    'BookingStatus',
    'OCCUPYING_STATUSES',
    'BlockedDate',
]
