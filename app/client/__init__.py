"""
Client library: REST client, per-session cache and calendar session
"""

from app.client.api_client import PlotAvailabilityClient
from app.client.availability_cache import AvailabilityCache, CacheEntry
from app.client.calendar_session import MutationInFlightError, PlotCalendarSession, SelectionRange

__all__ = [
    'PlotAvailabilityClient',
    'AvailabilityCache',
    'CacheEntry',
    'PlotCalendarSession',
    'SelectionRange',
    'MutationInFlightError',
]
