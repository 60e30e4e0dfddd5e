"""
API Package
"""

# Import all blueprints for easy access
from app.api.availability import availability_bp
from app.api.blocked_dates import blocked_dates_bp
from app.api.bookings import bookings_bp

__all__ = [
    'availability_bp',
    'blocked_dates_bp',
    'bookings_bp',
]
