"""
Services Package
Calendar rules, pricing and the mutations built on them
"""

from app.services.pricing_service import calculate_cost
from app.services.conflict_validator import find_conflict, is_bookable

__all__ = [
    'calculate_cost',
    'find_conflict',
    'is_bookable',
]
