"""
Availability Routes
"""

from flask import Blueprint, jsonify, request
from extensions import limiter
from app.services.availability_service import get_availability, resolve_window

availability_bp = Blueprint('availability', __name__)


@availability_bp.route('/<int:plot_id>/availability', methods=['GET'])
@limiter.limit("100 per minute")
def plot_availability(plot_id):
    """Bookings and blocks intersecting ?start=&end= (ISO-8601)"""
    window_start, window_end = resolve_window(
        request.args.get('start'),
        request.args.get('end'),
    )
    result = get_availability(plot_id, window_start, window_end)

    return jsonify({
        'plot': result['plot'].to_summary_dict(),
        'window': {
            'start': window_start.isoformat(),
            'end': window_end.isoformat(),
        },
        'bookings': [b.to_availability_dict() for b in result['bookings']],
        'blockedDates': [bd.to_dict() for bd in result['blocked_dates']],
    }), 200
