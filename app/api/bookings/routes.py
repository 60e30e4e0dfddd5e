"""
Bookings Blueprint
"""

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required, get_jwt_identity
from extensions import db, limiter
from app.errors import ApiError, ValidationError
from app.models import BookingStatus
from app.services.booking_service import (
    create_booking as create_booking_for,
    get_booking_for,
    list_bookings,
    update_booking_status,
)

bookings_bp = Blueprint('bookings', __name__)


@bookings_bp.route('', methods=['POST'])
@jwt_required()
@limiter.limit("30 per minute")
def create_booking():
    """Create a new booking request"""
    try:
        current_user_id = get_jwt_identity()
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            raise ValidationError('Request body must be a JSON object')

        # Validate required fields
        required_fields = ['plotId', 'startDate', 'endDate']
        for field in required_fields:
            if not data.get(field):
                raise ValidationError('Plot ID, start date, and end date are required')

        try:
            plot_id = int(data['plotId'])
        except (TypeError, ValueError):
            raise ValidationError('Invalid plot ID')

        booking = create_booking_for(
            current_user_id,
            plot_id,
            data['startDate'],
            data['endDate'],
            message=data.get('message'),
        )

        return jsonify({
            'message': 'Booking confirmed' if booking.status == BookingStatus.CONFIRMED
            else 'Booking requested',
            'booking': booking.to_dict(include_plot=True)
        }), 201

    except ApiError:
        db.session.rollback()
        raise


@bookings_bp.route('', methods=['GET'])
@jwt_required()
def get_my_bookings():
    """Bookings made by the user, or on the user's plots with ?type=owner"""
    current_user_id = get_jwt_identity()
    as_owner = request.args.get('type') == 'owner'
    bookings = list_bookings(current_user_id, as_owner=as_owner)

    return jsonify({
        'bookings': [booking.to_dict(include_plot=True, include_renter=as_owner)
                     for booking in bookings]
    }), 200


@bookings_bp.route('/<int:booking_id>', methods=['GET'])
@jwt_required()
def get_booking(booking_id):
    """Get booking details"""
    current_user_id = get_jwt_identity()
    booking = get_booking_for(current_user_id, booking_id)

    return jsonify({
        'booking': booking.to_dict(include_plot=True, include_renter=True)
    }), 200


@bookings_bp.route('/<int:booking_id>', methods=['PATCH'])
@jwt_required()
@limiter.limit("30 per minute")
def change_booking_status(booking_id):
    """Confirm, reject or cancel a booking"""
    try:
        current_user_id = get_jwt_identity()
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            raise ValidationError('Request body must be a JSON object')

        if not data.get('status'):
            raise ValidationError('status is required')

        booking = update_booking_status(
            current_user_id,
            booking_id,
            data['status'],
            reason=data.get('reason'),
        )

        return jsonify({
            'message': f'Booking {booking.status.value}',
            'booking': booking.to_dict()
        }), 200

    except ApiError:
        db.session.rollback()
        raise
