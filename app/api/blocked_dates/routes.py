from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required, get_jwt_identity
from extensions import db, limiter
from app.errors import ApiError, ValidationError
from app.services.availability_service import list_blocked_dates
from app.services.block_service import create_block, remove_block

blocked_dates_bp = Blueprint('blocked_dates', __name__)


@blocked_dates_bp.route('/<int:plot_id>/blocked-dates', methods=['GET'])
@limiter.limit("100 per minute")
def get_blocked_dates(plot_id):
    """Get all blocked dates for a plot"""
    blocked_dates = list_blocked_dates(plot_id)

    return jsonify({
        'plotId': plot_id,
        'blockedDates': [bd.to_dict() for bd in blocked_dates]
    }), 200


@blocked_dates_bp.route('/<int:plot_id>/blocked-dates', methods=['POST'])
@jwt_required()
@limiter.limit("30 per minute")
def block_dates(plot_id):
    """Block a date range for a plot"""
    try:
        current_user_id = get_jwt_identity()
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            raise ValidationError('Request body must be a JSON object')

        new_block = create_block(
            current_user_id,
            plot_id,
            data.get('startDate'),
            data.get('endDate'),
            reason=data.get('reason'),
        )

        return jsonify({'message': 'Dates blocked', 'blockedDate': new_block.to_dict()}), 201

    except ApiError:
        db.session.rollback()
        raise


@blocked_dates_bp.route('/<int:plot_id>/blocked-dates', methods=['DELETE'])
@jwt_required()
@limiter.limit("30 per minute")
def unblock_dates(plot_id):
    """Remove a blocked date range (?id=<blockId>)"""
    try:
        current_user_id = get_jwt_identity()
        remove_block(current_user_id, plot_id, request.args.get('id'))

        return jsonify({'message': 'Dates unblocked', 'success': True}), 200

    except ApiError:
        db.session.rollback()
        raise
