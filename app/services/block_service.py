"""
Owner blocks: take date ranges off the market or give them back.
"""

from flask import current_app

from extensions import db
from app.errors import DatesUnavailableError, ForbiddenError, NotFoundError, ValidationError
from app.models import BlockedDate
from app.services.availability_service import get_plot, load_intervals, parse_date_field
from app.services.booking_service import claim_calendar, get_active_user

MAX_REASON_LENGTH = 255


def _owned_plot(user_id, plot_id, action):
    owner = get_active_user(user_id)
    plot = get_plot(plot_id, for_update=True)
    if not plot.is_owned_by(owner.id):
        raise ForbiddenError(f'Only the plot owner can {action} dates')
    return plot


def create_block(user_id, plot_id, start_raw, end_raw, reason=None):
    """Block an inclusive date range on a plot the user owns.

    Blocks over dates held by a pending or confirmed booking are refused
    unless ALLOW_BLOCKS_OVER_BOOKINGS is set, in which case the booking is
    left untouched and the overlap is logged.
    """
    start = parse_date_field(start_raw, 'startDate')
    end = parse_date_field(end_raw, 'endDate')
    if start > end:
        raise ValidationError('End date must not be before start date')
    if reason is not None and not isinstance(reason, str):
        raise ValidationError('Reason must be a string')
    if reason is not None and len(reason) > MAX_REASON_LENGTH:
        raise ValidationError(f'Reason must be at most {MAX_REASON_LENGTH} characters')

    plot = _owned_plot(user_id, plot_id, 'block')

    bookings, _ = load_intervals(plot.id, start, end)
    if bookings:
        if not current_app.config['ALLOW_BLOCKS_OVER_BOOKINGS']:
            raise DatesUnavailableError(
                'Cannot block dates that have existing bookings',
                details={'bookingIds': [b.id for b in bookings]},
            )
        current_app.logger.warning(
            f'Block on plot {plot.id} overlaps bookings {[b.id for b in bookings]}'
        )

    claim_calendar(plot)

    block = BlockedDate(
        plot_id=plot.id,
        start_date=start,
        end_date=end,
        reason=reason or None,
    )
    db.session.add(block)
    db.session.commit()

    current_app.logger.info(
        f'Plot {plot.id} blocked {start.isoformat()} to {end.isoformat()} (block {block.id})'
    )
    return block


def remove_block(user_id, plot_id, block_id):
    """Delete one of the plot's blocks, making its dates bookable again"""
    if block_id in (None, ''):
        raise ValidationError('Blocked date ID required')
    try:
        block_id = int(block_id)
    except (TypeError, ValueError):
        raise ValidationError('Blocked date ID must be an integer')

    plot = _owned_plot(user_id, plot_id, 'unblock')

    block = BlockedDate.query.filter_by(id=block_id, plot_id=plot.id).first()
    if block is None:
        raise NotFoundError('Blocked date not found')

    claim_calendar(plot)
    db.session.delete(block)
    db.session.commit()

    current_app.logger.info(f'Plot {plot.id} unblocked block {block_id}')
