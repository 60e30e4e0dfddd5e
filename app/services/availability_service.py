"""
Availability Query Service

Reads the authoritative calendar of a plot: the occupying bookings and the
owner blocks that intersect a date window.
"""

from datetime import date, timedelta

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from app.errors import NotFoundError, ServiceUnavailableError, ValidationError
from app.models import BlockedDate, Booking, OCCUPYING_STATUSES, Plot
from app.services.conflict_validator import duration_days, parse_iso_date


def parse_date_field(value, field):
    if value is None or value == '':
        raise ValidationError(f'{field} is required')
    try:
        return parse_iso_date(value)
    except (TypeError, ValueError):
        raise ValidationError(f'Invalid date format for {field}')


def get_plot(plot_id, for_update=False):
    """Load a plot or raise NotFoundError.

    ``for_update`` takes a row lock (SELECT ... FOR UPDATE on databases that
    support it) and always re-reads the row, so the caller sees the current
    availability_version.
    """
    if for_update:
        plot = db.session.get(Plot, plot_id, with_for_update=True, populate_existing=True)
    else:
        plot = db.session.get(Plot, plot_id)
    if plot is None:
        raise NotFoundError('Plot not found')
    return plot


def resolve_window(start_raw=None, end_raw=None, today=None):
    """Turn query-string bounds into a validated (start, end) date pair.

    A missing start means today; a missing end means the default calendar
    span after start. Windows longer than AVAILABILITY_MAX_WINDOW_DAYS are
    refused so a single query cannot pull an unbounded history.
    """
    today = today or date.today()
    start = parse_date_field(start_raw, 'start') if start_raw else today
    if end_raw:
        end = parse_date_field(end_raw, 'end')
    else:
        end = start + timedelta(days=current_app.config['AVAILABILITY_DEFAULT_WINDOW_DAYS'])

    if start > end:
        raise ValidationError('Window start must not be after window end')

    max_days = current_app.config['AVAILABILITY_MAX_WINDOW_DAYS']
    if duration_days(start, end) > max_days:
        raise ValidationError(f'Availability window cannot exceed {max_days} days')

    return start, end


def load_intervals(plot_id, window_start, window_end):
    """Occupying bookings and blocks intersecting [window_start, window_end]"""
    bookings = Booking.query.filter(
        Booking.plot_id == plot_id,
        Booking.status.in_(OCCUPYING_STATUSES),
        Booking.start_date <= window_end,
        Booking.end_date >= window_start,
    ).order_by(Booking.start_date.asc()).all()

    blocked_dates = BlockedDate.query.filter(
        BlockedDate.plot_id == plot_id,
        BlockedDate.start_date <= window_end,
        BlockedDate.end_date >= window_start,
    ).order_by(BlockedDate.start_date.asc()).all()

    return bookings, blocked_dates


def get_availability(plot_id, window_start, window_end):
    """Return the plot and its bookings/blocks intersecting the window.

    Storage failures surface as ServiceUnavailableError; an empty result is
    only ever returned when the plot really is free.
    """
    try:
        plot = get_plot(plot_id)
        bookings, blocked_dates = load_intervals(plot.id, window_start, window_end)
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f'Failed to load availability for plot {plot_id}: {str(e)}')
        raise ServiceUnavailableError('Failed to fetch availability')

    return {
        'plot': plot,
        'bookings': bookings,
        'blocked_dates': blocked_dates,
    }


def list_blocked_dates(plot_id):
    """Every block on a plot, oldest first"""
    try:
        plot = get_plot(plot_id)
        return BlockedDate.query.filter_by(plot_id=plot.id).order_by(
            BlockedDate.start_date.asc()).all()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f'Failed to load blocked dates for plot {plot_id}: {str(e)}')
        raise ServiceUnavailableError('Failed to fetch blocked dates')
