"""
Booking mutations

Every write that changes what a plot's calendar shows goes through
``claim_calendar``: the plot row is locked, the rules are checked against
the database, and the plot's availability_version is compared-and-swapped
in the same transaction as the insert/update. Two writers that read the
same version cannot both commit, even on databases without row locks.
"""

from datetime import date

from flask import current_app
from sqlalchemy import update

from extensions import db
from app.errors import (
    AuthenticationRequiredError,
    DatesUnavailableError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    VerificationRequiredError,
)
from app.models import Booking, BookingStatus, Plot, User
from app.services.availability_service import get_plot, load_intervals, parse_date_field
from app.services.conflict_validator import find_conflict, raise_for_conflict
from app.services.pricing_service import calculate_cost

MAX_MESSAGE_LENGTH = 1000


def claim_calendar(plot):
    """Bump plot.availability_version if nobody else has since we read it"""
    seen = plot.availability_version
    result = db.session.execute(
        update(Plot)
        .where(Plot.id == plot.id, Plot.availability_version == seen)
        .values(availability_version=seen + 1)
    )
    if result.rowcount != 1:
        current_app.logger.info(f'Lost calendar race on plot {plot.id} at version {seen}')
        raise DatesUnavailableError('Availability changed while saving, please pick your dates again')


def get_active_user(user_id):
    user = db.session.get(User, int(user_id)) if user_id is not None else None
    if user is None or not user.is_active:
        raise AuthenticationRequiredError()
    return user


def create_booking(renter_id, plot_id, start_raw, end_raw, message=None, today=None):
    """Reserve an inclusive date range on a plot for a renter.

    The range is checked against the database, never against what a client
    had cached. Instant-book plots confirm immediately; others start
    PENDING until the owner answers.
    """
    renter = get_active_user(renter_id)
    if current_app.config['REQUIRE_EMAIL_VERIFICATION'] and not renter.is_verified:
        raise VerificationRequiredError(verify_url=current_app.config['EMAIL_VERIFICATION_URL'])

    start = parse_date_field(start_raw, 'startDate')
    end = parse_date_field(end_raw, 'endDate')
    if message is not None and not isinstance(message, str):
        raise ValidationError('Message must be a string')
    if message is not None and len(message) > MAX_MESSAGE_LENGTH:
        raise ValidationError(f'Message must be at most {MAX_MESSAGE_LENGTH} characters')

    plot = get_plot(plot_id, for_update=True)
    if plot.is_owned_by(renter.id):
        raise ValidationError('You cannot book your own plot')

    bookings, blocked_dates = load_intervals(plot.id, start, end)
    reason = find_conflict(start, end, bookings, blocked_dates,
                           today or date.today(), minimum_lease=plot.minimum_lease)
    raise_for_conflict(reason)

    claim_calendar(plot)

    pricing = calculate_cost(start, end, plot.price_per_month)
    booking = Booking(
        plot_id=plot.id,
        renter_id=renter.id,
        start_date=start,
        end_date=end,
        status=BookingStatus.CONFIRMED if plot.instant_book else BookingStatus.PENDING,
        monthly_rate=pricing['monthly_rate'],
        months=pricing['months'],
        total_amount=pricing['total'],
        message=message,
    )
    db.session.add(booking)
    db.session.commit()

    current_app.logger.info(
        f'Booking {booking.id} created on plot {plot.id} '
        f'({start.isoformat()} to {end.isoformat()}, {booking.status.value})'
    )
    return booking


def get_booking_for(user_id, booking_id):
    """Load a booking visible to its renter or the plot owner"""
    booking = db.session.get(Booking, booking_id)
    if booking is None:
        raise NotFoundError('Booking not found')
    user_id = int(user_id)
    if booking.renter_id != user_id and booking.plot.owner_id != user_id:
        raise ForbiddenError('Unauthorized')
    return booking


def list_bookings(user_id, as_owner=False):
    if as_owner:
        query = Booking.query.join(Plot).filter(Plot.owner_id == int(user_id))
    else:
        query = Booking.query.filter(Booking.renter_id == int(user_id))
    return query.order_by(Booking.created_at.desc()).all()


def update_booking_status(user_id, booking_id, status_raw, reason=None):
    """Owner confirms/rejects a pending request; either party cancels.

    Every transition goes through the calendar claim, and the booking's
    status is re-read only once the plot row is locked.
    """
    try:
        status = BookingStatus(str(status_raw).lower())
    except ValueError:
        raise ValidationError('Invalid status. Must be confirmed, rejected, or cancelled')
    if status == BookingStatus.PENDING:
        raise ValidationError('Invalid status. Must be confirmed, rejected, or cancelled')
    if reason is not None and not isinstance(reason, str):
        raise ValidationError('Reason must be a string')

    booking = get_booking_for(user_id, booking_id)
    plot = get_plot(booking.plot_id, for_update=True)
    # whatever was loaded before the lock may be stale
    db.session.refresh(booking)
    is_owner = plot.is_owned_by(user_id)

    if status in (BookingStatus.CONFIRMED, BookingStatus.REJECTED):
        if not is_owner:
            raise ForbiddenError('Only the plot owner can confirm or reject bookings')
        if booking.status != BookingStatus.PENDING:
            raise ValidationError(
                f'Cannot {status.value} a {booking.status.value} booking'
            )
        claim_calendar(plot)
        if status == BookingStatus.CONFIRMED:
            booking.confirm()
        else:
            booking.reject()
    else:
        if not booking.can_cancel():
            raise ValidationError(f'Cannot cancel a {booking.status.value} booking')
        claim_calendar(plot)
        booking.cancel(reason=reason)

    db.session.commit()
    current_app.logger.info(f'Booking {booking.id} is now {booking.status.value}')
    return booking
