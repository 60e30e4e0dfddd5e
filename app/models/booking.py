"""
Booking Model
"""

from extensions import db
from datetime import datetime

from app.booking_status import BookingStatus, OCCUPYING_STATUSES


class Booking(db.Model):
    """Lease of a plot for an inclusive date range"""

    __tablename__ = 'bookings'
    __table_args__ = (
        db.CheckConstraint('start_date <= end_date', name='ck_bookings_range'),
        db.Index('ix_bookings_plot_range', 'plot_id', 'start_date', 'end_date'),
    )

    id = db.Column(db.Integer, primary_key=True)
    plot_id = db.Column(db.Integer, db.ForeignKey('plots.id'), nullable=False)
    renter_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)

    # Booking Details (both ends inclusive)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)

    # Status
    status = db.Column(db.Enum(BookingStatus), default=BookingStatus.PENDING, nullable=False)

    # Pricing
    monthly_rate = db.Column(db.Numeric(10, 2), nullable=False)
    months = db.Column(db.Integer, nullable=False)
    total_amount = db.Column(db.Numeric(10, 2), nullable=False)

    # Additional Information
    message = db.Column(db.Text)
    cancellation_reason = db.Column(db.Text)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    cancelled_at = db.Column(db.DateTime)

    def __init__(self, **kwargs):
        """Initialize booking"""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)

    @property
    def occupies_calendar(self):
        return self.status in OCCUPYING_STATUSES

    def confirm(self):
        """Confirm booking"""
        self.status = BookingStatus.CONFIRMED

    def reject(self):
        self.status = BookingStatus.REJECTED

    def cancel(self, reason=None):
        """Cancel booking"""
        self.status = BookingStatus.CANCELLED
        self.cancelled_at = datetime.utcnow()
        if reason:
            self.cancellation_reason = reason

    def can_cancel(self):
        """Check if booking can be cancelled"""
        return self.status in OCCUPYING_STATUSES

    def to_availability_dict(self):
        """Public calendar view: no renter or price details"""
        return {
            'id': self.id,
            'startDate': self.start_date.isoformat(),
            'endDate': self.end_date.isoformat(),
            'status': self.status.value,
        }

    def to_dict(self, include_plot=False, include_renter=False):
        """Convert booking to dictionary"""
        data = {
            'id': self.id,
            'plotId': self.plot_id,
            'renterId': self.renter_id,
            'startDate': self.start_date.isoformat() if self.start_date else None,
            'endDate': self.end_date.isoformat() if self.end_date else None,
            'status': self.status.value,
            'monthlyRate': float(self.monthly_rate),
            'months': self.months,
            'totalAmount': float(self.total_amount),
            'message': self.message,
            'cancellationReason': self.cancellation_reason,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }

        if include_plot:
            data['plot'] = self.plot.to_summary_dict()

        if include_renter:
            data['renter'] = self.renter.to_dict(include_email=True)

        return data

    def __repr__(self):
        return f'<Booking {self.id} - Plot {self.plot_id}>'
