"""
Plot Model
"""

from extensions import db
from datetime import datetime


class Plot(db.Model):
    """A rentable parcel of land; availability is scoped to a plot"""

    __tablename__ = 'plots'

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)

    # Basic Information
    title = db.Column(db.String(200), nullable=False)
    city = db.Column(db.String(100))
    state = db.Column(db.String(100))

    # Pricing and lease terms
    price_per_month = db.Column(db.Numeric(10, 2), nullable=False)
    minimum_lease = db.Column(db.Integer, default=1)  # months
    instant_book = db.Column(db.Boolean, default=False, nullable=False)

    # Bumped by every mutation touching the calendar; writers compare-and-swap it
    availability_version = db.Column(db.Integer, default=0, nullable=False)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    bookings = db.relationship('Booking', backref='plot', lazy='dynamic')
    blocked_dates = db.relationship('BlockedDate', backref='plot', lazy='dynamic',
                                    cascade='all, delete-orphan')

    def __init__(self, **kwargs):
        """Initialize plot"""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)

    def is_owned_by(self, user_id):
        return user_id is not None and self.owner_id == int(user_id)

    def to_summary_dict(self):
        """Fields the calendar needs to price and validate a selection"""
        return {
            'id': self.id,
            'title': self.title,
            'pricePerMonth': float(self.price_per_month),
            'minimumLease': self.minimum_lease,
            'instantBook': self.instant_book,
        }

    def to_dict(self):
        data = self.to_summary_dict()
        data.update({
            'ownerId': self.owner_id,
            'city': self.city,
            'state': self.state,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        })
        return data

    def __repr__(self):
        return f'<Plot {self.title}>'
