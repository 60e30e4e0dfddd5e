"""
User Model
"""

from extensions import db
from datetime import datetime


class User(db.Model):
    """Identity record for renters and plot owners.

    Credentials live with the external identity provider; this table only
    holds what availability and booking rules need.
    """

    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    first_name = db.Column(db.String(50), nullable=False)
    last_name = db.Column(db.String(50), nullable=False)
    is_active = db.Column(db.Boolean, default=True)
    is_verified = db.Column(db.Boolean, default=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    plots = db.relationship('Plot', backref='owner', lazy='dynamic',
                            foreign_keys='Plot.owner_id')
    bookings = db.relationship('Booking', backref='renter', lazy='dynamic',
                               foreign_keys='Booking.renter_id')

    def __init__(self, email, first_name, last_name, **kwargs):
        self.email = email
        self.first_name = first_name
        self.last_name = last_name

        # Handle optional fields
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)

    @property
    def full_name(self):
        """Return full name"""
        return f"{self.first_name} {self.last_name}"

    def to_dict(self, include_email=False):
        """Convert user to dictionary"""
        data = {
            'id': self.id,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'fullName': self.full_name,
            'isVerified': self.is_verified,
        }

        if include_email:
            data['email'] = self.email

        return data

    def __repr__(self):
        return f'<User {self.email}>'
