from extensions import db
from datetime import datetime

class BlockedDate(db.Model):
    """Owner-held date range when the plot cannot be booked"""
    __tablename__ = 'blocked_dates'
    __table_args__ = (
        db.CheckConstraint('start_date <= end_date', name='ck_blocked_dates_range'),
        db.Index('ix_blocked_dates_plot_range', 'plot_id', 'start_date', 'end_date'),
    )

    id = db.Column(db.Integer, primary_key=True)
    plot_id = db.Column(db.Integer, db.ForeignKey('plots.id'), nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    reason = db.Column(db.String(255))  # Optional: why it's blocked
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'plotId': self.plot_id,
            'startDate': self.start_date.isoformat(),
            'endDate': self.end_date.isoformat(),
            'reason': self.reason,
        }
