"""
Script to create a demo owner and plot for local development
Usage: python scripts/seed_plot.py owner@example.com "Sunny allotment" 300
"""

import sys
import os

# Add project root to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from flask_jwt_extended import create_access_token
from app import create_app
from extensions import db
from app.models import Plot, User

def seed_plot(email, title, price_per_month, instant_book=False):
    """Create (or reuse) an owner and give them a plot"""
    app = create_app()

    with app.app_context():
        owner = User.query.filter_by(email=email).first()

        if not owner:
            owner = User(email=email, first_name='Demo', last_name='Owner', is_verified=True)
            db.session.add(owner)
            db.session.commit()
            print(f"Created owner '{email}'")

        plot = Plot(
            owner_id=owner.id,
            title=title,
            price_per_month=price_per_month,
            minimum_lease=1,
            instant_book=instant_book,
        )
        db.session.add(plot)
        db.session.commit()

        print(f"Created plot {plot.id}: {plot.title}")
        print(f"   Price per month: {plot.price_per_month}")
        print(f"   Instant book: {plot.instant_book}")
        print(f"   Owner token: {create_access_token(identity=str(owner.id))}")
        return plot.id

if __name__ == '__main__':
    if len(sys.argv) < 4:
        print("Usage: python scripts/seed_plot.py <owner email> <title> <price per month> [--instant]")
        print('Example: python scripts/seed_plot.py owner@example.com "Sunny allotment" 300')
        sys.exit(1)

    seed_plot(sys.argv[1], sys.argv[2], sys.argv[3], instant_book='--instant' in sys.argv[4:])
