"""
Shared pytest fixtures: app on in-memory SQLite, seeded users and plots,
JWT headers, and a requests transport that talks to the Flask test client.
"""

import os
import sys
from datetime import date
from decimal import Decimal
from urllib.parse import urlsplit

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from flask_jwt_extended import create_access_token

from app import create_app
from extensions import db
from app.models import BlockedDate, Booking, BookingStatus, Plot, User
from app.services.conflict_validator import add_months
from app.services.pricing_service import calculate_cost

BASE_URL = 'http://testserver'


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def today():
    return date.today()


@pytest.fixture
def next_month(today):
    """(year, month) of the month after today; every day in it is in the future"""
    return add_months(today.year, today.month, 1)


def _user(email, first_name, verified=True):
    user = User(email=email, first_name=first_name, last_name='Tester', is_verified=verified)
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def owner(app):
    return _user('owner@example.com', 'Olive')


@pytest.fixture
def renter(app):
    return _user('renter@example.com', 'Rowan')


@pytest.fixture
def other_renter(app):
    return _user('second@example.com', 'Sage')


@pytest.fixture
def unverified_renter(app):
    return _user('unverified@example.com', 'Una', verified=False)


def _plot(owner, **kwargs):
    values = {
        'owner_id': owner.id,
        'title': 'Raised beds by the river',
        'city': 'Portland',
        'state': 'OR',
        'price_per_month': Decimal('300.00'),
        'minimum_lease': 1,
        'instant_book': False,
    }
    values.update(kwargs)
    plot = Plot(**values)
    db.session.add(plot)
    db.session.commit()
    return plot


@pytest.fixture
def plot(owner):
    return _plot(owner)


@pytest.fixture
def instant_plot(owner):
    return _plot(owner, title='Orchard corner', instant_book=True)


@pytest.fixture
def flexible_plot(owner):
    """No minimum lease, so short ranges are bookable"""
    return _plot(owner, title='Herb strip', minimum_lease=0)


@pytest.fixture
def make_booking(app):
    def _make(plot, renter, start, end, status=BookingStatus.CONFIRMED):
        pricing = calculate_cost(start, end, plot.price_per_month)
        booking = Booking(
            plot_id=plot.id,
            renter_id=renter.id,
            start_date=start,
            end_date=end,
            status=status,
            monthly_rate=pricing['monthly_rate'],
            months=pricing['months'],
            total_amount=pricing['total'],
        )
        db.session.add(booking)
        db.session.commit()
        return booking
    return _make


@pytest.fixture
def make_block(app):
    def _make(plot, start, end, reason=None):
        block = BlockedDate(plot_id=plot.id, start_date=start, end_date=end, reason=reason)
        db.session.add(block)
        db.session.commit()
        return block
    return _make


@pytest.fixture
def token_for(app):
    def _token(user):
        return create_access_token(identity=str(user.id))
    return _token


@pytest.fixture
def auth_headers(token_for):
    def _headers(user):
        return {'Authorization': f'Bearer {token_for(user)}'}
    return _headers


class FlaskTransport(BaseAdapter):
    """requests adapter that hands every request to the Flask test client"""

    def __init__(self, flask_client):
        super().__init__()
        self.flask_client = flask_client
        self.calls = []

    def send(self, request, **kwargs):
        parts = urlsplit(request.url)
        path = parts.path + (f'?{parts.query}' if parts.query else '')
        self.calls.append((request.method, parts.path))

        headers = {
            key: value for key, value in request.headers.items()
            if key.lower() not in ('content-length', 'content-type')
        }
        result = self.flask_client.open(
            path,
            method=request.method,
            data=request.body,
            headers=headers,
            content_type=request.headers.get('Content-Type'),
        )

        response = requests.Response()
        response.status_code = result.status_code
        response._content = result.get_data()
        response.headers = CaseInsensitiveDict(dict(result.headers))
        response.encoding = 'utf-8'
        response.url = request.url
        response.request = request
        return response

    def close(self):
        pass

    def count(self, method, path):
        return sum(1 for call in self.calls if call == (method, path))


@pytest.fixture
def transport(client):
    return FlaskTransport(client)


@pytest.fixture
def api_client_for(transport, token_for):
    """PlotAvailabilityClient authenticated as a user, routed through Flask"""
    from app.client.api_client import PlotAvailabilityClient

    def _client(user=None):
        session = requests.Session()
        session.mount(BASE_URL, transport)
        token = token_for(user) if user is not None else None
        return PlotAvailabilityClient(BASE_URL, token=token, session=session)
    return _client
