"""
HTTP client for the availability and booking endpoints.

Error responses are turned back into the exceptions of ``app.errors`` by
their ``code``. Transport failures and 5xx answers become
ServiceUnavailableError, the only retryable class; GETs are retried by the
session adapter, mutations never are.
"""

import logging
from datetime import date
from typing import Any, Dict, NamedTuple, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from app.errors import (
    ApiError,
    AuthenticationRequiredError,
    DatesUnavailableError,
    ForbiddenError,
    NotFoundError,
    RateLimitedError,
    ServiceUnavailableError,
    ValidationError,
    error_for_code,
)
from app.services.conflict_validator import parse_iso_date

logger = logging.getLogger(__name__)

ERRORS_BY_STATUS = {
    400: ValidationError,
    401: AuthenticationRequiredError,
    403: ForbiddenError,
    404: NotFoundError,
    409: DatesUnavailableError,
    429: RateLimitedError,
}


class BookedInterval(NamedTuple):
    id: int
    start_date: date
    end_date: date
    status: str


class BlockedInterval(NamedTuple):
    id: int
    start_date: date
    end_date: date
    reason: Optional[str]


def parse_booking(data):
    return BookedInterval(
        id=data['id'],
        start_date=parse_iso_date(data['startDate']),
        end_date=parse_iso_date(data['endDate']),
        status=data['status'],
    )


def parse_blocked_date(data):
    return BlockedInterval(
        id=data['id'],
        start_date=parse_iso_date(data['startDate']),
        end_date=parse_iso_date(data['endDate']),
        reason=data.get('reason'),
    )


class PlotAvailabilityClient:
    """Thin wrapper over the REST API used by calendar sessions"""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        retries: int = 3,
        timeout: float = 10.0
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

        if session is None:
            session = requests.Session()
            retry = Retry(
                total=retries,
                backoff_factor=0.5,
                status_forcelist=(502, 503, 504),
                allowed_methods=frozenset(['GET']),
                raise_on_status=False,
            )
            adapter = HTTPAdapter(max_retries=retry)
            session.mount('http://', adapter)
            session.mount('https://', adapter)
        self.session = session

        if token:
            self.session.headers['Authorization'] = f'Bearer {token}'

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = f'{self.base_url}{path}'
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning('%s %s failed: %s', method, url, e)
            raise ServiceUnavailableError(f'Network error: {e}')

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.ok:
            return payload

        raise self._error_from_response(response.status_code, payload)

    @staticmethod
    def _error_from_response(status_code, payload) -> ApiError:
        message = payload.get('error') if isinstance(payload, dict) else None
        if status_code >= 500:
            return ServiceUnavailableError(message)

        code = payload.get('code') if isinstance(payload, dict) else None
        if code:
            return error_for_code(code, message, payload)

        cls = ERRORS_BY_STATUS.get(status_code, ApiError)
        return cls(message)

    def get_availability(self, plot_id: int, start: date, end: date) -> Dict[str, Any]:
        """Bookings and blocks intersecting [start, end], parsed into intervals"""
        data = self._request(
            'GET',
            f'/api/plots/{plot_id}/availability',
            params={'start': start.isoformat(), 'end': end.isoformat()},
        )
        return {
            'plot': data.get('plot'),
            'bookings': [parse_booking(b) for b in data.get('bookings', [])],
            'blocked_dates': [parse_blocked_date(b) for b in data.get('blockedDates', [])],
        }

    def create_booking(self, plot_id: int, start: date, end: date, message: Optional[str] = None):
        body = {
            'plotId': plot_id,
            'startDate': start.isoformat(),
            'endDate': end.isoformat(),
        }
        if message:
            body['message'] = message
        return self._request('POST', '/api/bookings', json=body)['booking']

    def create_block(self, plot_id: int, start: date, end: date, reason: Optional[str] = None):
        body = {
            'startDate': start.isoformat(),
            'endDate': end.isoformat(),
            'reason': reason,
        }
        return self._request('POST', f'/api/plots/{plot_id}/blocked-dates', json=body)['blockedDate']

    def remove_block(self, plot_id: int, block_id: int) -> None:
        self._request('DELETE', f'/api/plots/{plot_id}/blocked-dates', params={'id': block_id})
