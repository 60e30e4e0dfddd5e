"""
Tests for the application factory: health check and configured limits
"""

from config import Config, TestingConfig


def test_health(client):
    response = client.get('/health')

    assert response.status_code == 200
    assert response.get_json()['status'] == 'healthy'


def test_default_limits_come_from_config(app):
    assert app.config['RATELIMIT_DEFAULT'] == Config.RATELIMIT_DEFAULT
    assert not app.config['RATELIMIT_ENABLED']
    assert TestingConfig.RATELIMIT_DEFAULT == Config.RATELIMIT_DEFAULT


def test_unknown_route_uses_error_format(client):
    response = client.get('/api/nowhere')

    assert response.status_code == 404
    assert response.get_json()['code'] == 'NOT_FOUND'
