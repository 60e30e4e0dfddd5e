"""
Flask Application Factory
"""

import logging
import os

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from config import config
from extensions import db, migrate, jwt, cors, limiter
from app.errors import ApiError, ErrorCode


def create_app(config_name=None):
    """Application factory pattern"""

    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])
    app.logger.setLevel(getattr(logging, str(app.config['LOG_LEVEL']).upper(), logging.INFO))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    cors.init_app(app, resources={
        r"/api/*": {
            "origins": app.config['CORS_ORIGINS'],
            "methods": ["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"]
        }
    })
    limiter.init_app(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)
    register_jwt_handlers()

    # Create database tables
    with app.app_context():
        from app import models  # noqa: F401
        db.create_all()

    return app


def register_blueprints(app):
    """Register Flask blueprints"""
    from app.api.availability import availability_bp
    from app.api.blocked_dates import blocked_dates_bp
    from app.api.bookings import bookings_bp

    # API v1
    app.register_blueprint(availability_bp, url_prefix='/api/plots')
    app.register_blueprint(blocked_dates_bp, url_prefix='/api/plots')
    app.register_blueprint(bookings_bp, url_prefix='/api/bookings')

    # Health check endpoint
    @app.route('/health')
    def health_check():
        return jsonify({'status': 'healthy', 'message': 'API is running'}), 200

    @app.route('/')
    def index():
        return jsonify({
            'message': 'Welcome to the Plot Availability API',
            'version': '1.0.0',
            'endpoints': {
                'availability': '/api/plots/<id>/availability',
                'blocked_dates': '/api/plots/<id>/blocked-dates',
                'bookings': '/api/bookings',
            }
        }), 200


def error_response(code, message, status):
    return jsonify({'error': message, 'code': code.value}), status


def register_error_handlers(app):
    """Register error handlers"""

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        if error.status_code >= 500:
            app.logger.error(f'{error.code.value}: {error.message}')
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(400)
    def bad_request(error):
        return error_response(ErrorCode.VALIDATION_ERROR, 'Bad Request', 400)

    @app.errorhandler(401)
    def unauthorized(error):
        return error_response(ErrorCode.UNAUTHORIZED, 'Authentication required', 401)

    @app.errorhandler(403)
    def forbidden(error):
        return error_response(ErrorCode.FORBIDDEN, 'Insufficient permissions', 403)

    @app.errorhandler(404)
    def not_found(error):
        return error_response(ErrorCode.NOT_FOUND, 'Resource not found', 404)

    @app.errorhandler(429)
    def rate_limited(error):
        return error_response(ErrorCode.RATE_LIMITED, f'Rate limit exceeded: {error.description}', 429)

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return error_response(ErrorCode.INTERNAL_ERROR, 'An unexpected error occurred', 500)

    @app.errorhandler(Exception)
    def handle_exception(error):
        if isinstance(error, HTTPException):
            return jsonify({'error': error.name, 'code': ErrorCode.VALIDATION_ERROR.value}), error.code
        db.session.rollback()
        app.logger.exception(f'Unhandled exception: {str(error)}')
        return error_response(ErrorCode.INTERNAL_ERROR, 'An unexpected error occurred', 500)


def register_jwt_handlers():
    """Render JWT failures in the same shape as every other error"""

    @jwt.unauthorized_loader
    def missing_token(reason):
        return error_response(ErrorCode.UNAUTHORIZED, 'Authentication required', 401)

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return error_response(ErrorCode.UNAUTHORIZED, f'Invalid token: {reason}', 401)

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return error_response(ErrorCode.UNAUTHORIZED, 'Token has expired', 401)
