"""
Flask extensions for the plot availability API

Created unbound here and attached in create_app, so models and
services can import them without importing the app.
"""

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address


db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
cors = CORS()
# Default limits come from RATELIMIT_DEFAULT; routes add tighter per-view limits
limiter = Limiter(key_func=get_remote_address)
