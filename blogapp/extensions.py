from __future__ import annotations

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Bound to the app in create_app()
db: SQLAlchemy = SQLAlchemy()
migrate: Migrate = Migrate()

# Bearer-only identity: no session cookie, no login view
login_manager: LoginManager = LoginManager()

# Per-client-IP limits; routes add stricter ones on auth and writes
limiter: Limiter = Limiter(key_func=get_remote_address, default_limits=["100 per minute"])
