"""
Flask Extensions

Admin access is tracked by a session flag; registered readers are handled by
Flask-Login. Both live in the same server-side session record.
"""

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager

# Database instance
db = SQLAlchemy()

# Login manager for reader accounts (NOT for the admin flag)
login_manager = LoginManager()
