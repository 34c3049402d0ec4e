"""
Auth Blueprint

Reader registration and login using Flask-Login.
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__)

from familynews.auth import routes  # noqa: E402, F401
