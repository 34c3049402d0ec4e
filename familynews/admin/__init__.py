"""
Admin Blueprint

Panel for managing news articles. Access is granted by the admin flag in the
server-side session record.
"""

from flask import Blueprint

admin_bp = Blueprint('admin', __name__)

from familynews.admin import routes  # noqa: E402, F401
