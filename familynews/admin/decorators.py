"""
Admin Decorator
"""

from functools import wraps

from flask import session, redirect, url_for
from flask_login import current_user


def is_admin_session():
    """True when the session carries the admin flag, directly or via the logged-in user."""
    if session.is_admin:
        return True
    return bool(current_user.is_authenticated and current_user.is_admin)


def admin_required(f):
    """Decorator to ensure the request is from an authenticated admin.

    Anyone else is sent to /admin/login and the view is not run.
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        if not is_admin_session():
            return redirect(url_for('admin.admin_login'))
        return f(*args, **kwargs)
    return wrapper
