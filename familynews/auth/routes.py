"""
Auth Routes

Reader authentication routes using Flask-Login.
"""

import logging

from flask import render_template, request, redirect, url_for, flash, session
from flask_login import login_user, logout_user, current_user
from sqlalchemy.exc import IntegrityError

from familynews.auth import auth_bp
from familynews.extensions import db
from familynews.models import User

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = 'Email already registered. Please login or use another email.'


def _email_taken(email):
    return User.query.filter_by(email=email).first() is not None


def _safe_next(target):
    if target and target.startswith('/') and not target.startswith('//'):
        return target
    return None


@auth_bp.route('/register', methods=['GET', 'POST'])
def register():
    """User registration route"""
    if current_user.is_authenticated:
        return redirect(url_for('news.index'))

    if request.method == 'POST':
        name = request.form.get('name', '').strip()
        email = request.form.get('email', '').strip().lower()
        password = request.form.get('password', '')
        confirm_password = request.form.get('confirm_password', '')

        # Validation
        if not name:
            flash('Please tell us your name.', 'danger')
            return render_template('auth/register.html', name=name, email=email)

        if not email or '@' not in email:
            flash('Please provide a valid email address.', 'danger')
            return render_template('auth/register.html', name=name, email=email)

        if not password or len(password) < 6:
            flash('Password must be at least 6 characters long.', 'danger')
            return render_template('auth/register.html', name=name, email=email)

        if password != confirm_password:
            flash('Passwords do not match.', 'danger')
            return render_template('auth/register.html', name=name, email=email)

        if _email_taken(email):
            flash(DUPLICATE_EMAIL_MESSAGE, 'danger')
            return render_template('auth/register.html', name=name, email=email)

        new_user = User(name=name, email=email)
        new_user.set_password(password)

        try:
            db.session.add(new_user)
            db.session.commit()
        except IntegrityError:
            # registered by a concurrent request after the check above
            db.session.rollback()
            flash(DUPLICATE_EMAIL_MESSAGE, 'danger')
            return render_template('auth/register.html', name=name, email=email)
        except Exception:
            db.session.rollback()
            logger.exception('Registration failed for %s', email)
            flash('An error occurred during registration. Please try again.', 'danger')
            return render_template('auth/register.html', name=name, email=email)

        logger.info('Registered user %s', email)
        flash('Registration successful! Please login.', 'success')
        return redirect(url_for('auth.login'))

    return render_template('auth/register.html')


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """User login route"""
    if current_user.is_authenticated:
        return redirect(url_for('news.index'))

    if request.method == 'POST':
        email = request.form.get('email', '').strip().lower()
        password = request.form.get('password', '')

        if not email or not password:
            flash('Please provide both email and password.', 'danger')
            return render_template('auth/login.html', email=email)

        user = User.query.filter_by(email=email).first()

        if user is None:
            flash('No account is registered with that email.', 'danger')
            return render_template('auth/login.html', email=email)

        if not user.check_password(password):
            logger.warning('Password mismatch for %s', email)
            flash('Incorrect password. Please try again.', 'danger')
            return render_template('auth/login.html', email=email)

        session.regenerate()
        login_user(user)
        logger.info('User %s logged in', email)
        flash(f'Welcome back, {user.name}!', 'success')

        next_page = _safe_next(request.args.get('next'))
        return redirect(next_page or url_for('news.index'))

    return render_template('auth/login.html')


@auth_bp.route('/logout')
def logout():
    """User logout route"""
    had_session = not session.new and bool(session)
    logout_user()
    session.clear()
    if had_session:
        session.regenerate()
        flash('You have been logged out successfully.', 'info')
    return redirect(url_for('news.index'))
