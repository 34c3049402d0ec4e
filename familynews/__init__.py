"""
Family News - Application Factory

This module provides the Flask application factory pattern for creating
and configuring the application instance.
"""

import logging

from flask import Flask, render_template, request, redirect, url_for, flash
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import RequestEntityTooLarge

from familynews.extensions import db, login_manager
from familynews.config import Config, ConfigurationError, DEV_ADMIN_PASSWORD, DEV_SECRET_KEY
from familynews.sessions import build_session_interface

logger = logging.getLogger(__name__)


def create_app(config_class=Config):
    """Create and configure the Flask application.

    Args:
        config_class: Configuration class to use (default: Config)

    Returns:
        Configured Flask application instance

    Raises:
        ConfigurationError: no database URL, an unknown session backend, or
            PRODUCTION without SECRET_KEY and ADMIN_PASSWORD
    """
    app = Flask(__name__)
    app.config.from_object(config_class)
    _configure_logging(app)

    if not app.config.get('SQLALCHEMY_DATABASE_URI'):
        raise ConfigurationError('DATABASE_URL is not set')

    _apply_secret_defaults(app)

    app.session_interface = build_session_interface(app.config['SESSION_BACKEND'])

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)
    login_manager.login_view = 'auth.login'
    login_manager.login_message_category = 'info'

    # Register blueprints
    from familynews.auth import auth_bp
    from familynews.admin import admin_bp
    from familynews.news import news_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(news_bp)

    from familynews.cli import make_admin_command
    app.cli.add_command(make_admin_command)

    # Context processor for admin flag
    @app.context_processor
    def inject_is_admin_flag():
        """Inject `is_admin` flag into templates based on SESSION."""
        from familynews.admin.decorators import is_admin_session
        return dict(is_admin=is_admin_session())

    # User loader for Flask-Login
    @login_manager.user_loader
    def load_user(user_id):
        from familynews.models import User
        return db.session.get(User, int(user_id))

    _register_error_handlers(app)

    # Create database tables
    with app.app_context():
        db.create_all()
        _ensure_default_admin(app)

    logger.info('Application ready (session backend: %s)', app.config['SESSION_BACKEND'])
    return app


def _apply_secret_defaults(app):
    missing = [name for name in ('SECRET_KEY', 'ADMIN_PASSWORD') if not app.config.get(name)]
    if not missing:
        return
    if app.config.get('PRODUCTION'):
        raise ConfigurationError(f'{" and ".join(missing)} must be set when PRODUCTION is enabled')

    logger.warning('%s not set; using development defaults', ', '.join(missing))
    if 'SECRET_KEY' in missing:
        app.config['SECRET_KEY'] = DEV_SECRET_KEY
    if 'ADMIN_PASSWORD' in missing:
        app.config['ADMIN_PASSWORD'] = DEV_ADMIN_PASSWORD


def _configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(level=level,
                        format='%(asctime)s %(levelname)s [%(name)s] %(message)s')
    logging.getLogger('familynews').setLevel(level)


def _register_error_handlers(app):
    @app.errorhandler(404)
    def not_found(e):
        return render_template('errors/404.html'), 404

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(e):
        # Past MAX_CONTENT_LENGTH the body as a whole is too big; otherwise a
        # single text field went over MAX_FORM_MEMORY_SIZE.
        body_too_large = (request.content_length or 0) > app.config['MAX_CONTENT_LENGTH']
        logger.warning('Rejected oversized request to %s (%s bytes)', request.path, request.content_length)

        if request.blueprint == 'admin':
            if body_too_large:
                max_mb = app.config['MAX_IMAGE_SIZE'] // (1024 * 1024)
                flash(f'Images must be {max_mb} MB or smaller.', 'danger')
            else:
                flash('The article text is too long.', 'danger')
            return redirect(url_for('admin.admin_dashboard'))

        if body_too_large:
            flash('The submission is too large.', 'danger')
        else:
            flash('The text you submitted is too long.', 'danger')
        if request.endpoint == 'news.add_news_comment':
            return redirect(url_for('news.news_detail', news_id=request.view_args['news_id']))
        return redirect(url_for('news.index'))

    @app.errorhandler(SQLAlchemyError)
    def database_error(e):
        db.session.rollback()
        logger.error('Database error on %s: %s', request.path, e)
        return render_template('errors/database.html'), 503

    @app.errorhandler(500)
    def internal_error(e):
        original = getattr(e, 'original_exception', None)
        logger.error('Unhandled error on %s: %r', request.path, original or e)
        db.session.rollback()
        return render_template('errors/500.html'), 500


def _ensure_default_admin(app):
    """Ensure the bootstrap administrator account exists and has admin rights."""
    from familynews.models import User

    email = app.config['ADMIN_EMAIL'].strip().lower()
    admin = User.query.filter_by(email=email).first()

    if admin is None:
        admin = User(name=app.config['ADMIN_NAME'], email=email, is_admin=True)
        admin.set_password(app.config['ADMIN_PASSWORD'])
        db.session.add(admin)
        db.session.commit()
        logger.info('Created default admin account %s', email)
    elif not admin.is_admin:
        admin.is_admin = True
        db.session.commit()
        logger.info('Restored admin rights for %s', email)
