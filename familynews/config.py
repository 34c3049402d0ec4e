"""
Configuration settings for the Family News site
"""
import os

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class ConfigurationError(RuntimeError):
    """Raised when the application cannot start with the given settings."""


# Fallbacks for local development only
DEV_SECRET_KEY = 'dev-secret-key-change-in-production-12345'
DEV_ADMIN_PASSWORD = 'admin123'


class Config:
    """Flask application configuration"""

    # Flask secret key for sessions; required when PRODUCTION is set
    SECRET_KEY = os.environ.get('SECRET_KEY')

    # Database configuration (required, no fallback)
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Server
    PORT = int(os.environ.get('PORT') or 8000)
    PRODUCTION = _env_flag('PRODUCTION')
    SESSION_COOKIE_SECURE = PRODUCTION
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    # Server-side session storage: 'memory' or 'database'
    SESSION_BACKEND = os.environ.get('SESSION_BACKEND') or 'memory'

    # Uploads
    basedir = os.path.abspath(os.path.dirname(__file__))
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(basedir, 'static', 'uploads')
    MAX_IMAGE_SIZE = 5 * 1024 * 1024
    # Room for the text fields sent alongside the image
    MAX_CONTENT_LENGTH = MAX_IMAGE_SIZE + 64 * 1024
    # Largest single non-file form field (article body, comment text)
    MAX_FORM_MEMORY_SIZE = 1024 * 1024

    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'

    # Bootstrap administrator, created on first start if missing.
    # ADMIN_PASSWORD is required when PRODUCTION is set.
    ADMIN_EMAIL = os.environ.get('ADMIN_EMAIL') or 'admin@familynews.local'
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD')
    ADMIN_NAME = os.environ.get('ADMIN_NAME') or 'Site Administrator'


class TestConfig(Config):
    """Testing configuration"""
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SESSION_BACKEND = 'memory'
    SESSION_COOKIE_SECURE = False
    LOG_LEVEL = 'WARNING'
    ADMIN_EMAIL = 'admin@example.com'
    ADMIN_PASSWORD = 'admin123'
    ADMIN_NAME = 'Test Admin'
