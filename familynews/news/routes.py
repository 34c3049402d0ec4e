"""
News Routes

Public reading, commenting and diagnostic endpoints.
"""

import logging
import os

from flask import render_template, request, redirect, url_for, flash, jsonify, abort, current_app, session, \
    send_from_directory
from flask_login import current_user
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from familynews.admin.decorators import is_admin_session
from familynews.extensions import db
from familynews.models import News, Comment, User
from familynews.news import news_bp
from familynews.services import published_news, parse_rating, add_comment
from familynews.services.uploads import UPLOAD_URL_PREFIX

logger = logging.getLogger(__name__)


def _visible_news_or_404(news_id):
    news = db.get_or_404(News, news_id)
    if not news.is_published and not is_admin_session():
        abort(404)
    return news


def _render_detail(news, comment_error=None, status=200, comment_text=''):
    return render_template('news/detail.html',
                           news=news,
                           comments=news.comments,
                           comment_error=comment_error,
                           comment_text=comment_text), status


def _site_counts():
    return {
        'news': News.query.count(),
        'published': News.query.filter_by(is_published=True).count(),
        'users': User.query.count(),
        'comments': Comment.query.count(),
    }


@news_bp.route('/')
def index():
    """Published articles, newest first."""
    return render_template('news/index.html', news_list=published_news())


@news_bp.route('/news/<int:news_id>')
def news_detail(news_id):
    return _render_detail(_visible_news_or_404(news_id))


@news_bp.route('/news/<int:news_id>/comment', methods=['POST'])
def add_news_comment(news_id):
    """Add a reader comment; problems are shown inline on the article page."""
    news = _visible_news_or_404(news_id)
    comment_text = request.form.get('text', '').strip()

    if not current_user.is_authenticated:
        return _render_detail(news, 'You must be logged in to comment.', 401, comment_text)

    if not comment_text:
        return _render_detail(news, 'Comment text cannot be empty.', 400)

    try:
        rating = parse_rating(request.form.get('rating'))
    except ValueError as e:
        return _render_detail(news, str(e), 400, comment_text)

    add_comment(news, current_user, comment_text, rating)
    flash('Thank you, your comment was added.', 'success')
    return redirect(url_for('news.news_detail', news_id=news.id))


@news_bp.route(UPLOAD_URL_PREFIX + '<path:filename>')
def uploaded_file(filename):
    """Article images stored under UPLOAD_FOLDER."""
    return send_from_directory(current_app.config['UPLOAD_FOLDER'], filename)


@news_bp.route('/about')
def about():
    return render_template('pages/about.html')


@news_bp.route('/contact')
def contact():
    return render_template('pages/contact.html')


@news_bp.route('/health')
def health():
    """Database connectivity and record counts as JSON."""
    try:
        db.session.execute(text('SELECT 1'))
        counts = _site_counts()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error('Health check failed: %s', e)
        return jsonify({'status': 'error', 'database': 'error',
                        'error': e.__class__.__name__}), 503

    return jsonify({'status': 'ok', 'database': 'connected', 'counts': counts})


@news_bp.route('/debug')
def debug():
    """Human-readable diagnostics page."""
    database_ok = True
    counts = {}
    try:
        db.session.execute(text('SELECT 1'))
        counts = _site_counts()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error('Debug page database check failed: %s', e)
        database_ok = False

    upload_folder = current_app.config['UPLOAD_FOLDER']
    return render_template('pages/debug.html',
                           database_ok=database_ok,
                           counts=counts,
                           upload_folder_exists=os.path.isdir(upload_folder),
                           session_backend=current_app.config['SESSION_BACKEND'],
                           production=current_app.config['PRODUCTION'],
                           session_is_admin=session.is_admin,
                           user_logged_in=current_user.is_authenticated)
