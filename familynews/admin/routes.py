"""
Admin Routes

Administrator login/logout and the news management panel.
"""

import logging

from flask import render_template, request, redirect, url_for, flash, session

from familynews.admin import admin_bp
from familynews.admin.decorators import admin_required, is_admin_session
from familynews.extensions import db
from familynews.models import News, User
from familynews.services import (
    NewsValidationError,
    UploadError,
    all_news,
    panel_stats,
    get_uploaded_image,
    create_news,
    update_news,
    delete_news,
)

logger = logging.getLogger(__name__)


@admin_bp.route('/login', methods=['GET', 'POST'])
def admin_login():
    """Admin login, checked against administrator accounts in the database."""
    if is_admin_session():
        return redirect(url_for('admin.admin_dashboard'))

    if request.method == 'POST':
        email = request.form.get('email', '').strip().lower()
        password = request.form.get('password', '')

        if not email or not password:
            flash('Please enter both email and password.', 'danger')
            return render_template('admin/login.html', email=email)

        user = User.query.filter_by(email=email).first()
        if user and user.is_admin and user.check_password(password):
            session.clear()
            session.regenerate()
            session['is_admin'] = True
            session['admin_user_id'] = user.id
            session['admin_name'] = user.name
            logger.info('Administrator %s logged in', user.email)
            flash('Welcome, Administrator!', 'success')
            return redirect(url_for('admin.admin_dashboard'))

        logger.warning('Failed admin login for %s', email)
        flash('Invalid administrator credentials.', 'danger')
        return render_template('admin/login.html', email=email)

    return render_template('admin/login.html')


@admin_bp.route('/logout')
def admin_logout():
    """Admin logout - destroys the whole session record."""
    # an anonymous visit has nothing to destroy and must not leave a record behind
    if session.new or not session:
        return redirect(url_for('news.index'))
    session.clear()
    session.regenerate()
    flash('You have been logged out of the admin panel.', 'info')
    return redirect(url_for('news.index'))


@admin_bp.route('')
@admin_required
def admin_dashboard():
    """All articles, drafts included, with site totals."""
    return render_template('admin/dashboard.html',
                           news_list=all_news(),
                           stats=panel_stats(),
                           admin_name=session.get('admin_name', 'Admin'))


@admin_bp.route('/add-news', methods=['POST'])
@admin_required
def add_news():
    try:
        news = create_news(request.form, get_uploaded_image(request.files))
    except (NewsValidationError, UploadError) as e:
        flash(str(e), 'danger')
        return redirect(url_for('admin.admin_dashboard'))

    flash(f'"{news.title}" was added.', 'success')
    return redirect(url_for('admin.admin_dashboard'))


@admin_bp.route('/edit-news/<int:news_id>', methods=['GET', 'POST'])
@admin_required
def edit_news(news_id):
    news = db.get_or_404(News, news_id)

    if request.method == 'POST':
        try:
            update_news(news, request.form, get_uploaded_image(request.files))
        except (NewsValidationError, UploadError) as e:
            flash(str(e), 'danger')
            return redirect(url_for('admin.edit_news', news_id=news_id))

        flash(f'"{news.title}" was updated.', 'success')
        return redirect(url_for('admin.admin_dashboard'))

    return render_template('admin/edit_news.html', news=news)


@admin_bp.route('/delete-news/<int:news_id>', methods=['POST'])
@admin_required
def delete_news_item(news_id):
    news = db.get_or_404(News, news_id)
    title = news.title
    delete_news(news)
    flash(f'"{title}" was deleted.', 'success')
    return redirect(url_for('admin.admin_dashboard'))
