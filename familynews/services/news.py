"""
News Service

Create/update/delete for articles, including the image that belongs to each
article. Routes validate the request shape; this module owns the persistence
and keeps the image files in step with the database.
"""

import logging

from familynews.extensions import db
from familynews.models import News, Comment, User
from familynews.models.news import DEFAULT_AUTHOR, DEFAULT_CATEGORY
from familynews.services.uploads import save_image, remove_image

logger = logging.getLogger(__name__)

TRUTHY_VALUES = ('on', 'true', '1', 'yes')


class NewsValidationError(ValueError):
    """Submitted article fields are incomplete."""


def parse_flag(value):
    """Interpret a checkbox-style form value."""
    if value is None:
        return False
    return str(value).strip().lower() in TRUTHY_VALUES


def published_news():
    """Published articles, newest first."""
    return (News.query.filter_by(is_published=True)
            .order_by(News.created_at.desc(), News.id.desc())
            .all())


def all_news():
    """Every article including drafts, newest first."""
    return News.query.order_by(News.created_at.desc(), News.id.desc()).all()


def panel_stats():
    total = News.query.count()
    published = News.query.filter_by(is_published=True).count()
    return {
        'total_news': total,
        'published_news': published,
        'draft_news': total - published,
        'total_users': User.query.count(),
        'total_comments': Comment.query.count(),
    }


def _read_fields(form):
    title = form.get('title', '').strip()
    content = form.get('content', '').strip()
    if not title or not content:
        raise NewsValidationError('Title and content are both required.')

    return {
        'title': title,
        'content': content,
        'category': form.get('category', '').strip() or DEFAULT_CATEGORY,
        'author': form.get('author', '').strip() or DEFAULT_AUTHOR,
        'is_published': parse_flag(form.get('is_published')),
    }


def create_news(form, image=None):
    """Insert a new article.

    The image is stored before the insert and removed again if the insert fails.

    Raises:
        NewsValidationError: missing title or content
        UploadError: the image was rejected
    """
    fields = _read_fields(form)
    image_url = save_image(image) if image is not None else ''

    news = News(image_url=image_url, **fields)
    try:
        db.session.add(news)
        db.session.commit()
    except Exception:
        db.session.rollback()
        remove_image(image_url)
        raise

    logger.info('Created news %s (published=%s)', news.id, news.is_published)
    return news


def update_news(news, form, image=None):
    """Apply edited fields to ``news``.

    A new image replaces the old one; otherwise a truthy ``remove_image``
    field drops the current image. Old files are deleted only after the
    change is committed.
    """
    fields = _read_fields(form)
    old_image_url = news.image_url
    new_image_url = None

    if image is not None:
        new_image_url = save_image(image)
        news.image_url = new_image_url
    elif parse_flag(form.get('remove_image')):
        news.image_url = ''

    for key, value in fields.items():
        setattr(news, key, value)

    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        if new_image_url:
            remove_image(new_image_url)
        raise

    if old_image_url and old_image_url != news.image_url:
        remove_image(old_image_url)

    logger.info('Updated news %s', news.id)
    return news


def delete_news(news):
    """Delete ``news``, its comments and its image file."""
    news_id = news.id
    image_url = news.image_url

    db.session.delete(news)
    db.session.commit()

    if image_url:
        remove_image(image_url)
    logger.info('Deleted news %s', news_id)


def parse_rating(value):
    """Rating from a comment form: None when blank, else an int in [0, 5].

    Raises:
        ValueError: not a whole number, or outside the allowed range
    """
    if value is None or not str(value).strip():
        return None
    try:
        rating = int(str(value).strip())
    except ValueError:
        raise ValueError('Rating must be a whole number.')
    if not Comment.MIN_RATING <= rating <= Comment.MAX_RATING:
        raise ValueError(f'Rating must be between {Comment.MIN_RATING} and {Comment.MAX_RATING}.')
    return rating


def add_comment(news, user, text, rating=None):
    comment = Comment(news_id=news.id, user_id=user.id, text=text, rating=rating)
    db.session.add(comment)
    db.session.commit()
    logger.info('User %s commented on news %s', user.id, news.id)
    return comment
