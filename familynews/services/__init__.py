"""
Services Package

Exports all services for easy importing.
"""

from familynews.services.uploads import (
    UploadError,
    get_uploaded_image,
    save_image,
    remove_image,
    image_path,
)
from familynews.services.news import (
    NewsValidationError,
    published_news,
    all_news,
    panel_stats,
    parse_flag,
    create_news,
    update_news,
    delete_news,
    parse_rating,
    add_comment,
)

__all__ = [
    'UploadError',
    'get_uploaded_image',
    'save_image',
    'remove_image',
    'image_path',
    'NewsValidationError',
    'published_news',
    'all_news',
    'panel_stats',
    'parse_flag',
    'create_news',
    'update_news',
    'delete_news',
    'parse_rating',
    'add_comment',
]
