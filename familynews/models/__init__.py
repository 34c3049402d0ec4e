"""
Models Package

Exports all models for easy importing.
"""

from familynews.models.user import User
from familynews.models.news import News, Comment
from familynews.models.product import Product
from familynews.models.session import StoredSession

__all__ = ['User', 'News', 'Comment', 'Product', 'StoredSession']
