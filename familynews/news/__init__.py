"""
News Blueprint

Public pages: published articles, article detail with comments, static
information pages and diagnostics.
"""

from flask import Blueprint

news_bp = Blueprint('news', __name__)

from familynews.news import routes  # noqa: E402, F401
