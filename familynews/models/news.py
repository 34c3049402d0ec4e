"""
News and Comment Models
"""

from familynews.utils import utcnow

from familynews.extensions import db

DEFAULT_CATEGORY = 'family'
DEFAULT_AUTHOR = 'Site Administrator'


class News(db.Model):
    """A publishable article written by an administrator"""
    __tablename__ = 'news'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(100), default=DEFAULT_CATEGORY, nullable=False)
    author = db.Column(db.String(100), default=DEFAULT_AUTHOR, nullable=False)
    # Public URL of the stored image, empty when there is none
    image_url = db.Column(db.String(255), default='', nullable=False)
    is_published = db.Column(db.Boolean, default=True, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, index=True)

    comments = db.relationship('Comment', backref='news', lazy=True,
                               cascade='all, delete-orphan',
                               order_by='Comment.created_at')

    def __repr__(self):
        return f'<News {self.id} {self.title!r}>'


class Comment(db.Model):
    """Reader remark on a news item, with an optional 0-5 rating"""
    __tablename__ = 'comments'
    __table_args__ = (
        db.CheckConstraint('rating IS NULL OR (rating >= 0 AND rating <= 5)',
                           name='ck_comment_rating_range'),
    )

    MIN_RATING = 0
    MAX_RATING = 5

    id = db.Column(db.Integer, primary_key=True)
    news_id = db.Column(db.Integer, db.ForeignKey('news.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    text = db.Column(db.Text, nullable=False)
    rating = db.Column(db.Integer)
    created_at = db.Column(db.DateTime, default=utcnow)

    def __repr__(self):
        return f'<Comment News:{self.news_id} User:{self.user_id}>'
