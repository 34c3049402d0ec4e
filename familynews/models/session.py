"""
Stored Session Model

Backing table for the database session backend.
"""

from familynews.extensions import db


class StoredSession(db.Model):
    __tablename__ = 'sessions'

    sid = db.Column(db.String(64), primary_key=True)
    data = db.Column(db.JSON, nullable=False, default=dict)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)

    def __repr__(self):
        return f'<StoredSession {self.sid[:8]}>'
