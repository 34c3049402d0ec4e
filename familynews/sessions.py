"""
Server-side Sessions

The browser only ever holds a signed, opaque session id. The record behind it
lives in a ``SessionStore`` and is exposed to views as ``flask.session``:

- ``session['is_admin']`` marks an admin session
- ``session['_user_id']`` is written by Flask-Login for reader sessions

Clearing the session (``session.clear()``) deletes the stored record and the
cookie, so logging out twice is harmless.
"""

import copy
import logging
import secrets
import threading

from flask.sessions import SessionInterface, SessionMixin
from itsdangerous import BadSignature, Signer
from werkzeug.datastructures import CallbackDict

from familynews.config import ConfigurationError
from familynews.extensions import db
from familynews.utils import utcnow

logger = logging.getLogger(__name__)


def _new_sid():
    return secrets.token_urlsafe(32)


class ServerSession(CallbackDict, SessionMixin):
    """Session record bound to one session id."""

    def __init__(self, initial=None, sid=None, new=False):
        def on_update(self):
            self.modified = True
            self.accessed = True

        super().__init__(initial, on_update)
        self.sid = sid or _new_sid()
        self.new = new
        self.previous_sid = None
        self.modified = False
        self.accessed = False

    def __getitem__(self, key):
        self.accessed = True
        return super().__getitem__(key)

    def get(self, key, default=None):
        self.accessed = True
        return super().get(key, default)

    def setdefault(self, key, default=None):
        self.accessed = True
        return super().setdefault(key, default)

    @property
    def is_admin(self):
        return bool(self.get('is_admin'))

    def regenerate(self):
        """Move the record to a fresh id; the old one is dropped on save."""
        if self.previous_sid is None and not self.new:
            self.previous_sid = self.sid
        self.sid = _new_sid()
        self.modified = True


class SessionStore:
    """Maps a session id to a plain dict of session data."""

    def load(self, sid):
        raise NotImplementedError

    def save(self, sid, data, expires_at):
        raise NotImplementedError

    def delete(self, sid):
        raise NotImplementedError


class MemorySessionStore(SessionStore):
    """Process-local store. Records vanish on restart."""

    def __init__(self):
        self._records = {}
        self._lock = threading.Lock()

    def load(self, sid):
        with self._lock:
            record = self._records.get(sid)
            if record is None:
                return None
            expires_at, data = record
            if expires_at <= utcnow():
                del self._records[sid]
                return None
            return copy.deepcopy(data)

    def save(self, sid, data, expires_at):
        with self._lock:
            self._sweep()
            self._records[sid] = (expires_at, copy.deepcopy(data))

    def _sweep(self):
        now = utcnow()
        expired = [sid for sid, (expires_at, _) in self._records.items() if expires_at <= now]
        for sid in expired:
            del self._records[sid]

    def delete(self, sid):
        with self._lock:
            self._records.pop(sid, None)

    def __len__(self):
        return len(self._records)


class DatabaseSessionStore(SessionStore):
    """Store backed by the ``sessions`` table; survives restarts."""

    def load(self, sid):
        from familynews.models import StoredSession

        record = db.session.get(StoredSession, sid)
        if record is None:
            return None
        if record.expires_at <= utcnow():
            db.session.delete(record)
            db.session.commit()
            return None
        return dict(record.data or {})

    def save(self, sid, data, expires_at):
        from familynews.models import StoredSession

        StoredSession.query.filter(StoredSession.expires_at <= utcnow()).delete()
        record = db.session.get(StoredSession, sid)
        if record is None:
            record = StoredSession(sid=sid)
        record.data = data
        record.expires_at = expires_at
        db.session.add(record)
        db.session.commit()

    def delete(self, sid):
        from familynews.models import StoredSession

        StoredSession.query.filter_by(sid=sid).delete()
        db.session.commit()


class StoreSessionInterface(SessionInterface):
    """Flask session interface over a ``SessionStore``."""

    salt = 'familynews-session'

    def __init__(self, store):
        self.store = store

    def get_signer(self, app):
        if not app.secret_key:
            return None
        return Signer(app.secret_key, salt=self.salt)

    def open_session(self, app, request):
        signer = self.get_signer(app)
        if signer is None:
            return None

        token = request.cookies.get(self.get_cookie_name(app))
        if token:
            try:
                sid = signer.unsign(token).decode('utf-8')
            except BadSignature:
                logger.warning('Rejected session cookie with a bad signature')
                sid = None
            if sid:
                data = self.store.load(sid)
                if data is not None:
                    return ServerSession(data, sid=sid)

        return ServerSession(new=True)

    def save_session(self, app, session, response):
        name = self.get_cookie_name(app)
        domain = self.get_cookie_domain(app)
        path = self.get_cookie_path(app)
        secure = self.get_cookie_secure(app)
        samesite = self.get_cookie_samesite(app)
        httponly = self.get_cookie_httponly(app)

        if session.accessed:
            response.vary.add('Cookie')

        if session.previous_sid:
            self.store.delete(session.previous_sid)
            session.previous_sid = None

        if not session:
            if session.modified:
                self.store.delete(session.sid)
                response.delete_cookie(name, domain=domain, path=path, secure=secure,
                                       samesite=samesite, httponly=httponly)
                response.vary.add('Cookie')
            return

        if not self.should_set_cookie(app, session):
            return

        self.store.save(session.sid, dict(session),
                        utcnow() + app.permanent_session_lifetime)
        token = self.get_signer(app).sign(session.sid.encode('utf-8')).decode('utf-8')
        response.set_cookie(name, token,
                            expires=self.get_expiration_time(app, session),
                            httponly=httponly, domain=domain, path=path,
                            secure=secure, samesite=samesite)
        response.vary.add('Cookie')


def build_session_interface(backend):
    """Return the session interface for a ``SESSION_BACKEND`` name."""
    if backend == 'memory':
        return StoreSessionInterface(MemorySessionStore())
    if backend == 'database':
        return StoreSessionInterface(DatabaseSessionStore())
    raise ConfigurationError(f'Unknown SESSION_BACKEND {backend!r}')
