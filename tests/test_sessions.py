from datetime import datetime, timedelta, timezone

import pytest

from conftest import login_admin
from familynews import create_app
from familynews.config import ConfigurationError, TestConfig
from familynews.extensions import db
from familynews.models import StoredSession
from familynews.sessions import (
    DatabaseSessionStore,
    MemorySessionStore,
    ServerSession,
    StoreSessionInterface,
    build_session_interface,
)
from familynews.utils import utcnow


def test_memory_store_round_trip():
    store = MemorySessionStore()
    expires = utcnow() + timedelta(minutes=5)

    store.save('abc', {'is_admin': True}, expires)
    assert store.load('abc') == {'is_admin': True}
    assert store.load('missing') is None

    store.delete('abc')
    store.delete('abc')
    assert store.load('abc') is None


def test_memory_store_returns_copies():
    store = MemorySessionStore()
    data = {'_flashes': [('info', 'hello')]}
    store.save('abc', data, utcnow() + timedelta(minutes=5))

    data['_flashes'].append(('info', 'changed'))
    loaded = store.load('abc')
    loaded['extra'] = 1
    assert store.load('abc') == {'_flashes': [('info', 'hello')]}


def test_memory_store_drops_expired_records():
    store = MemorySessionStore()
    store.save('old', {'is_admin': True}, utcnow() - timedelta(seconds=1))

    assert store.load('old') is None
    assert len(store) == 0


def test_server_session_tracks_changes():
    session = ServerSession({'a': 1}, sid='fixed')
    assert not session.modified

    session['is_admin'] = True
    assert session.modified
    assert session.is_admin


def test_regenerate_remembers_previous_id():
    session = ServerSession({'a': 1}, sid='old-id')
    session.regenerate()
    assert session.sid != 'old-id'
    assert session.previous_sid == 'old-id'

    fresh = ServerSession(new=True)
    fresh.regenerate()
    assert fresh.previous_sid is None


def test_build_session_interface():
    assert isinstance(build_session_interface('memory').store, MemorySessionStore)
    assert isinstance(build_session_interface('database').store, DatabaseSessionStore)
    with pytest.raises(ConfigurationError):
        build_session_interface('redis')


def test_cookie_holds_only_signed_id(client):
    login_admin(client)

    cookie = client.get_cookie('session')
    assert cookie is not None
    assert 'is_admin' not in cookie.value
    assert cookie.http_only


def test_tampered_cookie_starts_a_new_session(client):
    login_admin(client)
    assert client.get('/admin').status_code == 200

    cookie = client.get_cookie('session')
    client.set_cookie('session', cookie.value[:-2] + 'xx')
    assert client.get('/admin').status_code == 302


def test_logout_deletes_the_stored_record(client, app):
    login_admin(client)
    store = app.session_interface.store
    assert len(store) == 1

    client.get('/admin/logout')
    records = [store.load(sid) for sid in list(store._records)]
    assert not any(r.get('is_admin') for r in records)


@pytest.fixture()
def db_session_app(upload_dir):
    class Config(TestConfig):
        SESSION_BACKEND = 'database'
        UPLOAD_FOLDER = str(upload_dir)

    app = create_app(Config)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


def test_database_backend_persists_and_destroys_sessions(db_session_app):
    client = db_session_app.test_client()
    login_admin(client)
    assert client.get('/admin').status_code == 200

    with db_session_app.app_context():
        admin_records = [s for s in StoredSession.query.all() if s.data.get('is_admin')]
        assert len(admin_records) == 1

    client.get('/admin/logout')
    assert client.get('/admin').status_code == 302

    with db_session_app.app_context():
        assert not [s for s in StoredSession.query.all() if s.data.get('is_admin')]


def test_database_store_expires_records(db_session_app):
    store = DatabaseSessionStore()
    with db_session_app.app_context():
        store.save('stale', {'is_admin': True}, utcnow() - timedelta(seconds=1))
        assert store.load('stale') is None
        assert db.session.get(StoredSession, 'stale') is None


def test_interface_without_secret_key_has_no_session(app):
    interface = StoreSessionInterface(MemorySessionStore())
    app.secret_key = None
    with app.test_request_context() as ctx:
        assert interface.open_session(app, ctx.request) is None


def test_anonymous_logouts_store_nothing(app):
    store = app.session_interface.store

    for _ in range(50):
        visitor = app.test_client()
        assert visitor.get('/logout').status_code == 302
        assert visitor.get('/admin/logout').status_code == 302
        assert visitor.get_cookie('session') is None

    assert len(store) == 0


def test_memory_store_sweeps_expired_records_on_save():
    store = MemorySessionStore()
    for n in range(5):
        store.save(f'stale-{n}', {'n': n}, utcnow() - timedelta(seconds=1))

    store.save('fresh', {'n': 99}, utcnow() + timedelta(minutes=5))
    assert len(store) == 1
    assert store.load('fresh') == {'n': 99}


def test_database_store_sweeps_expired_records_on_save(db_session_app):
    store = DatabaseSessionStore()
    with db_session_app.app_context():
        db.session.add_all([StoredSession(sid=f'stale-{n}', data={},
                                          expires_at=utcnow() - timedelta(seconds=1))
                            for n in range(5)])
        db.session.commit()

        store.save('fresh', {'n': 99}, utcnow() + timedelta(minutes=5))
        assert [s.sid for s in StoredSession.query.all()] == ['fresh']


def test_utcnow_is_naive_utc():
    now = utcnow()
    assert now.tzinfo is None
    assert abs(now - datetime.now(timezone.utc).replace(tzinfo=None)) < timedelta(seconds=5)
