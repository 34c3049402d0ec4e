import io

import pytest

from familynews import create_app
from familynews.config import TestConfig
from familynews.extensions import db
from familynews.models import News, User

ADMIN_EMAIL = TestConfig.ADMIN_EMAIL
ADMIN_PASSWORD = TestConfig.ADMIN_PASSWORD


@pytest.fixture()
def upload_dir(tmp_path):
    return tmp_path / 'uploads'


@pytest.fixture()
def app(upload_dir):
    class Config(TestConfig):
        UPLOAD_FOLDER = str(upload_dir)

    app = create_app(Config)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def admin_client(client):
    r = login_admin(client)
    assert r.status_code == 302
    return client


def login_admin(client, email=ADMIN_EMAIL, password=ADMIN_PASSWORD):
    return client.post('/admin/login', data={'email': email, 'password': password})


def register(client, name, email, password, confirm=None):
    return client.post('/register', data={
        'name': name,
        'email': email,
        'password': password,
        'confirm_password': password if confirm is None else confirm,
    })


def login(client, email, password):
    return client.post('/login', data={'email': email, 'password': password})


def make_user(app, name='Reader', email='reader@example.com', password='secret1', is_admin=False):
    with app.app_context():
        user = User(name=name, email=email, is_admin=is_admin)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user.id


def make_news(app, **fields):
    fields.setdefault('title', 'Family reunion')
    fields.setdefault('content', 'Everyone is invited to the summer reunion.')
    with app.app_context():
        news = News(**fields)
        db.session.add(news)
        db.session.commit()
        return news.id


def image_upload(size=1024, filename='photo.jpg', mimetype='image/jpeg'):
    """Tuple accepted by the werkzeug test client for a file field."""
    payload = b'\xff\xd8\xff\xe0' + b'\0' * max(size - 4, 0)
    return (io.BytesIO(payload), filename, mimetype)


def uploaded_files(upload_dir):
    if not upload_dir.exists():
        return []
    return sorted(p.name for p in upload_dir.iterdir())
