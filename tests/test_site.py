import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from conftest import make_news, make_user
from familynews import create_app
from familynews.config import ConfigurationError, TestConfig
from familynews.extensions import db
from familynews.models import Comment, News, Product, User


def test_missing_database_url_is_fatal():
    class Config(TestConfig):
        SQLALCHEMY_DATABASE_URI = None

    with pytest.raises(ConfigurationError):
        create_app(Config)


def test_unknown_session_backend_is_fatal():
    class Config(TestConfig):
        SESSION_BACKEND = 'carrier-pigeon'

    with pytest.raises(ConfigurationError):
        create_app(Config)


@pytest.mark.parametrize('unset', ['SECRET_KEY', 'ADMIN_PASSWORD'])
def test_production_requires_secrets(unset):
    class Config(TestConfig):
        PRODUCTION = True

    setattr(Config, unset, None)

    with pytest.raises(ConfigurationError, match=unset):
        create_app(Config)


def test_production_with_secrets_boots():
    class Config(TestConfig):
        PRODUCTION = True
        SECRET_KEY = 'a-long-random-production-secret'
        ADMIN_PASSWORD = 'correct horse battery staple'

    app = create_app(Config)
    assert app.secret_key == 'a-long-random-production-secret'
    with app.app_context():
        admin = User.query.filter_by(email=TestConfig.ADMIN_EMAIL).one()
        assert admin.check_password('correct horse battery staple')
        assert not admin.check_password('admin123')
        db.drop_all()


def test_development_falls_back_to_default_secrets():
    class Config(TestConfig):
        SECRET_KEY = None
        ADMIN_PASSWORD = None

    app = create_app(Config)
    assert app.secret_key
    assert app.config['ADMIN_PASSWORD'] == 'admin123'
    with app.app_context():
        db.drop_all()


def test_health_reports_counts(client, app):
    make_news(app, is_published=True)
    make_news(app, is_published=False)

    r = client.get('/health')
    assert r.status_code == 200
    data = r.get_json()
    assert data['status'] == 'ok'
    assert data['database'] == 'connected'
    assert data['counts'] == {'news': 2, 'published': 1, 'users': 1, 'comments': 0}


def test_health_reports_database_failure(client, monkeypatch):
    def refuse():
        raise OperationalError('SELECT COUNT(*) FROM news', {}, Exception('connection refused'))

    monkeypatch.setattr('familynews.news.routes._site_counts', refuse)

    r = client.get('/health')
    assert r.status_code == 503
    assert r.get_json() == {'status': 'error', 'database': 'error', 'error': 'OperationalError'}


def test_debug_page(client):
    r = client.get('/debug')
    assert r.status_code == 200
    body = r.get_data(as_text=True)
    assert 'Database: connected' in body
    assert 'Session backend: memory' in body
    assert 'Admin session: no' in body


def test_debug_page_reports_admin_session(admin_client):
    body = admin_client.get('/debug').get_data(as_text=True)
    assert 'Admin session: yes' in body


def test_make_admin_creates_account(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=['make-admin', 'Boss@X.com', '--name', 'Boss', '--password', 'secret1'])
    assert result.exit_code == 0
    assert 'New admin user created' in result.output

    with app.app_context():
        user = User.query.filter_by(email='boss@x.com').one()
        assert user.is_admin
        assert user.check_password('secret1')


def test_make_admin_promotes_existing_user(app):
    make_user(app, email='reader@example.com')

    result = app.test_cli_runner().invoke(args=['make-admin', 'reader@example.com'])
    assert result.exit_code == 0
    assert 'Existing user promoted to admin' in result.output

    with app.app_context():
        assert User.query.filter_by(email='reader@example.com').one().is_admin


def test_make_admin_unknown_user_without_password(app):
    result = app.test_cli_runner().invoke(args=['make-admin', 'ghost@example.com'])
    assert result.exit_code != 0
    assert 'pass --password' in result.output


def test_news_defaults(app):
    news_id = make_news(app)
    with app.app_context():
        news = db.session.get(News, news_id)
        assert news.category == 'family'
        assert news.author == 'Site Administrator'
        assert news.image_url == ''
        assert news.is_published is True


def test_comment_rating_constraint(app):
    news_id = make_news(app)
    user_id = make_user(app)
    with app.app_context():
        db.session.add(Comment(news_id=news_id, user_id=user_id, text='Hi', rating=9))
        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()


def test_legacy_product_defaults(app):
    with app.app_context():
        product = Product(name='Medjool', price=12.5, quantity=3, description='Soft dates')
        db.session.add(product)
        db.session.commit()
        assert product.type == 'dates'
        assert product.quality == 'excellent'
        assert product.created_at is not None
