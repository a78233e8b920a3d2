import pytest

from config import Config
from app import create_app, db
from app.models.page import Page, page_data_to_db_row
from app.models.user import User
from tests.helpers import ADMIN_PASSWORD, ADMIN_USERNAME, sample_page_data


@pytest.fixture
def app(tmp_path):
    class TestConfig(Config):
        TESTING = True
        SECRET_KEY = 'test-secret-key'
        SQLALCHEMY_DATABASE_URI = 'sqlite://'
        WTF_CSRF_ENABLED = False
        RATELIMIT_ENABLED = False
        PUBLIC_FOLDER = str(tmp_path / 'public')
        SITE_URL = 'https://example.test'
        ALLOWED_HOSTS = []
        PAGES_CACHE_TTL = 300
        DEFAULT_SEO_TITLE = 'Fotobudka Chojnice - OG Events'

    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def main_page(app):
    data = sample_page_data()
    with app.app_context():
        db.session.add(Page(**page_data_to_db_row(data)))
        db.session.commit()
    return data


@pytest.fixture
def admin_user(app):
    with app.app_context():
        user = User(username=ADMIN_USERNAME)
        user.set_password(ADMIN_PASSWORD)
        db.session.add(user)
        db.session.commit()
        return user.id


@pytest.fixture
def admin_client(client, admin_user):
    resp = client.post('/admin/login', data={'username': ADMIN_USERNAME, 'password': ADMIN_PASSWORD})
    assert resp.status_code == 302
    return client
