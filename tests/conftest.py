import pytest

from menuplanner import create_app
from menuplanner.constants import Table
from menuplanner.extensions import db as _db
from menuplanner.services import AuthService, RecordStore, transaction

TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite://',
    'SECRET_KEY': 'test-secret',
    'JWT_SECRET_KEY': 'test-jwt-secret',
    'ALLOW_REGISTRATION': True,
    'LOG_LEVEL': 'DEBUG',
}


@pytest.fixture
def app():
    app = create_app(TEST_CONFIG)
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def session(app):
    return _db.session


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def api_key(session):
    return AuthService.create_api_key(session, 'test suite').data['apikey']


@pytest.fixture
def headers(api_key):
    return {'Authorization': f'Bearer {api_key}'}


@pytest.fixture
def make_record(session):
    def _make(table, **fields):
        with transaction(session):
            return RecordStore.insert(session, table, fields).data
    return _make


@pytest.fixture
def categories(make_record):
    return [make_record(Table.CATEGORIES, name=name) for name in ('Soup', 'Vegan', 'Quick')]
