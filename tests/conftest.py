import pytest

from config import TestingConfig
from models import db, User, ProjectStatus
from server import create_app, seed_defaults
from tests.helpers import headers_for, make_user


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        seed_defaults(app)
        admin = User.query_first(username=app.config['ADMIN_USERNAME'])
        admin.email = 'admin@research-apps.test'
        db.session.commit()
        app.extensions['mailman'].outbox = []
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin(app):
    return User.query_first(username=app.config['ADMIN_USERNAME'])


@pytest.fixture
def mentor(app):
    return make_user('mentor1', 'mentor', full_name='Meera Rao',
                     email='meera@research-apps.test', specialization='Machine Learning')


@pytest.fixture
def other_mentor(app):
    return make_user('mentor2', 'mentor', full_name='Arjun Das')


@pytest.fixture
def rbm(app):
    return make_user('rbm1', 'rbm', full_name='Ravi Menon')


@pytest.fixture
def counselor(app):
    return make_user('counselor1', 'councillor', full_name='Priya Shah')


@pytest.fixture
def admin_headers(admin):
    return headers_for(admin)


@pytest.fixture
def mentor_headers(mentor):
    return headers_for(mentor)


@pytest.fixture
def statuses(app):
    return {s.status_name: s for s in ProjectStatus.query.all()}
