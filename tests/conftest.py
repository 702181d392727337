"""Shared test fixtures."""
import pytest
from unittest.mock import patch, MagicMock
from sqlalchemy.orm import sessionmaker

from leadhub.database import build_engine, create_schema


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with schema created."""
    engine = build_engine('sqlite:///:memory:')
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """SQLAlchemy session bound to in-memory SQLite. Rolls back after each test."""
    Session = sessionmaker(bind=db_engine)
    session = Session()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(autouse=True)
def patch_get_session(db_session):
    """Route all get_session() calls to the test session.

    We disable close() so that services calling session.close()
    in their finally blocks don't invalidate the shared test session.
    """
    _real_close = db_session.close
    db_session.close = lambda: None
    with patch('leadhub.database.SessionLocal', return_value=db_session):
        yield db_session
    db_session.close = _real_close


@pytest.fixture
def mock_redis():
    """Mock Redis client backed by a dict, so ImportJob save/load round-trips."""
    store = {}
    mock = MagicMock()
    mock.get.side_effect = store.get
    mock.setex.side_effect = lambda key, ttl, value: store.__setitem__(key, value) or True
    mock.zadd.return_value = 1
    mock.zrevrange.return_value = []
    mock.store = store
    with patch('leadhub.models.import_job.r', mock):
        yield mock


@pytest.fixture
def app():
    """Flask test app."""
    from leadhub import create_app
    app = create_app()
    app.config['TESTING'] = True
    yield app


@pytest.fixture
def client(app):
    """Flask test client."""
    with app.test_client() as c:
        yield c


@pytest.fixture
def login(client):
    """Put a user straight into the session cookie, skipping /login."""
    def _login(uid='buyer-1', email='buyer@example.com', role='customer'):
        with client.session_transaction() as sess:
            sess['uid'] = uid
            sess['email'] = email
            sess['role'] = role
        return {'uid': uid, 'email': email, 'role': role}
    return _login


@pytest.fixture
def login_admin(login):
    return lambda: login(uid='admin-1', email='admin@example.com', role='admin')


@pytest.fixture
def make_lead(db_session):
    """Factory fixture — inserts a Lead and returns it."""
    from leadhub.models.lead import Lead

    counter = {'n': 0}

    def _make(**overrides):
        counter['n'] += 1
        n = counter['n']
        defaults = dict(
            website_name=f'Shop {n}',
            website_url=f'https://shop{n}.com',
            first_name='Jane',
            last_name='Doe',
            job_title='Founder',
            email=f'jane{n}@shop{n}.com',
            instagram=f'@shop{n}',
            linkedin=f'linkedin.com/in/jane{n}',
            industry='E-commerce',
            location='Austin, TX',
            tiktok='',
            founded='2018',
            facebook_pixel='Active',
            price=10.0,
            status='available',
        )
        defaults.update(overrides)
        lead = Lead(**defaults)
        db_session.add(lead)
        db_session.commit()
        return lead
    return _make


@pytest.fixture
def make_order(db_session):
    """Factory fixture — inserts an Order snapshotting the given lead."""
    from leadhub.models.order import Order, LeadSnapshot

    def _make(lead, user_id='buyer-1', status='pending', **overrides):
        lead_dict = lead.to_dict()
        defaults = dict(
            user_id=user_id,
            user_email=f'{user_id}@example.com',
            lead_id=lead.id,
            lead_data=LeadSnapshot.from_lead(lead_dict).to_dict(),
            price=lead_dict['price'],
            status=status,
        )
        defaults.update(overrides)
        order = Order(**defaults)
        db_session.add(order)
        db_session.commit()
        return order
    return _make
