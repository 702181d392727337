"""
Database engine + session factory.

SQLite for local dev and tests, Postgres in production. Services open one
session per operation through get_session() and close it themselves.
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool

from leadhub.config import DATABASE_URL

MODEL_MODULES = (
    'leadhub.models.lead',
    'leadhub.models.order',
    'leadhub.models.user',
    'leadhub.models.wishlist',
)


class Base(DeclarativeBase):
    pass


def normalize_url(url):
    """postgres:// (Heroku/Railway style) → postgresql://, which SQLAlchemy 2.x requires."""
    if url.startswith('postgres://'):
        return 'postgresql://' + url[len('postgres://'):]
    return url


def build_engine(url):
    """Engine with the pool settings the backend needs."""
    url = normalize_url(url)
    if url in ('sqlite://', 'sqlite:///:memory:'):
        # One shared connection, otherwise every checkout sees a fresh empty database
        return create_engine(url, connect_args={'check_same_thread': False}, poolclass=StaticPool)
    if url.startswith('sqlite'):
        return create_engine(url, connect_args={'check_same_thread': False})
    return create_engine(url, pool_pre_ping=True, pool_size=5, max_overflow=10)


def import_models():
    """Import every model module so Base.metadata knows all tables."""
    import importlib
    for name in MODEL_MODULES:
        importlib.import_module(name)


def create_schema(bind):
    """create_all() for local preview and tests. Production schema is managed by Alembic."""
    import_models()
    Base.metadata.create_all(bind)


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(bind=engine)


def get_session():
    """Return a new DB session."""
    return SessionLocal()
