"""Tests for leadhub.database — URL handling and engine setup."""
from sqlalchemy import inspect, text
from sqlalchemy.pool import StaticPool

from leadhub.database import normalize_url, build_engine, create_schema


class TestNormalizeUrl:

    def test_postgres_scheme_rewritten(self):
        assert normalize_url('postgres://u:p@host/db') == 'postgresql://u:p@host/db'

    def test_other_urls_untouched(self):
        assert normalize_url('postgresql://u:p@host/db') == 'postgresql://u:p@host/db'
        assert normalize_url('sqlite:///local.db') == 'sqlite:///local.db'


class TestBuildEngine:

    def test_memory_sqlite_shares_one_connection(self):
        engine = build_engine('sqlite:///:memory:')
        assert isinstance(engine.pool, StaticPool)
        with engine.begin() as conn:
            conn.execute(text('CREATE TABLE t (x INTEGER)'))
        with engine.connect() as conn:
            assert conn.execute(text('SELECT count(*) FROM t')).scalar() == 0
        engine.dispose()

    def test_create_schema_builds_all_tables(self):
        engine = build_engine('sqlite://')
        create_schema(engine)
        assert set(inspect(engine).get_table_names()) >= {'leads', 'orders', 'users', 'wishlist'}
        engine.dispose()
