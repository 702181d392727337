"""Tests for /login, /logout, /api/me and /health."""
import pytest
from unittest.mock import patch

from sqlalchemy.exc import OperationalError


class TestLogin:

    def test_first_login_creates_customer(self, client):
        with patch('leadhub.config.ADMIN_EMAILS', set()):
            resp = client.post('/login', json={'uid': 'u1', 'email': 'b@x.com', 'displayName': 'B'})
        assert resp.status_code == 200
        assert resp.get_json()['role'] == 'customer'
        me = client.get('/api/me').get_json()
        assert me['user'] == {'uid': 'u1', 'email': 'b@x.com', 'role': 'customer'}

    def test_allow_listed_email_gets_admin_session(self, client):
        with patch('leadhub.config.ADMIN_EMAILS', {'boss@leadhub.io'}):
            client.post('/login', json={'uid': 'u1', 'email': 'boss@leadhub.io'})
        assert client.get('/api/admin/stats').status_code == 200

    def test_missing_fields(self, client):
        assert client.post('/login', json={'uid': 'u1'}).status_code == 400

    def test_provider_secret_enforced(self, client):
        with patch('leadhub.config.AUTH_PROVIDER_SECRET', 's3cret'):
            bad = client.post('/login', json={'uid': 'u1', 'email': 'b@x.com'})
            good = client.post('/login', json={'uid': 'u1', 'email': 'b@x.com'},
                               headers={'X-Auth-Provider-Secret': 's3cret'})
        assert bad.status_code == 401
        assert good.status_code == 200

    def test_logout(self, client, login):
        login()
        client.post('/logout')
        assert client.get('/api/me').status_code == 401


class TestHealth:

    def test_healthy(self, client):
        resp = client.get('/health')
        assert resp.status_code == 200
        assert resp.get_json()['status'] == 'healthy'

    def test_degraded(self, client, patch_get_session):
        with patch.object(patch_get_session, 'execute', side_effect=OperationalError('SELECT 1', {}, Exception('down'))):
            resp = client.get('/health')
        assert resp.status_code == 503
        assert resp.get_json()['status'] == 'degraded'


class TestErrorHandlers:

    def test_json_404(self, client):
        resp = client.get('/nope')
        assert resp.status_code == 404
        assert resp.get_json() == {'error': 'Not found'}

    def test_json_405(self, client):
        assert client.put('/health').status_code == 405
