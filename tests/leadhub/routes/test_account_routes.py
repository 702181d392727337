"""Tests for cart, checkout, purchased leads, wishlist and profile endpoints."""
import io

import pandas as pd
import pytest

from leadhub.models.order import Order
from leadhub.models.user import UserProfile

MASKED_EMAIL = '••••••@••••.com'


class TestCart:

    def test_add_and_get(self, client, make_lead):
        lead = make_lead(price=10.0)
        resp = client.post('/api/cart', json={'leadId': lead.id})
        assert resp.status_code == 201
        data = client.get('/api/cart').get_json()
        assert data['count'] == 1
        assert data['total'] == 10.0

    def test_items_masked_without_login(self, client, make_lead):
        lead = make_lead(email='secret@hidden.com', website_url='https://hidden.com',
                         founded='1999', facebook_pixel='Active', price=7.5)
        added = client.post('/api/cart', json={'leadId': lead.id}).get_json()

        for data in (added,
                     client.get('/api/cart').get_json(),
                     client.delete('/api/cart/other').get_json()):
            item = data['items'][0]
            assert item['email'] == MASKED_EMAIL
            assert item['websiteUrl'] == 'https://•••••.com'
            assert 'founded' not in item
            assert 'facebookPixel' not in item
            assert item['price'] == 7.5

    def test_add_requires_lead_id(self, client):
        assert client.post('/api/cart', json={}).status_code == 400

    def test_remove(self, client, make_lead):
        lead = make_lead()
        client.post('/api/cart', json={'leadId': lead.id})
        assert client.delete(f'/api/cart/{lead.id}').get_json()['count'] == 0

    def test_clear(self, client, make_lead):
        client.post('/api/cart', json={'leadId': make_lead().id})
        client.delete('/api/cart')
        assert client.get('/api/cart').get_json()['count'] == 0


class TestCheckout:

    def test_requires_login(self, client):
        assert client.post('/api/cart/checkout').status_code == 401

    def test_empty_cart(self, client, login):
        login()
        assert client.post('/api/cart/checkout').status_code == 400

    def test_creates_pending_orders_masked(self, client, login, make_lead, db_session):
        login(uid='buyer-1', email='buyer@example.com')
        lead = make_lead(email='real@acme.com')
        client.post('/api/cart', json={'leadId': lead.id})

        resp = client.post('/api/cart/checkout')
        assert resp.status_code == 201
        orders = resp.get_json()['orders']
        assert len(orders) == 1
        assert orders[0]['status'] == 'pending'
        assert orders[0]['leadData']['email'] == MASKED_EMAIL

        stored = db_session.query(Order).one()
        assert stored.user_id == 'buyer-1'
        assert stored.lead_data['email'] == 'real@acme.com'
        assert client.get('/api/cart').get_json()['count'] == 0

    def test_deleted_lead_in_cart_rejected(self, client, login, make_lead, db_session):
        login()
        with client.session_transaction() as sess:
            sess['cart'] = ['missing-lead']
        resp = client.post('/api/cart/checkout')
        assert resp.status_code == 400
        assert db_session.query(Order).count() == 0

    def test_sold_lead_in_cart_rejected(self, client, login, make_lead, db_session):
        login()
        lead = make_lead(status='sold')
        client.post('/api/cart', json={'leadId': lead.id})
        resp = client.post('/api/cart/checkout')
        assert resp.status_code == 400
        assert 'no longer available' in resp.get_json()['error']
        assert db_session.query(Order).count() == 0


class TestMyOrders:

    def test_pending_masked_confirmed_clear(self, client, login, make_lead, make_order):
        login(uid='buyer-1')
        make_order(make_lead(email='pending@acme.com'), user_id='buyer-1', status='pending')
        make_order(make_lead(email='done@acme.com'), user_id='buyer-1', status='confirmed')

        orders = client.get('/api/orders').get_json()['orders']
        emails = {o['status']: o['leadData']['email'] for o in orders}
        assert emails == {'pending': MASKED_EMAIL, 'confirmed': 'done@acme.com'}
        pending = [o for o in orders if o['status'] == 'pending'][0]
        assert 'founded' not in pending['leadData']

    def test_other_users_orders_hidden(self, client, login, make_lead, make_order):
        login(uid='buyer-1')
        make_order(make_lead(), user_id='buyer-2')
        assert client.get('/api/orders').get_json()['orders'] == []

    def test_export(self, client, login, make_lead, make_order):
        login(uid='buyer-1')
        make_order(make_lead(email='done@acme.com'), user_id='buyer-1', status='confirmed')
        make_order(make_lead(email='wait@acme.com'), user_id='buyer-1', status='pending')

        resp = client.get('/api/orders/export')
        assert resp.status_code == 200
        assert 'LeadHub_Export_' in resp.headers['Content-Disposition']
        frame = pd.read_excel(io.BytesIO(resp.data), engine='openpyxl')
        assert list(frame['Email']) == ['done@acme.com']


class TestWishlistRoutes:

    def test_add_list_remove(self, client, login, make_lead):
        login()
        lead = make_lead()
        assert client.post('/api/wishlist', json={'leadId': lead.id}).status_code == 201
        assert client.post('/api/wishlist', json={'leadId': lead.id}).status_code == 200
        assert len(client.get('/api/wishlist').get_json()['leads']) == 1
        assert client.delete(f'/api/wishlist/{lead.id}').status_code == 200
        assert client.delete(f'/api/wishlist/{lead.id}').status_code == 404

    def test_list_masks_contact_fields(self, client, login, make_lead):
        login()
        lead = make_lead(email='secret@hidden.com', founded='1999', facebook_pixel='Active')
        client.post('/api/wishlist', json={'leadId': lead.id})
        item = client.get('/api/wishlist').get_json()['leads'][0]
        assert item['email'] == MASKED_EMAIL
        assert 'founded' not in item
        assert 'facebookPixel' not in item
        assert item['firstName'] == lead.first_name

    def test_unknown_lead(self, client, login):
        login()
        assert client.post('/api/wishlist', json={'leadId': 'missing'}).status_code == 404

    def test_requires_login(self, client):
        assert client.get('/api/wishlist').status_code == 401


class TestProfileRoutes:

    def test_get_and_patch(self, client, login, db_session, make_lead):
        login(uid='u1', email='b@x.com')
        db_session.add(UserProfile(uid='u1', email='b@x.com', role='customer'))
        db_session.commit()
        make_lead(industry='Legal', location='Chicago, IL')

        data = client.get('/api/profile').get_json()
        assert data['profile']['uid'] == 'u1'
        assert data['facets']['industries'] == ['Legal']

        resp = client.patch('/api/profile', json={'companyName': 'Acme'})
        assert resp.status_code == 200
        assert resp.get_json()['profile']['companyName'] == 'Acme'

    def test_patch_bad_type(self, client, login, db_session):
        login(uid='u1')
        db_session.add(UserProfile(uid='u1', email='b@x.com', role='customer'))
        db_session.commit()
        assert client.patch('/api/profile', json={'professionalInterests': 'x'}).status_code == 400

    def test_missing_profile(self, client, login):
        login(uid='ghost')
        assert client.get('/api/profile').status_code == 404
        assert client.patch('/api/profile', json={}).status_code == 404
