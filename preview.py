"""
Local preview server — runs the app without Redis.

Creates the SQLite schema, seeds demo leads / orders / users, and runs imports
inline instead of on an RQ worker, so every endpoint works locally against
real DB code paths.

Usage: python preview.py
"""
import os
from unittest.mock import MagicMock

os.environ.setdefault('ADMIN_EMAILS', 'admin@example.com')

# ── Stub Redis before any app imports (import jobs kept in a dict) ───────────
_redis_store = {}
mock_redis = MagicMock()
mock_redis.get.side_effect = _redis_store.get
mock_redis.setex.side_effect = lambda key, ttl, value: _redis_store.__setitem__(key, value) or True
mock_redis.zadd.return_value = 0
mock_redis.zrevrange.return_value = []

import leadhub.extensions
leadhub.extensions.redis_client = mock_redis

from leadhub import create_app
from leadhub.database import create_schema, engine, get_session
from leadhub.models.lead import Lead
from leadhub.models.order import Order, LeadSnapshot
from leadhub.models.user import UserProfile

create_schema(engine)
flask_app = create_app()

# ── Seed demo data into SQLite ───────────────────────────────────────────────
DEMO_LEADS = [
    ('Acme Outdoors', 'https://acme-outdoors.com', 'Jane', 'Doe', 'Founder', 'jane@acme-outdoors.com',
     'E-commerce', 'Austin, TX', '2016', 'Active', 12.0),
    ('Beta Health', 'https://betahealth.io', 'Bob', 'Stone', 'CMO', 'bob@betahealth.io',
     'Healthcare', 'Denver, CO', '2019', 'Not installed', 9.5),
    ('Lumen Legal', 'https://lumenlegal.com', 'Priya', 'Shah', 'Managing Partner', 'priya@lumenlegal.com',
     'Legal', 'Chicago, IL', '2008', 'Active', 15.0),
    ('Kettle & Co', 'https://kettleandco.com', 'Sam', 'Reyes', 'Owner', 'sam@kettleandco.com',
     'Food & Beverage', 'Portland, OR', '2021', 'Active', 5.0),
]

session = get_session()
try:
    if session.query(Lead).count() == 0:
        leads = []
        for (site, url, first, last, title, email, industry, location, founded, pixel, price) in DEMO_LEADS:
            lead = Lead(
                website_name=site, website_url=url, first_name=first, last_name=last,
                job_title=title, email=email, industry=industry, location=location,
                instagram=f'@{first.lower()}', linkedin=f'linkedin.com/in/{first.lower()}{last.lower()}',
                tiktok='', founded=founded, facebook_pixel=pixel, price=price, status='available',
            )
            session.add(lead)
            leads.append(lead)
        session.flush()

        session.add(UserProfile(uid='demo-admin', email='admin@example.com', display_name='Demo Admin', role='admin'))
        session.add(UserProfile(uid='demo-buyer', email='buyer@example.com', display_name='Demo Buyer', role='customer'))

        for lead, status in ((leads[0], 'confirmed'), (leads[1], 'pending')):
            session.add(Order(
                user_id='demo-buyer', user_email='buyer@example.com', lead_id=lead.id,
                lead_data=LeadSnapshot.from_lead(lead.to_dict()).to_dict(),
                price=lead.price, status=status,
            ))

    session.commit()
    print(f"[Preview] Seeded {session.query(Lead).count()} leads, {session.query(Order).count()} orders")
except Exception as e:
    session.rollback()
    print(f"[Preview] Seed error (may already exist): {e}")
finally:
    session.close()

# ── Run imports inline instead of enqueuing on RQ ────────────────────────────
from leadhub.importer import manager as mgr


class _InlineQueue:
    def enqueue(self, func, *args, **kwargs):
        kwargs.pop('job_timeout', None)
        return func(*args, **kwargs)


mgr.get_queue = lambda: _InlineQueue()


if __name__ == '__main__':
    port = int(os.getenv('PORT', 5001))
    print(f"\n  Preview server: http://localhost:{port}")
    print(f"  Log in with POST /login:")
    print(f"    {{\"uid\": \"demo-admin\", \"email\": \"admin@example.com\"}}  — Admin")
    print(f"    {{\"uid\": \"demo-buyer\", \"email\": \"buyer@example.com\"}}  — Buyer (1 confirmed, 1 pending order)")
    print(f"  Endpoints:")
    print(f"    /api/leads          — Marketplace")
    print(f"    /api/orders         — Buyer's purchased leads")
    print(f"    /api/admin/stats    — Admin dashboard")
    print()
    flask_app.run(host='0.0.0.0', port=port, debug=True)
