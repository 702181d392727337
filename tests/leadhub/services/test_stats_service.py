"""Tests for leadhub.services.stats."""
from leadhub.models.user import UserProfile
from leadhub.services.stats import get_admin_stats, list_users_with_spend, catalog_facets


class TestAdminStats:

    def test_empty(self):
        assert get_admin_stats() == {
            'totalLeads': 0,
            'availableLeads': 0,
            'totalRevenue': 0.0,
            'totalOrders': 0,
            'totalCustomers': 0,
        }

    def test_counts(self, make_lead, make_order):
        a = make_lead(status='available')
        make_lead(status='sold')
        make_order(a, user_id='u1', price=10.0)
        make_order(a, user_id='u1', price=5.0)
        make_order(a, user_id='u2', price=2.5)

        stats = get_admin_stats()
        assert stats['totalLeads'] == 2
        assert stats['availableLeads'] == 1
        assert stats['totalOrders'] == 3
        assert stats['totalRevenue'] == 17.5
        assert stats['totalCustomers'] == 2


class TestUsersWithSpend:

    def test_spend_per_user(self, db_session, make_lead, make_order):
        db_session.add(UserProfile(uid='u1', email='a@x.com', role='customer'))
        db_session.add(UserProfile(uid='u2', email='b@x.com', role='customer'))
        db_session.commit()
        lead = make_lead()
        make_order(lead, user_id='u1', price=4.0)
        make_order(lead, user_id='u1', price=6.0)

        users = {u['uid']: u for u in list_users_with_spend()}
        assert users['u1']['orderCount'] == 2
        assert users['u1']['totalSpent'] == 10.0
        assert users['u2']['orderCount'] == 0
        assert users['u2']['totalSpent'] == 0.0


class TestCatalogFacets:

    def test_distinct_sorted(self, make_lead):
        make_lead(industry='Legal', location='Chicago, IL')
        make_lead(industry='Healthcare', location='')
        make_lead(industry='Legal', location='Austin, TX')
        facets = catalog_facets()
        assert facets['industries'] == ['Healthcare', 'Legal']
        assert facets['locations'] == ['Austin, TX', 'Chicago, IL']
