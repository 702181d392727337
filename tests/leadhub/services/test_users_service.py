"""Tests for leadhub.services.users — allow-list roles and profile editing."""
import pytest
from unittest.mock import patch

from leadhub.models.user import UserProfile
from leadhub.services.users import role_for_email, sync_user_profile, get_profile, update_profile


@pytest.fixture
def admin_allow_list():
    with patch('leadhub.config.ADMIN_EMAILS', {'boss@leadhub.io'}):
        yield


class TestRoleForEmail:

    def test_allow_listed(self, admin_allow_list):
        assert role_for_email('boss@leadhub.io') == 'admin'

    def test_case_and_whitespace_insensitive(self, admin_allow_list):
        assert role_for_email('  Boss@LeadHub.io ') == 'admin'

    def test_everyone_else_is_customer(self, admin_allow_list):
        assert role_for_email('buyer@example.com') == 'customer'
        assert role_for_email(None) == 'customer'

    def test_explicit_allow_list(self):
        assert role_for_email('ops@x.com', admin_emails=['OPS@x.com']) == 'admin'


class TestSyncUserProfile:

    def test_creates_profile_on_first_login(self, db_session, admin_allow_list):
        profile = sync_user_profile('u1', 'buyer@example.com', 'Buyer')
        assert profile['role'] == 'customer'
        assert profile['displayName'] == 'Buyer'
        assert db_session.get(UserProfile, 'u1') is not None

    def test_allow_listed_email_created_as_admin(self, admin_allow_list):
        assert sync_user_profile('u1', 'boss@leadhub.io')['role'] == 'admin'

    def test_promotes_existing_customer(self, db_session, admin_allow_list):
        db_session.add(UserProfile(uid='u1', email='boss@leadhub.io', role='customer'))
        db_session.commit()
        assert sync_user_profile('u1', 'boss@leadhub.io')['role'] == 'admin'

    def test_demotes_removed_admin(self, db_session, admin_allow_list):
        db_session.add(UserProfile(uid='u1', email='former@leadhub.io', role='admin'))
        db_session.commit()
        assert sync_user_profile('u1', 'former@leadhub.io')['role'] == 'customer'

    def test_existing_display_name_kept(self, db_session, admin_allow_list):
        db_session.add(UserProfile(uid='u1', email='b@x.com', display_name='Original', role='customer'))
        db_session.commit()
        assert sync_user_profile('u1', 'b@x.com', 'Other')['displayName'] == 'Original'


class TestUpdateProfile:

    @pytest.fixture
    def profile(self, db_session):
        db_session.add(UserProfile(uid='u1', email='b@x.com', role='customer'))
        db_session.commit()

    def test_updates_editable_fields(self, profile):
        result = update_profile('u1', {
            'displayName': ' Jane ',
            'companyName': 'Acme',
            'professionalInterests': ['E-commerce', 'SaaS'],
        })
        assert result['displayName'] == 'Jane'
        assert result['companyName'] == 'Acme'
        assert result['professionalInterests'] == ['E-commerce', 'SaaS']

    def test_role_and_email_not_editable(self, profile):
        result = update_profile('u1', {'role': 'admin', 'email': 'evil@x.com'})
        assert result['role'] == 'customer'
        assert result['email'] == 'b@x.com'

    def test_alert_preferences_cleaned(self, profile):
        result = update_profile('u1', {'alertPreferences': {'enabled': 1, 'industries': ['Legal'], 'extra': True}})
        assert result['alertPreferences'] == {'enabled': True, 'industries': ['Legal'], 'locations': []}

    def test_default_alert_preferences(self, profile):
        assert get_profile('u1')['alertPreferences'] == {'enabled': False, 'industries': [], 'locations': []}

    def test_bad_interests_type(self, profile):
        with pytest.raises(ValueError):
            update_profile('u1', {'professionalInterests': 'SaaS'})

    def test_bad_alert_preferences_type(self, profile):
        with pytest.raises(ValueError):
            update_profile('u1', {'alertPreferences': ['Legal']})

    def test_missing_profile(self):
        with pytest.raises(LookupError):
            update_profile('nobody', {'displayName': 'x'})

    def test_get_profile_missing(self):
        assert get_profile('nobody') is None
