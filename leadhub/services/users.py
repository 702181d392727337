"""
User profiles and role assignment.

Roles come from the ADMIN_EMAILS allow-list, not from the auth provider, and
are re-checked on every login so adding or removing an admin email takes effect
the next time that user signs in.
"""
import logging

from leadhub import config
from leadhub.database import get_session
from leadhub.models.user import UserProfile

logger = logging.getLogger('services.users')

# Profile fields a user may edit on their own account
EDITABLE_FIELDS = {
    'displayName': 'display_name',
    'companyName': 'company_name',
    'jobTitle': 'job_title',
    'website': 'website',
    'professionalInterests': 'professional_interests',
    'alertPreferences': 'alert_preferences',
}


def role_for_email(email, admin_emails=None):
    """'admin' if the email is on the allow-list, else 'customer'."""
    allow_list = config.ADMIN_EMAILS if admin_emails is None else {e.lower() for e in admin_emails}
    return 'admin' if (email or '').strip().lower() in allow_list else 'customer'


def sync_user_profile(uid, email, display_name=''):
    """
    Called on every login. Creates the profile on first sign-in and corrects
    the stored role against the allow-list.
    """
    expected_role = role_for_email(email)
    session = get_session()
    try:
        profile = session.get(UserProfile, uid)
        if profile is None:
            profile = UserProfile(
                uid=uid,
                email=email or '',
                display_name=display_name or '',
                role=expected_role,
            )
            session.add(profile)
            logger.info("Created profile for %s (%s)", uid, expected_role)
        elif profile.role != expected_role:
            logger.info("Role for %s corrected: %s → %s", uid, profile.role, expected_role)
            profile.role = expected_role
        session.commit()
        return profile.to_dict()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_profile(uid):
    session = get_session()
    try:
        profile = session.get(UserProfile, uid)
        return profile.to_dict() if profile else None
    finally:
        session.close()


def _clean_alert_preferences(value):
    if not isinstance(value, dict):
        raise ValueError("alertPreferences must be an object")
    return {
        'enabled': bool(value.get('enabled', False)),
        'industries': [str(i) for i in value.get('industries') or []],
        'locations': [str(loc) for loc in value.get('locations') or []],
    }


def update_profile(uid, data):
    """Update editable profile fields. Role and email are never user-editable."""
    session = get_session()
    try:
        profile = session.get(UserProfile, uid)
        if profile is None:
            raise LookupError(f"Profile {uid} not found")

        for key, attr in EDITABLE_FIELDS.items():
            if key not in data:
                continue
            value = data[key]
            if key == 'professionalInterests':
                if not isinstance(value, list):
                    raise ValueError("professionalInterests must be a list")
                value = [str(v) for v in value]
            elif key == 'alertPreferences':
                value = _clean_alert_preferences(value)
            else:
                value = str(value or '').strip()
            setattr(profile, attr, value)

        session.commit()
        return profile.to_dict()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
