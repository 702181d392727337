"""
Session auth — identity comes from the external auth provider, role from us.

The provider (or the frontend acting for it) posts the verified identity to
/login. When AUTH_PROVIDER_SECRET is set the request must carry it in the
X-Auth-Provider-Secret header; with no secret configured login is open
(local dev only).
"""
import hmac
import logging
from functools import wraps

from flask import Blueprint, jsonify, request, session

from leadhub import config
from leadhub.services.users import sync_user_profile, get_profile

logger = logging.getLogger('leadhub.auth')

bp = Blueprint('auth', __name__)


def current_user():
    """{'uid', 'email', 'role'} for the logged-in user, or None."""
    uid = session.get('uid')
    if not uid:
        return None
    return {'uid': uid, 'email': session.get('email', ''), 'role': session.get('role', 'customer')}


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not session.get('uid'):
            return jsonify({'error': 'Login required'}), 401
        return view(*args, **kwargs)
    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not session.get('uid'):
            return jsonify({'error': 'Login required'}), 401
        if session.get('role') != 'admin':
            return jsonify({'error': 'Admin access required'}), 403
        return view(*args, **kwargs)
    return wrapper


def _provider_verified():
    if not config.AUTH_PROVIDER_SECRET:
        return True  # No secret set: open access (local dev)
    supplied = request.headers.get('X-Auth-Provider-Secret', '')
    return hmac.compare_digest(supplied, config.AUTH_PROVIDER_SECRET)


@bp.route('/login', methods=['POST'])
def login():
    """Start a session for a provider-authenticated identity."""
    if not _provider_verified():
        return jsonify({'error': 'Invalid auth provider credentials'}), 401

    data = request.get_json(silent=True) or {}
    uid = str(data.get('uid') or '').strip()
    email = str(data.get('email') or '').strip()
    if not uid or not email:
        return jsonify({'error': 'uid and email are required'}), 400

    try:
        profile = sync_user_profile(uid, email, data.get('displayName', ''))
    except Exception as e:
        logger.error("Login failed for %s: %s", uid, e, exc_info=True)
        return jsonify({'error': str(e)}), 500

    session['uid'] = profile['uid']
    session['email'] = profile['email']
    session['role'] = profile['role']
    return jsonify(profile)


@bp.route('/logout', methods=['POST'])
def logout():
    session.clear()
    return jsonify({'ok': True})


@bp.route('/api/me')
@login_required
def me():
    """Current session identity plus stored profile."""
    profile = get_profile(session['uid'])
    return jsonify({'user': current_user(), 'profile': profile})
