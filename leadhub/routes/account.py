"""
Account routes — cart, checkout, purchased leads, wishlist, profile.

Everything here acts on the logged-in user. Order payloads go through
buyer_view() so pending orders never leave the server unmasked.
"""
import logging
from datetime import date
from io import BytesIO

from flask import Blueprint, jsonify, request, send_file

from leadhub.auth import login_required, current_user
from leadhub.services import cart as cart_service
from leadhub.services.leads import LeadNotFound
from leadhub.services.orders import (
    checkout, buyer_view, list_orders_for_user, export_confirmed_orders,
)
from leadhub.services.stats import catalog_facets
from leadhub.services.users import get_profile, update_profile
from leadhub.services.wishlist import add_to_wishlist, remove_from_wishlist, list_wishlist

logger = logging.getLogger('routes.account')

bp = Blueprint('account', __name__)

XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


# ── Cart ─────────────────────────────────────────────────────────────────────

@bp.route('/api/cart')
def get_cart():
    """Cart contents. Browsing with a cart doesn't need a login; checkout does."""
    return jsonify(cart_service.cart_contents())


@bp.route('/api/cart', methods=['POST'])
def add_cart_item():
    data = request.json or {}
    lead_id = str(data.get('leadId') or '').strip()
    if not lead_id:
        return jsonify({'error': 'leadId is required'}), 400
    cart_service.add_to_cart(lead_id)
    return jsonify(cart_service.cart_contents()), 201


@bp.route('/api/cart/<lead_id>', methods=['DELETE'])
def remove_cart_item(lead_id):
    cart_service.remove_from_cart(lead_id)
    return jsonify(cart_service.cart_contents())


@bp.route('/api/cart', methods=['DELETE'])
def clear_cart():
    cart_service.clear_cart()
    return jsonify({'ok': True})


@bp.route('/api/cart/checkout', methods=['POST'])
@login_required
def checkout_cart():
    """Turn the cart into pending orders and empty it."""
    user = current_user()
    lead_ids = cart_service.get_cart_ids()
    if not lead_ids:
        return jsonify({'error': 'Cart is empty'}), 400

    try:
        orders = checkout(user['uid'], user['email'], lead_ids)
    except LeadNotFound as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error("Checkout failed for %s: %s", user['uid'], e, exc_info=True)
        return jsonify({'error': 'Checkout failed. Please try again.'}), 500

    cart_service.clear_cart()
    return jsonify({'orders': [buyer_view(o) for o in orders]}), 201


# ── Purchased leads ──────────────────────────────────────────────────────────

@bp.route('/api/orders')
@login_required
def my_orders():
    user = current_user()
    try:
        orders = list_orders_for_user(user['uid'], search=request.args.get('q', '').strip())
        return jsonify({'orders': orders})
    except Exception as e:
        logger.error("Error loading orders for %s: %s", user['uid'], e, exc_info=True)
        return jsonify({'error': 'Failed to load your orders. Please try again.'}), 500


@bp.route('/api/orders/export')
@login_required
def export_orders():
    """Download confirmed purchases as .xlsx."""
    user = current_user()
    try:
        payload = export_confirmed_orders(user['uid'])
    except Exception as e:
        logger.error("Export failed for %s: %s", user['uid'], e, exc_info=True)
        return jsonify({'error': 'Failed to export leads. Please try again.'}), 500

    return send_file(
        BytesIO(payload),
        mimetype=XLSX_MIMETYPE,
        as_attachment=True,
        download_name=f'LeadHub_Export_{date.today().isoformat()}.xlsx',
    )


# ── Wishlist ─────────────────────────────────────────────────────────────────

@bp.route('/api/wishlist')
@login_required
def get_wishlist():
    leads = list_wishlist(current_user()['uid'])
    return jsonify({'leads': leads})


@bp.route('/api/wishlist', methods=['POST'])
@login_required
def add_wishlist_item():
    data = request.json or {}
    lead_id = str(data.get('leadId') or '').strip()
    if not lead_id:
        return jsonify({'error': 'leadId is required'}), 400
    try:
        created = add_to_wishlist(current_user()['uid'], lead_id)
    except LeadNotFound:
        return jsonify({'error': 'Lead not found'}), 404
    return jsonify({'ok': True, 'created': created}), 201 if created else 200


@bp.route('/api/wishlist/<lead_id>', methods=['DELETE'])
@login_required
def remove_wishlist_item(lead_id):
    if not remove_from_wishlist(current_user()['uid'], lead_id):
        return jsonify({'error': 'Not in wishlist'}), 404
    return jsonify({'ok': True})


# ── Profile ──────────────────────────────────────────────────────────────────

@bp.route('/api/profile')
@login_required
def get_my_profile():
    profile = get_profile(current_user()['uid'])
    if profile is None:
        return jsonify({'error': 'Profile not found'}), 404
    return jsonify({'profile': profile, 'facets': catalog_facets()})


@bp.route('/api/profile', methods=['PATCH'])
@login_required
def update_my_profile():
    try:
        profile = update_profile(current_user()['uid'], request.json or {})
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except LookupError:
        return jsonify({'error': 'Profile not found'}), 404
    return jsonify({'profile': profile})
