"""
Shopping cart — lead ids kept in the signed Flask session cookie.
"""
from flask import session

from leadhub.services.leads import get_leads
from leadhub.services.orders import mask_lead_data

CART_KEY = 'cart'


def get_cart_ids():
    return list(session.get(CART_KEY, []))


def add_to_cart(lead_id):
    """Add a lead id; adding one that's already in the cart is a no-op."""
    cart = get_cart_ids()
    if lead_id not in cart:
        cart.append(lead_id)
        session[CART_KEY] = cart
    return cart


def remove_from_cart(lead_id):
    cart = [item for item in get_cart_ids() if item != lead_id]
    session[CART_KEY] = cart
    return cart


def clear_cart():
    session.pop(CART_KEY, None)


def cart_contents():
    """
    Current cart items and their total price.

    Leads deleted since being added drop out. Nothing in the cart is bought
    yet, so contact fields come back masked; price stays for the total.
    """
    ids = get_cart_ids()
    leads = get_leads(ids)
    items = [mask_lead_data(leads[lead_id], 'pending') for lead_id in ids if lead_id in leads]
    return {
        'items': items,
        'count': len(items),
        'total': round(sum(item['price'] for item in items), 2),
    }
