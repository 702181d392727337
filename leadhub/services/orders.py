"""
Order lifecycle — checkout, admin approval and contact-field masking.

    pending ──approve──▶ confirmed

Orders are created pending with a full snapshot of the lead. Until an admin
confirms the order, buyer-facing reads only ever see the masked projection
from mask_lead_data(); the unmasked snapshot is served to admins only.
"""
import io
import logging
from datetime import datetime

from leadhub.database import get_session
from leadhub.models.lead import Lead
from leadhub.models.order import Order, LeadSnapshot
from leadhub.services.leads import LeadNotFound, matches_search

logger = logging.getLogger('services.orders')

# Field → placeholder shown while an order is pending
PENDING_MASKS = {
    'email': '••••••@••••.com',
    'websiteUrl': 'https://•••••.com',
    'instagram': '@••••••',
    'tiktok': '@••••••',
    'linkedin': 'linkedin.com/••••',
}

# Fields left out entirely while an order is pending
PENDING_HIDDEN = ('founded', 'facebookPixel')

ORDER_SEARCH_FIELDS = ['firstName', 'lastName', 'email', 'websiteName', 'industry', 'location']

EXPORT_COLUMNS = [
    ('First Name', 'firstName'),
    ('Last Name', 'lastName'),
    ('Email', 'email'),
    ('Role', 'jobTitle'),
    ('Company', 'websiteName'),
    ('Website', 'websiteUrl'),
    ('Industry', 'industry'),
    ('Location', 'location'),
    ('LinkedIn', 'linkedin'),
    ('Instagram', 'instagram'),
]


class OrderNotFound(LookupError):
    pass


def mask_lead_data(lead_data, status):
    """
    Project an order's lead snapshot for the buyer.

    Confirmed orders pass through unchanged. Pending orders get the
    placeholders in PENDING_MASKS (email always; the other contact fields only
    when the lead actually has a value) and drop founded / facebookPixel.
    Identity and categorical fields are always shown.
    """
    data = dict(lead_data or {})
    if status == 'confirmed':
        return data

    for field in PENDING_HIDDEN:
        data.pop(field, None)
    for field, mask in PENDING_MASKS.items():
        if field == 'email' or data.get(field):
            data[field] = mask
    return data


def buyer_view(order):
    """Order dict as the buyer is allowed to see it."""
    view = dict(order)
    view['leadData'] = mask_lead_data(order.get('leadData'), order.get('status'))
    return view


def checkout(user_id, user_email, lead_ids):
    """
    Create one pending order per lead in a single commit.

    Leads are not modified. The same lead can be bought any number of times.
    An unknown lead id, or a lead an admin has taken off the catalog, aborts
    the whole checkout before anything is written.
    """
    if not lead_ids:
        raise ValueError("Cart is empty")

    session = get_session()
    try:
        orders = []
        for lead_id in lead_ids:
            lead = session.get(Lead, lead_id)
            if lead is None:
                raise LeadNotFound(f"Lead {lead_id} not found")
            lead_dict = lead.to_dict()
            if lead_dict['status'] != 'available':
                raise LeadNotFound(f"Lead {lead_id} is no longer available")
            orders.append(Order(
                user_id=user_id,
                user_email=user_email,
                lead_id=lead.id,
                lead_data=LeadSnapshot.from_lead(lead_dict).to_dict(),
                price=lead_dict['price'],
                status='pending',
            ))

        session.add_all(orders)
        session.commit()
        logger.info("Checkout for user %s: %d orders", user_id, len(orders))
        return [o.to_dict() for o in orders]
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def approve_order(order_id):
    """
    Confirm an order. Only `status` changes.

    Not guarded against repeats: approving a confirmed order writes the same
    value again.
    """
    session = get_session()
    try:
        order = session.get(Order, order_id)
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found")
        if order.status == 'confirmed':
            logger.info("Order already confirmed", extra={'order_id': order_id})
        order.status = 'confirmed'
        session.commit()
        logger.info("Order confirmed", extra={'order_id': order_id})
        return order.to_dict()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_order(order_id):
    session = get_session()
    try:
        order = session.get(Order, order_id)
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found")
        return order.to_dict()
    finally:
        session.close()


def _user_orders(user_id):
    session = get_session()
    try:
        rows = session.query(Order).filter(Order.user_id == user_id) \
            .order_by(Order.purchased_at.desc(), Order.id).all()
        return [row.to_dict() for row in rows]
    finally:
        session.close()


def list_orders_for_user(user_id, search=None):
    """Buyer dashboard — own orders, newest first, masked while pending."""
    orders = [buyer_view(o) for o in _user_orders(user_id)]
    return [o for o in orders if matches_search(o['leadData'], search, ORDER_SEARCH_FIELDS)]


def list_all_orders():
    """Admin view — every order, unmasked, with total revenue."""
    session = get_session()
    try:
        rows = session.query(Order).order_by(Order.purchased_at.desc(), Order.id).all()
        orders = [row.to_dict() for row in rows]
    finally:
        session.close()

    return {
        'orders': orders,
        'total_revenue': round(sum(o['price'] for o in orders), 2),
    }


def export_confirmed_orders(user_id):
    """Excel export of a buyer's confirmed orders. Returns .xlsx bytes."""
    import pandas as pd

    rows = []
    for order in _user_orders(user_id):
        if order['status'] != 'confirmed':
            continue
        data = order['leadData']
        row = {label: data.get(field, '') for label, field in EXPORT_COLUMNS}
        row['Price Paid'] = order['price']
        purchased = order['purchasedAt']
        row['Purchase Date'] = datetime.fromisoformat(purchased).date().isoformat() if purchased else 'N/A'
        rows.append(row)

    columns = [label for label, _ in EXPORT_COLUMNS] + ['Price Paid', 'Purchase Date']
    frame = pd.DataFrame(rows, columns=columns)
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine='openpyxl') as writer:
        frame.to_excel(writer, sheet_name='Purchased Leads', index=False)
    return buf.getvalue()
