"""
Admin statistics — catalog size, revenue and customer spend.
"""
import logging

from sqlalchemy import func

from leadhub.database import get_session
from leadhub.models.lead import Lead
from leadhub.models.order import Order
from leadhub.models.user import UserProfile

logger = logging.getLogger('services.stats')


def get_admin_stats():
    """Headline numbers for the admin dashboard."""
    session = get_session()
    try:
        total_leads = session.query(func.count(Lead.id)).scalar() or 0
        available_leads = session.query(func.count(Lead.id)).filter(Lead.status == 'available').scalar() or 0
        total_orders = session.query(func.count(Order.id)).scalar() or 0
        total_revenue = session.query(func.coalesce(func.sum(Order.price), 0.0)).scalar() or 0.0
        total_customers = session.query(func.count(func.distinct(Order.user_id))).scalar() or 0
    finally:
        session.close()

    return {
        'totalLeads': total_leads,
        'availableLeads': available_leads,
        'totalRevenue': round(float(total_revenue), 2),
        'totalOrders': total_orders,
        'totalCustomers': total_customers,
    }


def list_users_with_spend():
    """Every user, newest first, with their order count and total spend."""
    session = get_session()
    try:
        spend = dict(
            (user_id, (count, total)) for user_id, count, total in
            session.query(Order.user_id, func.count(Order.id), func.sum(Order.price))
            .group_by(Order.user_id).all()
        )
        users = session.query(UserProfile).order_by(UserProfile.created_at.desc(), UserProfile.uid).all()
        result = []
        for user in users:
            count, total = spend.get(user.uid, (0, 0.0))
            entry = user.to_dict()
            entry['orderCount'] = count
            entry['totalSpent'] = round(float(total or 0.0), 2)
            result.append(entry)
        return result
    finally:
        session.close()


def catalog_facets(sample_size=300):
    """Sorted distinct industries and locations seen in the catalog (for alert preferences)."""
    session = get_session()
    try:
        rows = session.query(Lead.industry, Lead.location).limit(sample_size).all()
    finally:
        session.close()

    return {
        'industries': sorted({ind for ind, _ in rows if ind}),
        'locations': sorted({loc for _, loc in rows if loc}),
    }
