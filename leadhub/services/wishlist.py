"""
Wishlist helpers — bookmark leads without buying them.
"""
import logging

from leadhub.config import WISHLIST_LIMIT
from leadhub.database import get_session
from leadhub.models.lead import Lead
from leadhub.models.wishlist import WishlistEntry
from leadhub.services.leads import LeadNotFound, get_leads
from leadhub.services.orders import mask_lead_data

logger = logging.getLogger('services.wishlist')


def add_to_wishlist(user_id, lead_id):
    """Bookmark a lead. Adding the same lead twice keeps a single entry."""
    session = get_session()
    try:
        if session.get(Lead, lead_id) is None:
            raise LeadNotFound(f"Lead {lead_id} not found")
        existing = session.query(WishlistEntry).filter_by(user_id=user_id, lead_id=lead_id).first()
        if existing:
            return False
        session.add(WishlistEntry(user_id=user_id, lead_id=lead_id))
        session.commit()
        return True
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def remove_from_wishlist(user_id, lead_id):
    """Remove a bookmark. Returns False when there was nothing to remove."""
    session = get_session()
    try:
        deleted = session.query(WishlistEntry).filter_by(user_id=user_id, lead_id=lead_id).delete()
        session.commit()
        return deleted > 0
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def list_wishlist(user_id):
    """Wishlisted leads, newest bookmark first, contact fields masked. Leads deleted since are skipped."""
    session = get_session()
    try:
        lead_ids = [
            row.lead_id for row in
            session.query(WishlistEntry).filter_by(user_id=user_id)
            .order_by(WishlistEntry.created_at.desc(), WishlistEntry.id.desc())
            .limit(WISHLIST_LIMIT).all()
        ]
    finally:
        session.close()

    leads = get_leads(lead_ids)
    return [mask_lead_data(leads[lead_id], 'pending') for lead_id in lead_ids if lead_id in leads]
