"""
Lead catalog helpers — marketplace listing, admin CRUD, text search.

Search runs in memory over the page that was just fetched, matching the
marketplace's behavior of filtering already-loaded leads.
"""
import logging

from leadhub.config import (
    CATALOG_PAGE_SIZE, ADMIN_PAGE_SIZE, DEFAULT_INDUSTRY,
    LEAD_STATUSES, MANUAL_DEFAULT_PRICE,
)
from leadhub.database import get_session
from leadhub.importer.normalize import parse_price
from leadhub.models.lead import Lead, LEAD_FIELDS

logger = logging.getLogger('services.leads')

# Fields the public marketplace search looks at
CATALOG_SEARCH_FIELDS = ['firstName', 'lastName', 'websiteName', 'industry', 'location', 'jobTitle']

# Admin search covers every text field
ADMIN_SEARCH_FIELDS = LEAD_FIELDS


class LeadNotFound(LookupError):
    pass


def matches_search(record, term, fields):
    """Case-insensitive substring match of `term` against any of `fields`. Blank term matches all."""
    if not term:
        return True
    needle = term.lower()
    return any(needle in str(record.get(f) or '').lower() for f in fields)


def _page_bounds(page, per_page):
    page = max(int(page or 1), 1)
    return page, (page - 1) * per_page


def list_catalog(industry=None, page=1, search=None):
    """
    Marketplace listing — available leads only, newest first.

    Returns {'leads', 'page', 'has_more'}. has_more is true when the page came
    back full.
    """
    page, offset = _page_bounds(page, CATALOG_PAGE_SIZE)
    session = get_session()
    try:
        query = session.query(Lead).filter(Lead.status == 'available')
        if industry and industry != 'All':
            query = query.filter(Lead.industry == industry)
        rows = query.order_by(Lead.created_at.desc(), Lead.id) \
            .offset(offset).limit(CATALOG_PAGE_SIZE).all()
        leads = [row.to_dict() for row in rows]
    finally:
        session.close()

    return {
        'leads': [lead for lead in leads if matches_search(lead, search, CATALOG_SEARCH_FIELDS)],
        'page': page,
        'has_more': len(leads) == CATALOG_PAGE_SIZE,
    }


def list_leads(page=1, search=None):
    """Admin listing — every lead regardless of status, newest first."""
    page, offset = _page_bounds(page, ADMIN_PAGE_SIZE)
    session = get_session()
    try:
        rows = session.query(Lead).order_by(Lead.created_at.desc(), Lead.id) \
            .offset(offset).limit(ADMIN_PAGE_SIZE).all()
        leads = [row.to_dict() for row in rows]
        total = session.query(Lead).count()
    finally:
        session.close()

    return {
        'leads': [lead for lead in leads if matches_search(lead, search, ADMIN_SEARCH_FIELDS)],
        'page': page,
        'has_more': len(leads) == ADMIN_PAGE_SIZE,
        'total': total,
    }


def get_lead(lead_id):
    """Return the canonical lead dict or raise LeadNotFound."""
    session = get_session()
    try:
        lead = session.get(Lead, lead_id)
        if lead is None:
            raise LeadNotFound(f"Lead {lead_id} not found")
        return lead.to_dict()
    finally:
        session.close()


def get_leads(lead_ids):
    """Fetch several leads by id. Missing ids are simply absent from the result."""
    if not lead_ids:
        return {}
    session = get_session()
    try:
        rows = session.query(Lead).filter(Lead.id.in_(list(lead_ids))).all()
        return {row.id: row.to_dict() for row in rows}
    finally:
        session.close()


def _clean_fields(data):
    return {f: str(data[f]).strip() for f in LEAD_FIELDS if f in data and data[f] is not None}


def create_lead(data):
    """Manual single-lead entry. Price falls back to 0 when blank or unparseable."""
    record = {f: '' for f in LEAD_FIELDS}
    record.update(_clean_fields(data))
    record['industry'] = record['industry'] or DEFAULT_INDUSTRY
    record['price'] = parse_price(data.get('price'), MANUAL_DEFAULT_PRICE)
    record['status'] = 'available'

    session = get_session()
    try:
        lead = Lead.from_record(record)
        session.add(lead)
        session.commit()
        logger.info("Lead created manually", extra={'lead_id': lead.id})
        return lead.to_dict()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def update_lead(lead_id, data):
    """Admin edit. Only known fields change; status and price are validated."""
    changes = _clean_fields(data)

    if 'status' in data:
        if data['status'] not in LEAD_STATUSES:
            raise ValueError(f"Invalid status '{data['status']}'. Expected one of {LEAD_STATUSES}")
    if 'price' in data:
        price = parse_price(data['price'], None)
        if price is None:
            raise ValueError("Price must be a non-negative number")

    session = get_session()
    try:
        lead = session.get(Lead, lead_id)
        if lead is None:
            raise LeadNotFound(f"Lead {lead_id} not found")

        for attr in Lead.__mapper__.column_attrs:
            col_name = attr.columns[0].name
            if col_name in changes:
                setattr(lead, attr.key, changes[col_name])
        if 'status' in data:
            lead.status = data['status']
        if 'price' in data:
            lead.price = price
        lead.industry = lead.industry or DEFAULT_INDUSTRY

        session.commit()
        return lead.to_dict()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def delete_lead(lead_id):
    """Delete a lead. Orders keep their own snapshot, so they are untouched."""
    session = get_session()
    try:
        lead = session.get(Lead, lead_id)
        if lead is None:
            raise LeadNotFound(f"Lead {lead_id} not found")
        session.delete(lead)
        session.commit()
        logger.info("Lead deleted", extra={'lead_id': lead_id})
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
