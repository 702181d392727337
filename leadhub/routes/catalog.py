"""
Catalog routes — public marketplace listing and lead detail.
"""
import logging
from flask import Blueprint, jsonify, request

from leadhub.config import INDUSTRIES
from leadhub.services.leads import list_catalog, get_lead, LeadNotFound
from leadhub.services.orders import mask_lead_data

logger = logging.getLogger('routes.catalog')

bp = Blueprint('catalog', __name__)


@bp.route('/api/leads')
def catalog():
    """Marketplace page. Query params: industry, page, q."""
    try:
        result = list_catalog(
            industry=request.args.get('industry'),
            page=request.args.get('page', 1, type=int),
            search=request.args.get('q', '').strip(),
        )
        # Contact fields stay hidden until a confirmed purchase
        result['leads'] = [mask_lead_data(lead, 'pending') for lead in result['leads']]
        result['industries'] = ['All'] + INDUSTRIES
        return jsonify(result)
    except Exception as e:
        logger.error("Error listing catalog: %s", e, exc_info=True)
        return jsonify({'error': str(e)}), 500


@bp.route('/api/leads/<lead_id>')
def lead_detail(lead_id):
    """Single catalog lead with contact fields masked. Sold leads are hidden here too."""
    try:
        lead = get_lead(lead_id)
    except LeadNotFound:
        return jsonify({'error': 'Lead not found'}), 404
    if lead['status'] != 'available':
        return jsonify({'error': 'Lead not found'}), 404
    return jsonify(mask_lead_data(lead, 'pending'))
