"""
Admin routes — lead inventory, bulk import, order approval, stats, users.
"""
import logging
from flask import Blueprint, jsonify, request

from leadhub.auth import admin_required
from leadhub.importer.manager import launch_import, get_import_status
from leadhub.importer.normalize import ImportParseError
from leadhub.models.import_job import ImportJob
from leadhub.services.leads import (
    list_leads, create_lead, update_lead, delete_lead, LeadNotFound,
)
from leadhub.services.orders import list_all_orders, approve_order, OrderNotFound
from leadhub.services.stats import get_admin_stats, list_users_with_spend

logger = logging.getLogger('routes.admin')

bp = Blueprint('admin', __name__, url_prefix='/api/admin')


@bp.route('/stats')
@admin_required
def stats():
    try:
        return jsonify(get_admin_stats())
    except Exception as e:
        logger.error("Error fetching stats: %s", e, exc_info=True)
        return jsonify({'error': str(e)}), 500


# ── Leads ────────────────────────────────────────────────────────────────────

@bp.route('/leads')
@admin_required
def leads_index():
    try:
        return jsonify(list_leads(
            page=request.args.get('page', 1, type=int),
            search=request.args.get('q', '').strip(),
        ))
    except Exception as e:
        logger.error("Error listing leads: %s", e, exc_info=True)
        return jsonify({'error': str(e)}), 500


@bp.route('/leads', methods=['POST'])
@admin_required
def leads_create():
    """Manual single-lead entry."""
    data = request.json or {}
    if not any(str(data.get(f) or '').strip() for f in ('email', 'firstName', 'websiteName')):
        return jsonify({'error': 'Email, first name or website name is required'}), 400
    try:
        return jsonify(create_lead(data)), 201
    except Exception as e:
        logger.error("Error adding lead: %s", e, exc_info=True)
        return jsonify({'error': str(e)}), 500


@bp.route('/leads/<lead_id>', methods=['PATCH'])
@admin_required
def leads_update(lead_id):
    try:
        return jsonify(update_lead(lead_id, request.json or {}))
    except LeadNotFound:
        return jsonify({'error': 'Lead not found'}), 404
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error("Error updating lead %s: %s", lead_id, e, exc_info=True)
        return jsonify({'error': str(e)}), 500


@bp.route('/leads/<lead_id>', methods=['DELETE'])
@admin_required
def leads_delete(lead_id):
    try:
        delete_lead(lead_id)
        return jsonify({'ok': True})
    except LeadNotFound:
        return jsonify({'error': 'Lead not found'}), 404
    except Exception as e:
        logger.error("Error deleting lead %s: %s", lead_id, e, exc_info=True)
        return jsonify({'error': str(e)}), 500


# ── Bulk import ──────────────────────────────────────────────────────────────

@bp.route('/leads/import', methods=['POST'])
@admin_required
def leads_import():
    """Upload a .csv / .xlsx / .xls file. Parsed now, written in batches by a worker."""
    upload = request.files.get('file')
    if upload is None or not upload.filename:
        return jsonify({'error': 'No file uploaded'}), 400

    try:
        job = launch_import(upload.filename, upload.read())
    except ImportParseError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error("Error launching import for %s: %s", upload.filename, e, exc_info=True)
        return jsonify({'error': str(e)}), 500

    return jsonify(job.to_dict()), 202


@bp.route('/imports')
@admin_required
def imports_index():
    limit = request.args.get('limit', 20, type=int)
    return jsonify([job.to_dict() for job in ImportJob.list_recent(limit=limit)])


@bp.route('/imports/<job_id>')
@admin_required
def imports_show(job_id):
    status = get_import_status(job_id)
    if status is None:
        return jsonify({'error': 'Import not found'}), 404
    return jsonify(status)


# ── Orders ───────────────────────────────────────────────────────────────────

@bp.route('/orders')
@admin_required
def orders_index():
    try:
        return jsonify(list_all_orders())
    except Exception as e:
        logger.error("Error listing orders: %s", e, exc_info=True)
        return jsonify({'error': str(e)}), 500


@bp.route('/orders/<order_id>/approve', methods=['POST'])
@admin_required
def orders_approve(order_id):
    """pending → confirmed. Unlocks the buyer's view of the contact fields."""
    try:
        return jsonify(approve_order(order_id))
    except OrderNotFound:
        return jsonify({'error': 'Order not found'}), 404
    except Exception as e:
        logger.error("Error approving order %s: %s", order_id, e, exc_info=True)
        return jsonify({'error': str(e)}), 500


# ── Users ────────────────────────────────────────────────────────────────────

@bp.route('/users')
@admin_required
def users_index():
    try:
        return jsonify(list_users_with_spend())
    except Exception as e:
        logger.error("Error listing users: %s", e, exc_info=True)
        return jsonify({'error': str(e)}), 500
