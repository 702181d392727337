"""
Dashboard routes — health check.
"""
import logging
from flask import Blueprint, jsonify

from leadhub.database import get_session
from sqlalchemy import text

logger = logging.getLogger('routes.dashboard')

bp = Blueprint('dashboard', __name__)


@bp.route('/health')
def health_check():
    """Health check endpoint. Reports database reachability."""
    session = get_session()
    try:
        session.execute(text('SELECT 1'))
        return jsonify({'status': 'healthy', 'database': 'ok'}), 200
    except Exception as e:
        logger.error("Health check DB query failed: %s", e)
        return jsonify({'status': 'degraded', 'database': 'unreachable'}), 503
    finally:
        session.close()
