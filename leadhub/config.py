"""
Centralized configuration — env vars, admin allow-list, catalog constants.
"""
import os


def _env_set(name):
    """Comma-separated env var → lowercase set (blank entries dropped)."""
    raw = os.getenv(name, '')
    return {part.strip().lower() for part in raw.split(',') if part.strip()}


# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FORMAT = os.getenv('LOG_FORMAT', 'text')

# ── Redis ─────────────────────────────────────────────────────────────────────
REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')

# ── PostgreSQL ────────────────────────────────────────────────────────────────
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///local.db')

# ── Sessions / auth ───────────────────────────────────────────────────────────
SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-change-me')
AUTH_PROVIDER_SECRET = os.getenv('AUTH_PROVIDER_SECRET')

# ── Admin allow-list: emails promoted to admin on login ───────────────────────
ADMIN_EMAILS = _env_set('ADMIN_EMAILS')

# ── Bulk import ───────────────────────────────────────────────────────────────
IMPORT_BATCH_SIZE = int(os.getenv('IMPORT_BATCH_SIZE', '100'))
IMPORT_JOB_TIMEOUT = int(os.getenv('IMPORT_JOB_TIMEOUT', '3600'))
IMPORT_JOB_TTL = 86400 * 7  # 7 days

# ── Pricing defaults ──────────────────────────────────────────────────────────
BULK_IMPORT_DEFAULT_PRICE = 5.0
MANUAL_DEFAULT_PRICE = 0.0

# ── Pagination ────────────────────────────────────────────────────────────────
CATALOG_PAGE_SIZE = 12
ADMIN_PAGE_SIZE = 20
WISHLIST_LIMIT = 30

# ── Catalog ───────────────────────────────────────────────────────────────────
INDUSTRIES = [
    'Technology',
    'Healthcare',
    'Finance',
    'Real Estate',
    'E-commerce',
    'Education',
    'Marketing',
    'Legal',
    'Manufacturing',
    'Retail',
    'Food & Beverage',
    'Other',
]
DEFAULT_INDUSTRY = 'Other'

# ── Status values ─────────────────────────────────────────────────────────────
LEAD_STATUSES = ['available', 'sold']
