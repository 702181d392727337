"""
Shared client instances — Redis connection and the RQ import queue.

Lazily connected on first use so importing this module is always safe
(even when Redis is not running during tests).
"""
import logging
import redis

from leadhub.config import REDIS_URL

logger = logging.getLogger('leadhub.extensions')

# ── Redis ─────────────────────────────────────────────────────────────────────
redis_client = redis.from_url(REDIS_URL, decode_responses=True)

# ── RQ ────────────────────────────────────────────────────────────────────────
_queue = None


def get_queue():
    """Return the shared RQ queue (created on first call)."""
    global _queue
    if _queue is None:
        from rq import Queue
        # RQ pickles job payloads, so it needs a connection without decode_responses
        _queue = Queue('imports', connection=redis.from_url(REDIS_URL))
        logger.info("RQ queue 'imports' initialized")
    return _queue
