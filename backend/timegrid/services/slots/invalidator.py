# backend/timegrid/services/slots/invalidator.py
"""
Cache invalidation for parsed vacancy sheets.

Triggers:
✓ Vacancy sheet replaced → drop every cached version for the business

Does NOT trigger:
✗ Appointment created/cancelled (conflicts are computed per request)
✗ Business preferences changed (step is read per request)
"""

import logging

from redis import Redis, RedisError

from .redis_store import SheetRedisStore

logger = logging.getLogger(__name__)


def invalidate_business_sheet(redis: Redis | None, business_id: int) -> int:
    """
    Invalidate cached sheets for a business.

    Returns:
        Number of deleted cache keys (0 when Redis is unavailable).
    """
    if redis is None:
        return 0
    try:
        deleted = SheetRedisStore(redis).delete_sheets(business_id)
    except RedisError:
        logger.exception("Failed to invalidate sheet cache for business=%s", business_id)
        return 0
    logger.info(f"Sheet cache invalidated: business={business_id} keys={deleted}")
    return deleted
