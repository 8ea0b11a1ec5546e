# backend/timegrid/services/slots/redis_store.py
"""
Redis storage for parsed vacancy sheets.

Key format: vacancies:sheet:{business_id}:{version}
Value: JSON list of rules (see sheet.sheet_to_dict).

The sheet version is part of the key, so a reader holding an old version
can never repopulate the cache with rules that were already replaced.
"""

import json
import logging

from redis import Redis

from .config import BookingConfig, get_booking_config
from .sheet import VacancySheet, sheet_from_dict, sheet_to_dict

logger = logging.getLogger(__name__)


class SheetRedisStore:
    """Redis storage wrapper for parsed sheets."""

    KEY_PREFIX = "vacancies:sheet"

    def __init__(self, redis: Redis, config: BookingConfig | None = None):
        self.redis = redis
        self.config = config or get_booking_config()

    def _key(self, business_id: int, version: int) -> str:
        return f"{self.KEY_PREFIX}:{business_id}:{version}"

    # ── Write ────────────────────────────────────────────────────────────

    def store_sheet(self, business_id: int, version: int, sheet: VacancySheet) -> None:
        key = self._key(business_id, version)
        self.redis.setex(key, self.config.sheet_cache_ttl_seconds, json.dumps(sheet_to_dict(sheet)))

    # ── Read ─────────────────────────────────────────────────────────────

    def get_sheet(self, business_id: int, version: int) -> VacancySheet | None:
        """
        Get a cached parsed sheet.

        Returns:
            VacancySheet, or None on cache miss.
        """
        raw = self.redis.get(self._key(business_id, version))
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode()
        try:
            return sheet_from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError):
            logger.warning(f"Corrupt sheet cache for business {business_id} v{version}, ignoring")
            return None

    # ── Delete ───────────────────────────────────────────────────────────

    def delete_sheets(self, business_id: int) -> int:
        """
        Delete every cached version for a business.

        Returns:
            Number of deleted keys.
        """
        keys = list(self.redis.scan_iter(f"{self.KEY_PREFIX}:{business_id}:*"))
        if not keys:
            return 0
        return self.redis.delete(*keys)
