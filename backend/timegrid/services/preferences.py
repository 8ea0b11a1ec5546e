# backend/timegrid/services/preferences.py
"""Business preferences used by the availability engine."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..models.generated import Businesses
from .slots import NotFound
from .slots.config import validate_step

logger = logging.getLogger(__name__)


def get_business(db: Session, business_id: int) -> Businesses:
    business = db.get(Businesses, business_id)
    if business is None:
        raise NotFound(f"Business {business_id} not found")
    return business


def set_preferences(
    db: Session,
    business_id: int,
    timeslot_step: Optional[int] = None,
    time_format: Optional[str] = None,
    vacancy_edit_advanced_mode: Optional[bool] = None,
) -> Businesses:
    """
    Update preferences. A bad step is rejected here, not at query time.

    Raises:
        NotFound: unknown business.
        ConfigurationError: non-positive timeslot_step.
    """
    business = get_business(db, business_id)

    if timeslot_step is not None:
        business.timeslot_step = validate_step(timeslot_step)
    if time_format is not None:
        business.time_format = time_format
    if vacancy_edit_advanced_mode is not None:
        business.vacancy_edit_advanced_mode = int(vacancy_edit_advanced_mode)

    db.commit()
    db.refresh(business)
    logger.info(f"Preferences updated: business={business_id} step={business.timeslot_step}")
    return business
