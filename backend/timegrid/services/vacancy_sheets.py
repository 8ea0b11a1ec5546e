# backend/timegrid/services/vacancy_sheets.py
"""
Vacancy sheet updates.

The sheet is parsed before anything is written: a ParseError leaves the
stored sheet, its version and the cache untouched.
"""

import logging

from redis import Redis
from sqlalchemy.orm import Session

from ..models.generated import Businesses, VacancySheets
from .slots import NotFound, VacancySheet, invalidate_business_sheet, parse

logger = logging.getLogger(__name__)


def update_vacancy_sheet(
    db: Session,
    business_id: int,
    raw_text: str,
    redis: Redis | None = None,
) -> VacancySheet:
    """
    Replace a business's vacancy sheet.

    Raises:
        NotFound: unknown business.
        ParseError: sheet rejected, nothing stored.
    """
    business = db.get(Businesses, business_id)
    if business is None:
        raise NotFound(f"Business {business_id} not found")

    sheet = parse(raw_text)

    row = db.get(VacancySheets, business_id)
    if row is None:
        row = VacancySheets(business_id=business_id, raw_text=raw_text, version=1)
        db.add(row)
    else:
        row.raw_text = raw_text
        row.version = row.version + 1
    db.commit()
    db.refresh(row)

    invalidate_business_sheet(redis, business_id)
    logger.info(f"Vacancy sheet updated: business={business_id} version={row.version} rules={len(sheet)}")
    return sheet


def get_vacancy_sheet_row(db: Session, business_id: int) -> VacancySheets:
    row = db.get(VacancySheets, business_id)
    if row is None:
        raise NotFound(f"Business {business_id} has no vacancy sheet")
    return row
