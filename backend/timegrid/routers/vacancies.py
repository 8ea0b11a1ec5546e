# backend/timegrid/routers/vacancies.py
"""
Vacancies API endpoints.

GET /vacancies/{business_id}/{service_id}/{date} - Available times for a service
PUT /vacancies/{business_id}                     - Replace the vacancy sheet
GET /vacancies/{business_id}                     - Stored sheet, raw and canonical
"""

from datetime import date, timedelta
from fastapi import APIRouter, Depends, HTTPException
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..redis_client import get_redis
from ..schemas.vacancies import (
    VacancyTimesResponse,
    VacancySheetUpdate,
    VacancySheetUpdated,
    VacancySheetRead,
)
from ..services.slots import dump, get_available_times, get_booking_config, parse
from ..services.vacancy_sheets import get_vacancy_sheet_row, update_vacancy_sheet


router = APIRouter(prefix="/vacancies", tags=["vacancies"])


def ensure_bookable_date(target_date: date) -> None:
    """Past dates and dates beyond the horizon are not offered."""
    config = get_booking_config()
    today = date.today()

    if target_date < today:
        raise HTTPException(status_code=404, detail="Date cannot be in the past")

    if target_date > today + timedelta(days=config.horizon_days):
        raise HTTPException(status_code=404, detail=f"Date cannot be more than {config.horizon_days} days ahead")


@router.get("/{business_id}/{service_id}/{target_date}", response_model=VacancyTimesResponse)
def list_vacancies(
    business_id: int,
    service_id: int,
    target_date: date,
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis),
):
    """Available start times for a service on a date."""
    ensure_bookable_date(target_date)

    times = get_available_times(
        db=db,
        business_id=business_id,
        service_id=service_id,
        target_date=target_date,
        redis=redis,
    )
    return VacancyTimesResponse(times=times)


@router.put("/{business_id}", response_model=VacancySheetUpdated)
def put_vacancy_sheet(
    business_id: int,
    data: VacancySheetUpdate,
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis),
):
    sheet = update_vacancy_sheet(db, business_id, data.vacancies, redis=redis)
    row = get_vacancy_sheet_row(db, business_id)
    return VacancySheetUpdated(rules=len(sheet), version=row.version)


@router.get("/{business_id}", response_model=VacancySheetRead)
def get_vacancy_sheet(business_id: int, db: Session = Depends(get_db)):
    row = get_vacancy_sheet_row(db, business_id)
    return VacancySheetRead(
        business_id=row.business_id,
        version=row.version,
        raw_text=row.raw_text,
        canonical=dump(parse(row.raw_text)),
    )
