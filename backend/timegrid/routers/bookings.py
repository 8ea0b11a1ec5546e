# backend/timegrid/routers/bookings.py
# PATCH and DELETE answer 405: appointments are immutable, cancellation lives elsewhere.

from datetime import date
from fastapi import APIRouter, Depends, HTTPException, status
from redis import Redis
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import Appointments, Businesses, Services
from ..redis_client import get_redis
from ..schemas.bookings import BookingCreate, BookingRead
from ..services.slots import book_appointment, get_appointment
from ..services.slots.config import minutes_to_time_str
from ..services.slots.tickets import confirmation_line
from .vacancies import ensure_bookable_date

router = APIRouter(prefix="/booking", tags=["booking"])


def _to_read(db: Session, appointment: Appointments) -> BookingRead:
    business = db.get(Businesses, appointment.business_id)
    service = db.get(Services, appointment.service_id)
    return BookingRead(
        code=appointment.code,
        business_id=appointment.business_id,
        service_id=appointment.service_id,
        service_name=service.name,
        date=date.fromisoformat(appointment.date),
        time=minutes_to_time_str(appointment.start_minute),
        duration_minutes=appointment.duration_minutes,
        comments=appointment.comments,
        confirmation=confirmation_line(appointment.start_minute, business.time_format),
    )


@router.post("", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
def create_booking(
    data: BookingCreate,
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis),
):
    """Reserve a time; 409 when it is no longer available."""
    ensure_bookable_date(data.date)

    appointment = book_appointment(
        db=db,
        business_id=data.business_id,
        service_id=data.service_id,
        target_date=data.date,
        start_time=data.time,
        comments=data.comments,
        redis=redis,
    )
    return _to_read(db, appointment)


@router.get("/{business_id}/{code}", response_model=BookingRead)
def get_booking(business_id: int, code: str, db: Session = Depends(get_db)):
    """Reservation ticket."""
    return _to_read(db, get_appointment(db, business_id, code))


@router.patch("/{business_id}/{code}")
def patch_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )


@router.delete("/{business_id}/{code}")
def delete_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )
