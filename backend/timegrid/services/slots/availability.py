# backend/timegrid/services/slots/availability.py
"""
Service availability and booking commit.

Read path (get_available_times):
    vacancy sheet (cached parse) → recurrence expansion → slot grid
    → conflict filter → "HH:MM" strings

Write path (book_appointment):
    same pipeline, membership check, then a conditional write on the
    (business, date) booking-day row in the same transaction as the
    insert. A concurrent winner makes the conditional write match zero
    rows (or trip a unique constraint) and the loser gets ConflictError.

The version row covers the whole day, not the booked interval: two
concurrent bookings on the same day conflict even when their times do
not overlap. The loser retries and succeeds on the fresh version. Busy
days trade a few extra retries for a check that needs no range locking.
"""

import logging
from datetime import date

from redis import Redis, RedisError
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from ...models.generated import (
    Appointments,
    BookingDays,
    Businesses,
    Services,
    VacancySheets,
)
from .calculator import calculate_day_slots
from .config import BookingConfig, get_booking_config, minutes_to_time_str, time_str_to_minutes
from .conflicts import filter_conflicts
from .errors import ConflictError, NotFound, ParseError
from .recurrence import expand
from .redis_store import SheetRedisStore
from .sheet import VacancySheet, parse
from .tickets import generate_code

logger = logging.getLogger(__name__)


def get_available_times(
    db: Session,
    business_id: int,
    service_id: int,
    target_date: date,
    config: BookingConfig | None = None,
    redis: Redis | None = None,
) -> list[str]:
    """
    Available start times for a service on a date.

    Returns:
        Ascending "HH:MM" strings. Empty list = nothing bookable.

    Raises:
        NotFound: unknown business or service.
    """
    config = config or get_booking_config()
    business, service = _get_business_and_service(db, business_id, service_id)

    starts = _available_starts(db, business, service, target_date, config, redis)
    return [minutes_to_time_str(m) for m in starts]


def book_appointment(
    db: Session,
    business_id: int,
    service_id: int,
    target_date: date,
    start_time: str,
    comments: str | None = None,
    config: BookingConfig | None = None,
    redis: Redis | None = None,
) -> Appointments:
    """
    Commit an appointment if start_time is currently available.

    Raises:
        NotFound: unknown business or service.
        ConflictError: start_time is not available; nothing was written.
    """
    config = config or get_booking_config()
    business, service = _get_business_and_service(db, business_id, service_id)
    start_min = time_str_to_minutes(start_time)
    date_str = target_date.isoformat()

    try:
        # Step 1: Remember which booking-day version the check is made against
        day_version = _get_day_version(db, business.id, date_str)

        # Step 2: Re-run the pipeline
        available = _available_starts(db, business, service, target_date, config, redis)
        if start_min not in available:
            raise ConflictError(f"{start_time} on {date_str} is not available")

        # Step 3: Conditional write; zero rows = someone booked in between
        _claim_day(db, business.id, date_str, day_version)

        # Step 4: Insert
        appointment = Appointments(
            business_id=business.id,
            service_id=service.id,
            date=date_str,
            start_minute=start_min,
            duration_minutes=service.duration_min,
            code=generate_code(),
            comments=comments,
        )
        db.add(appointment)
        db.flush()
        db.commit()
    except ConflictError:
        db.rollback()
        logger.warning(f"Booking conflict: business={business_id} date={date_str} time={start_time}")
        raise
    except IntegrityError:
        db.rollback()
        logger.warning(f"Booking lost race: business={business_id} date={date_str} time={start_time}")
        raise ConflictError(f"{start_time} on {date_str} is no longer available")
    except OperationalError as e:
        # SQLite reports a concurrent writer as "database is locked"
        db.rollback()
        if "locked" not in str(e):
            raise
        logger.warning(f"Booking lost write lock: business={business_id} date={date_str} time={start_time}")
        raise ConflictError(f"{start_time} on {date_str} is being booked by someone else")

    db.refresh(appointment)
    logger.info(
        f"Appointment booked: business={business_id} service={service_id} "
        f"date={date_str} time={start_time} code={appointment.code}"
    )
    return appointment


def get_appointment(db: Session, business_id: int, code: str) -> Appointments:
    """Get a committed appointment by ticket code."""
    appointment = (
        db.query(Appointments)
        .filter(
            Appointments.business_id == business_id,
            Appointments.code == code.upper(),
        )
        .first()
    )
    if appointment is None:
        raise NotFound(f"Appointment {code} not found")
    return appointment


# ── Pipeline ─────────────────────────────────────────────────────────────


def _available_starts(
    db: Session,
    business: Businesses,
    service: Services,
    target_date: date,
    config: BookingConfig,
    redis: Redis | None,
) -> list[int]:
    # Snapshot the duration once for the whole computation
    duration = service.duration_min
    step = business.timeslot_step or config.default_step_minutes

    # Step 1: Sheet
    sheet = get_vacancy_sheet(db, business.id, config, redis)
    if sheet is None:
        return []

    # Step 2: Open intervals for the date
    intervals = expand(sheet, service.slug, target_date)
    if not intervals:
        return []

    # Step 3: Grid
    candidates = calculate_day_slots(intervals, step, duration)

    # Step 4: Existing appointments, single read
    appointments = _get_day_appointments(db, business.id, target_date)
    return filter_conflicts(candidates, appointments, duration)


# ── Sheet (with cache) ───────────────────────────────────────────────────


def get_vacancy_sheet(
    db: Session,
    business_id: int,
    config: BookingConfig | None = None,
    redis: Redis | None = None,
) -> VacancySheet | None:
    """Parsed sheet for a business, using Redis cache when available."""
    row = db.get(VacancySheets, business_id)
    if row is None:
        return None

    store = SheetRedisStore(redis, config) if redis is not None else None
    if store is not None:
        try:
            cached = store.get_sheet(business_id, row.version)
        except RedisError:
            logger.exception("Sheet cache read failed for business=%s", business_id)
            cached = None
        if cached is not None:
            return cached

    try:
        sheet = parse(row.raw_text)
    except ParseError:
        logger.error(f"Stored vacancy sheet for business {business_id} does not parse")
        raise

    if store is not None:
        try:
            store.store_sheet(business_id, row.version, sheet)
        except RedisError:
            logger.exception("Sheet cache write failed for business=%s", business_id)

    return sheet


# ── Database helpers ─────────────────────────────────────────────────────


def _get_business_and_service(
    db: Session,
    business_id: int,
    service_id: int,
) -> tuple[Businesses, Services]:
    business = db.get(Businesses, business_id)
    if business is None:
        raise NotFound(f"Business {business_id} not found")

    service = db.get(Services, service_id)
    if service is None or service.business_id != business.id:
        raise NotFound(f"Service {service_id} not found")

    return business, service


def _get_day_appointments(db: Session, business_id: int, target_date: date) -> list[Appointments]:
    return (
        db.query(Appointments)
        .filter(
            Appointments.business_id == business_id,
            Appointments.date == target_date.isoformat(),
        )
        .order_by(Appointments.start_minute)
        .all()
    )


def _get_day_version(db: Session, business_id: int, date_str: str) -> int | None:
    """Current booking-day version, None if nobody booked that day yet."""
    return (
        db.query(BookingDays.version)
        .filter(
            BookingDays.business_id == business_id,
            BookingDays.date == date_str,
        )
        .scalar()
    )


def _claim_day(db: Session, business_id: int, date_str: str, version: int | None) -> None:
    """
    Bump the booking-day version, but only from the version we checked against.

    A first booking inserts the row; a concurrent first booking then
    fails on the (business_id, date) unique constraint.
    """
    if version is None:
        db.add(BookingDays(business_id=business_id, date=date_str, version=1))
        db.flush()
        return

    result = db.execute(
        update(BookingDays)
        .where(
            BookingDays.business_id == business_id,
            BookingDays.date == date_str,
            BookingDays.version == version,
        )
        .values(version=version + 1)
    )
    if result.rowcount == 0:
        raise ConflictError(f"Appointments on {date_str} changed while booking")
