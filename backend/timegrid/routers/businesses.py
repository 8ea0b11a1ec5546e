# backend/timegrid/routers/businesses.py
# Minimal business/service registration; the admin UI owns the rest.

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import Businesses as DBBusinesses, Services as DBServices
from ..schemas.businesses import (
    BusinessCreate,
    BusinessRead,
    PreferencesUpdate,
    PreferencesRead,
)
from ..schemas.services import ServiceCreate, ServiceRead
from ..services.preferences import get_business, set_preferences
from ..services.slots.config import validate_duration, validate_step
from ..services.slug import slugify

router = APIRouter(prefix="/businesses", tags=["businesses"])


@router.post("/", response_model=BusinessRead, status_code=status.HTTP_201_CREATED)
def create_business(
    data: BusinessCreate,
    db: Session = Depends(get_db),
):
    validate_step(data.timeslot_step)
    obj = DBBusinesses(
        name=data.name,
        timeslot_step=data.timeslot_step,
        time_format=data.time_format,
        vacancy_edit_advanced_mode=int(data.vacancy_edit_advanced_mode),
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@router.get("/{id}/preferences", response_model=PreferencesRead)
def get_preferences(id: int, db: Session = Depends(get_db)):
    return get_business(db, id)


@router.patch("/{id}/preferences", response_model=PreferencesRead)
def update_preferences(
    id: int,
    data: PreferencesUpdate,
    db: Session = Depends(get_db),
):
    return set_preferences(db, id, **data.model_dump(exclude_unset=True))


@router.post("/{id}/services", response_model=ServiceRead, status_code=status.HTTP_201_CREATED)
def create_service(
    id: int,
    data: ServiceCreate,
    db: Session = Depends(get_db),
):
    get_business(db, id)
    validate_duration(data.duration_min)

    # The slug is the service key in vacancy sheets: one service per key
    slug = slugify(data.name)
    existing = (
        db.query(DBServices)
        .filter(DBServices.business_id == id, DBServices.slug == slug)
        .first()
    )
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Service key '{slug}' already used by '{existing.name}'",
        )

    obj = DBServices(
        business_id=id,
        name=data.name,
        slug=slug,
        duration_min=data.duration_min,
        description=data.description,
    )
    db.add(obj)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Service key '{slug}' already used",
        )
    db.refresh(obj)
    return obj
