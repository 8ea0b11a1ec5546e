import os
from datetime import date, timedelta

os.environ.setdefault("DATABASE_URL", "sqlite:///./data/test.db")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from timegrid.database import get_db, make_engine
from timegrid.main import app
from timegrid.models import Base
from timegrid.models.generated import Businesses, Services
from timegrid.redis_client import get_redis
from timegrid.services.slug import slugify
from timegrid.services.vacancy_sheets import update_vacancy_sheet


CONSULTING_SHEET = """\
onsite-4hs-support:1
 tue, thu, sat
  9-18
"""


def next_weekday(weekday: int) -> date:
    """First date after today falling on weekday (0 = Monday)."""
    day = date.today() + timedelta(days=1)
    while day.weekday() != weekday:
        day += timedelta(days=1)
    return day


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'timegrid.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def redis():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def business(db):
    obj = Businesses(name="Alariva Consulting", timeslot_step=30, time_format="h:i a")
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@pytest.fixture
def service(db, business):
    name = "OnSite 4hs Support"
    obj = Services(business_id=business.id, name=name, slug=slugify(name), duration_min=240)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@pytest.fixture
def published(db, business, service, redis):
    """Business with the consulting service and its vacancy sheet."""
    update_vacancy_sheet(db, business.id, CONSULTING_SHEET, redis=redis)
    return business, service


@pytest.fixture
def client(session_factory, redis):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = lambda: redis
    yield TestClient(app)
    app.dependency_overrides.clear()
