from sqlalchemy import Column, ForeignKey, Integer, Text, UniqueConstraint, text

from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class Businesses(Base):
    __tablename__ = 'businesses'

    name = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)
    timeslot_step = Column(Integer, nullable=False, server_default=text('30'))
    time_format = Column(Text, nullable=False, server_default=text("'h:i a'"))
    vacancy_edit_advanced_mode = Column(Integer, nullable=False, server_default=text('0'))
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    services = relationship('Services', back_populates='business')
    vacancy_sheet = relationship('VacancySheets', back_populates='business', uselist=False)


class Services(Base):
    __tablename__ = 'services'
    __table_args__ = (
        UniqueConstraint('business_id', 'slug'),
    )

    business_id = Column(ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False)
    name = Column(Text, nullable=False)
    slug = Column(Text, nullable=False)
    duration_min = Column(Integer, nullable=False)
    id = Column(Integer, primary_key=True)
    description = Column(Text)

    business = relationship('Businesses', back_populates='services')


class VacancySheets(Base):
    __tablename__ = 'vacancy_sheets'

    business_id = Column(ForeignKey('businesses.id', ondelete='CASCADE'), primary_key=True)
    raw_text = Column(Text, nullable=False)
    version = Column(Integer, nullable=False, server_default=text('1'))
    updated_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))

    business = relationship('Businesses', back_populates='vacancy_sheet')


# Appointments reference business and service by id only.
class Appointments(Base):
    __tablename__ = 'appointments'
    __table_args__ = (
        UniqueConstraint('business_id', 'date', 'start_minute'),
    )

    business_id = Column(ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False)
    service_id = Column(ForeignKey('services.id'), nullable=False)
    date = Column(Text, nullable=False)
    start_minute = Column(Integer, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    code = Column(Text, nullable=False, unique=True)
    id = Column(Integer, primary_key=True)
    comments = Column(Text)
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))


class BookingDays(Base):
    __tablename__ = 'booking_days'
    __table_args__ = (
        UniqueConstraint('business_id', 'date'),
    )

    business_id = Column(ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False)
    date = Column(Text, nullable=False)
    version = Column(Integer, nullable=False, server_default=text('0'))
    id = Column(Integer, primary_key=True)
