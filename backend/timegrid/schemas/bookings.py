# backend/timegrid/schemas/bookings.py

import re
from datetime import date
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class BookingCreate(BaseModel):
    business_id: int = Field(alias="businessId")
    service_id: int = Field(alias="serviceId")
    date: date
    time: str = Field(description="Time in HH:MM format")
    comments: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        """Validate time format."""
        if not re.match(r"^([01]\d|2[0-3]):[0-5]\d$", v):
            raise ValueError("Time must be in HH:MM format")
        return v


class BookingRead(BaseModel):
    code: str
    business_id: int = Field(alias="businessId")
    service_id: int = Field(alias="serviceId")
    service_name: str = Field(alias="serviceName")
    date: date
    time: str
    duration_minutes: int = Field(alias="durationMinutes")
    comments: Optional[str] = None
    confirmation: str

    model_config = ConfigDict(populate_by_name=True)
