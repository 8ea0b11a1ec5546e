# backend/timegrid/schemas/businesses.py

from typing import Optional
from pydantic import BaseModel, Field


class BusinessCreate(BaseModel):
    name: str
    timeslot_step: int = 30
    time_format: str = "h:i a"
    vacancy_edit_advanced_mode: bool = False

    model_config = {"from_attributes": True}


class BusinessRead(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class PreferencesUpdate(BaseModel):
    timeslot_step: Optional[int] = Field(None, description="Grid step in minutes, > 0")
    time_format: Optional[str] = None
    vacancy_edit_advanced_mode: Optional[bool] = None

    model_config = {"from_attributes": True}


class PreferencesRead(BaseModel):
    timeslot_step: int
    time_format: str
    vacancy_edit_advanced_mode: bool

    model_config = {"from_attributes": True}
