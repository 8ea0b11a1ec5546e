# backend/timegrid/schemas/vacancies.py
"""
Pydantic schemas for vacancies API.
"""

from pydantic import BaseModel, Field


class VacancyTimesResponse(BaseModel):
    """Available start times for a service on a date."""
    times: list[str] = Field(description='Ascending "HH:MM" start times')


class VacancySheetUpdate(BaseModel):
    """Sheet text in the three-level vacancy grammar."""
    vacancies: str


class VacancySheetUpdated(BaseModel):
    message: str = "Availability registered successfully"
    rules: int
    version: int


class VacancySheetRead(BaseModel):
    business_id: int
    version: int
    raw_text: str
    canonical: str

    model_config = {"from_attributes": True}
