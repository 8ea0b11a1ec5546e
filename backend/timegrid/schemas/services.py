# backend/timegrid/schemas/services.py

from typing import Optional
from pydantic import BaseModel


class ServiceCreate(BaseModel):
    name: str
    duration_min: int
    description: Optional[str] = None

    model_config = {"from_attributes": True}


class ServiceRead(BaseModel):
    id: int
    business_id: int
    name: str
    slug: str
    duration_min: int
    description: Optional[str] = None

    model_config = {"from_attributes": True}
