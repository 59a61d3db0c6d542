# boutique/models/customers.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from boutique.models.measurements import CORE_MEASUREMENT_KEYS


class CustomerIn(BaseModel):
    full_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    notes: Optional[str] = None

    bust: Optional[float] = Field(None, gt=0)
    under_bust: Optional[float] = Field(None, gt=0)
    waist: Optional[float] = Field(None, gt=0)
    hip: Optional[float] = Field(None, gt=0)
    shoulder_width: Optional[float] = Field(None, gt=0)
    arm_length: Optional[float] = Field(None, gt=0)
    upper_arm: Optional[float] = Field(None, gt=0)
    neck_round: Optional[float] = Field(None, gt=0)
    front_neck_depth: Optional[float] = Field(None, gt=0)
    back_neck_depth: Optional[float] = Field(None, gt=0)
    full_height: Optional[float] = Field(None, gt=0)

    class Config:
        str_strip_whitespace = True

    @field_validator("email", "address", "notes", *CORE_MEASUREMENT_KEYS, mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class CustomerOut(BaseModel):
    id: int
    full_name: str
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None

    bust: Optional[float] = None
    under_bust: Optional[float] = None
    waist: Optional[float] = None
    hip: Optional[float] = None
    shoulder_width: Optional[float] = None
    arm_length: Optional[float] = None
    upper_arm: Optional[float] = None
    neck_round: Optional[float] = None
    front_neck_depth: Optional[float] = None
    back_neck_depth: Optional[float] = None
    full_height: Optional[float] = None

    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CustomerBrief(BaseModel):
    id: int
    full_name: str
    phone: str


class CustomerPage(BaseModel):
    items: List[CustomerOut]
    total: int
    page: int
    page_size: int
    total_pages: int
