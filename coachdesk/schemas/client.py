from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import date, datetime

from coachdesk.core.utils import normalize_tags


class ClientCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    weight: Optional[float] = Field(default=None, gt=0, description="Weight in kg")
    height: Optional[float] = Field(default=None, gt=0, description="Height in cm")
    goals: List[str] = Field(default=[], description="Free-text goal tags")
    medical_restrictions: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be blank")
        return v

    @field_validator("goals")
    @classmethod
    def unique_goals(cls, v):
        return normalize_tags(v)


class ClientUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    weight: Optional[float] = Field(default=None, gt=0)
    height: Optional[float] = Field(default=None, gt=0)
    goals: Optional[List[str]] = None
    medical_restrictions: Optional[str] = None

    @field_validator("goals")
    @classmethod
    def unique_goals(cls, v):
        return normalize_tags(v) if v is not None else v


class ClientResponse(BaseModel):
    id: int
    trainer_id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    goals: List[str] = []
    medical_restrictions: Optional[str] = None
    handle: Optional[str] = None
    access_token: str
    active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ClientPublicProfile(BaseModel):
    """What the client sees on their own page: no token, no trainer internals."""
    id: int
    name: str
    handle: Optional[str] = None
    goals: List[str] = []
    weight: Optional[float] = None
    height: Optional[float] = None

    class Config:
        from_attributes = True
