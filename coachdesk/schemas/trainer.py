from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime

from coachdesk.core.utils import normalize_tags


class TrainerRegister(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)
    phone: Optional[str] = None
    cref: Optional[str] = None
    specializations: List[str] = []

    @field_validator("specializations")
    @classmethod
    def unique_specializations(cls, v):
        return normalize_tags(v)


class TrainerLogin(BaseModel):
    email: EmailStr
    password: str


class TrainerResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    cref: Optional[str] = None
    specializations: List[str] = []
    active: bool
    is_admin: bool = False
    created_at: datetime

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    trainer: TrainerResponse
