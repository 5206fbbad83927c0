from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime

from coachdesk.core.utils import normalize_tags


class ExerciseCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    emoji: Optional[str] = Field(default=None, max_length=8)


class ExerciseCategoryResponse(BaseModel):
    id: int
    name: str
    emoji: Optional[str] = None

    class Config:
        from_attributes = True


class ExerciseCreate(BaseModel):
    category_id: int
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    instructions: Optional[str] = None
    muscle_groups: List[str] = []
    equipment: List[str] = []
    video_url: Optional[str] = None

    @field_validator("muscle_groups", "equipment")
    @classmethod
    def unique_tags(cls, v):
        return normalize_tags(v)


class ExerciseUpdate(BaseModel):
    category_id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    instructions: Optional[str] = None
    muscle_groups: Optional[List[str]] = None
    equipment: Optional[List[str]] = None
    video_url: Optional[str] = None

    @field_validator("muscle_groups", "equipment")
    @classmethod
    def unique_tags(cls, v):
        return normalize_tags(v) if v is not None else v


class ExerciseResponse(BaseModel):
    id: int
    category_id: int
    trainer_id: Optional[int] = None
    name: str
    description: Optional[str] = None
    instructions: Optional[str] = None
    muscle_groups: List[str] = []
    equipment: List[str] = []
    video_url: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
