from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import datetime


# --- Editor payload: ids present = update, absent = insert ---

class ExerciseAssignmentIn(BaseModel):
    id: Optional[int] = None
    exercise_id: int
    sets: int = Field(3, ge=1)
    reps_min: Optional[int] = Field(default=None, ge=0)
    reps_max: Optional[int] = Field(default=None, ge=0)
    rest_seconds: Optional[int] = Field(default=None, ge=0)
    weight_kg: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_rep_range(self):
        if self.reps_min is not None and self.reps_max is not None and self.reps_max < self.reps_min:
            raise ValueError("reps_max must be greater than or equal to reps_min")
        return self


class TrainingSessionIn(BaseModel):
    id: Optional[int] = None
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    day_of_week: int = Field(..., ge=0, le=6, description="0=Sunday ... 6=Saturday")
    exercises: List[ExerciseAssignmentIn] = []


class TrainingPlanCreate(BaseModel):
    client_id: int
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    active: bool = True
    duration_weeks: int = Field(4, ge=1, le=104)
    sessions_per_week: int = Field(3, ge=1, le=7)
    sessions: List[TrainingSessionIn] = []


class TrainingPlanUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    active: Optional[bool] = None
    duration_weeks: Optional[int] = Field(default=None, ge=1, le=104)
    sessions_per_week: Optional[int] = Field(default=None, ge=1, le=7)


class TrainingTreeReplace(BaseModel):
    sessions: List[TrainingSessionIn]


# --- Responses ---

class ExerciseAssignmentResponse(BaseModel):
    id: int
    exercise_id: int
    sets: int
    reps_min: Optional[int] = None
    reps_max: Optional[int] = None
    rest_seconds: Optional[int] = None
    weight_kg: Optional[float] = None
    notes: Optional[str] = None
    order_index: int

    class Config:
        from_attributes = True


class TrainingSessionResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    day_of_week: int
    order_index: int
    exercises: List[ExerciseAssignmentResponse] = []

    class Config:
        from_attributes = True


class TrainingPlanResponse(BaseModel):
    id: int
    client_id: int
    trainer_id: int
    name: str
    description: Optional[str] = None
    active: bool
    duration_weeks: int
    sessions_per_week: int
    created_at: datetime
    updated_at: datetime
    sessions: List[TrainingSessionResponse] = []

    class Config:
        from_attributes = True
