from pydantic import BaseModel, Field
from typing import Literal, Optional, List
from datetime import date

from coachdesk.schemas.client import ClientPublicProfile
from coachdesk.schemas.training import TrainingPlanResponse
from coachdesk.schemas.nutrition import NutritionPlanResponse


class ToggleCompletionRequest(BaseModel):
    token: str = Field(..., min_length=1)
    item_id: int
    item_kind: Literal["exercise", "meal"]
    # Back-fill a past day; defaults to today in the app timezone
    day: Optional[date] = None


class ToggleCompletionResponse(BaseModel):
    item_id: int
    item_kind: str
    day: date
    completed: bool


class StudentDashboard(BaseModel):
    """Client page payload: current plans plus what is already done today."""
    client: ClientPublicProfile
    day: date
    training_plan: Optional[TrainingPlanResponse] = None
    nutrition_plan: Optional[NutritionPlanResponse] = None
    completed_exercise_ids: List[int] = []
    completed_meal_ids: List[int] = []
