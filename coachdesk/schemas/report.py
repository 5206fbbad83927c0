from pydantic import BaseModel, model_validator
from typing import Optional, List
from datetime import date


class ReportRequest(BaseModel):
    # None = every active client of the trainer
    client_ids: Optional[List[int]] = None
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class ClientReportResponse(BaseModel):
    client_id: int
    client_name: str
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    start_date: date
    end_date: date
    exercises_completed: int
    total_exercises: int
    meals_completed: int
    total_meals: int
    completion_rate: float

    class Config:
        from_attributes = True
