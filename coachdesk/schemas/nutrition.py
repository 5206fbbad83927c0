from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


# --- Editor payload ---

class FoodLineIn(BaseModel):
    id: Optional[int] = None
    food_name: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0)
    unit: str = Field("g", min_length=1, max_length=16)
    calories: Optional[float] = Field(default=None, ge=0)
    protein: Optional[float] = Field(default=None, ge=0)
    carbs: Optional[float] = Field(default=None, ge=0)
    fat: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None


class MealIn(BaseModel):
    id: Optional[int] = None
    name: str = Field(..., min_length=1)
    time_of_day: Optional[str] = Field(default=None, pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    foods: List[FoodLineIn] = []


class NutritionPlanCreate(BaseModel):
    client_id: int
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    active: bool = True
    daily_calories: Optional[float] = Field(default=None, ge=0)
    daily_protein: Optional[float] = Field(default=None, ge=0)
    daily_carbs: Optional[float] = Field(default=None, ge=0)
    daily_fat: Optional[float] = Field(default=None, ge=0)
    meals: List[MealIn] = []


class NutritionPlanUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    active: Optional[bool] = None
    daily_calories: Optional[float] = Field(default=None, ge=0)
    daily_protein: Optional[float] = Field(default=None, ge=0)
    daily_carbs: Optional[float] = Field(default=None, ge=0)
    daily_fat: Optional[float] = Field(default=None, ge=0)


class NutritionTreeReplace(BaseModel):
    meals: List[MealIn]


# --- Responses ---

class FoodLineResponse(BaseModel):
    id: int
    food_name: str
    quantity: float
    unit: str
    calories: Optional[float] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fat: Optional[float] = None
    notes: Optional[str] = None
    order_index: int

    class Config:
        from_attributes = True


class MealResponse(BaseModel):
    id: int
    name: str
    time_of_day: Optional[str] = None
    order_index: int
    foods: List[FoodLineResponse] = []

    class Config:
        from_attributes = True


class NutritionPlanResponse(BaseModel):
    id: int
    client_id: int
    trainer_id: int
    name: str
    description: Optional[str] = None
    active: bool
    daily_calories: Optional[float] = None
    daily_protein: Optional[float] = None
    daily_carbs: Optional[float] = None
    daily_fat: Optional[float] = None
    created_at: datetime
    updated_at: datetime
    meals: List[MealResponse] = []

    class Config:
        from_attributes = True
