from sqlalchemy import Column, Integer, Float, ForeignKey, DateTime, String, Boolean, Text
from sqlalchemy.orm import relationship
from coachdesk.core.database import Base
from coachdesk.core.utils import utc_now

class NutritionPlan(Base):
    __tablename__ = "nutrition_plans"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    trainer_id = Column(Integer, ForeignKey("trainers.id"), nullable=False, index=True)

    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    active = Column(Boolean, default=True, nullable=False)

    # --- Daily targets ---
    daily_calories = Column(Float, nullable=True)
    daily_protein = Column(Float, nullable=True)
    daily_carbs = Column(Float, nullable=True)
    daily_fat = Column(Float, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    client = relationship("Client", back_populates="nutrition_plans")
    meals = relationship(
        "Meal",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="Meal.order_index",
    )


class Meal(Base):
    __tablename__ = "meals"

    id = Column(Integer, primary_key=True, index=True)
    plan_id = Column(Integer, ForeignKey("nutrition_plans.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String, nullable=False)
    time_of_day = Column(String(5), nullable=True)  # "HH:MM"
    order_index = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=utc_now, nullable=False)

    plan = relationship("NutritionPlan", back_populates="meals")
    foods = relationship(
        "FoodLine",
        back_populates="meal",
        cascade="all, delete-orphan",
        order_by="FoodLine.order_index",
    )
    completions = relationship(
        "CompletionEvent",
        back_populates="meal",
        cascade="all, delete",
    )


class FoodLine(Base):
    __tablename__ = "food_lines"

    id = Column(Integer, primary_key=True, index=True)
    meal_id = Column(Integer, ForeignKey("meals.id", ondelete="CASCADE"), nullable=False, index=True)

    food_name = Column(String, nullable=False)
    quantity = Column(Float, nullable=False)
    unit = Column(String(16), nullable=False, default="g")
    calories = Column(Float, nullable=True)
    protein = Column(Float, nullable=True)
    carbs = Column(Float, nullable=True)
    fat = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    order_index = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=utc_now, nullable=False)

    meal = relationship("Meal", back_populates="foods")
