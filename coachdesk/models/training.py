from sqlalchemy import CheckConstraint, Column, Integer, Float, ForeignKey, DateTime, String, Boolean, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from coachdesk.core.database import Base
from coachdesk.core.utils import utc_now

class TrainingPlan(Base):
    __tablename__ = "training_plans"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    trainer_id = Column(Integer, ForeignKey("trainers.id"), nullable=False, index=True)

    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    active = Column(Boolean, default=True, nullable=False)

    # --- Plan-level targets ---
    duration_weeks = Column(Integer, default=4, nullable=False)
    sessions_per_week = Column(Integer, default=3, nullable=False)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    client = relationship("Client", back_populates="training_plans")
    sessions = relationship(
        "TrainingSession",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="TrainingSession.order_index",
    )


class TrainingSession(Base):
    """One workout day of a plan. At most one session per day_of_week (0=Sunday)."""
    __tablename__ = "training_sessions"

    id = Column(Integer, primary_key=True, index=True)
    plan_id = Column(Integer, ForeignKey("training_plans.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    day_of_week = Column(Integer, nullable=False)
    order_index = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=utc_now, nullable=False)

    plan = relationship("TrainingPlan", back_populates="sessions")
    exercises = relationship(
        "ExerciseAssignment",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="ExerciseAssignment.order_index",
    )

    __table_args__ = (
        UniqueConstraint("plan_id", "day_of_week", name="uq_training_sessions_plan_day"),
        # negative days are parking slots used while a tree is saved
        CheckConstraint("day_of_week <= 6", name="ck_training_sessions_day_of_week"),
    )


class ExerciseAssignment(Base):
    __tablename__ = "exercise_assignments"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("training_sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_id = Column(Integer, ForeignKey("exercises.id"), nullable=False)

    sets = Column(Integer, nullable=False, default=3)
    reps_min = Column(Integer, nullable=True)
    reps_max = Column(Integer, nullable=True)
    rest_seconds = Column(Integer, nullable=True)
    weight_kg = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    order_index = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=utc_now, nullable=False)

    session = relationship("TrainingSession", back_populates="exercises")
    exercise = relationship("Exercise")
    completions = relationship(
        "CompletionEvent",
        back_populates="exercise_assignment",
        cascade="all, delete",
    )
