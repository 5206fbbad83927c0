from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship
from coachdesk.core.database import Base
from coachdesk.core.utils import utc_now

ITEM_KIND_EXERCISE = "exercise"
ITEM_KIND_MEAL = "meal"
ITEM_KINDS = (ITEM_KIND_EXERCISE, ITEM_KIND_MEAL)


class CompletionEvent(Base):
    """
    "Client finished this item at completed_at". There is no boolean flag:
    an item is done on a day when an event exists inside that local day.
    """
    __tablename__ = "completion_events"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False)

    # 'exercise' -> exercise_assignment_id is set, 'meal' -> meal_id is set
    item_kind = Column(String(16), nullable=False)
    exercise_assignment_id = Column(
        Integer, ForeignKey("exercise_assignments.id", ondelete="CASCADE"), nullable=True, index=True
    )
    meal_id = Column(Integer, ForeignKey("meals.id", ondelete="CASCADE"), nullable=True, index=True)

    completed_at = Column(DateTime, default=utc_now, nullable=False)
    notes = Column(Text, nullable=True)

    client = relationship("Client", back_populates="completion_events")
    exercise_assignment = relationship("ExerciseAssignment", back_populates="completions")
    meal = relationship("Meal", back_populates="completions")

    __table_args__ = (
        CheckConstraint(
            "(item_kind = 'exercise' AND exercise_assignment_id IS NOT NULL AND meal_id IS NULL) OR "
            "(item_kind = 'meal' AND meal_id IS NOT NULL AND exercise_assignment_id IS NULL)",
            name="ck_completion_events_single_item",
        ),
        Index("ix_completion_events_client_completed_at", "client_id", "completed_at"),
    )

    @property
    def item_id(self) -> int:
        return self.exercise_assignment_id if self.item_kind == ITEM_KIND_EXERCISE else self.meal_id
