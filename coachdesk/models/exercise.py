from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from coachdesk.core.database import Base, TagList
from coachdesk.core.utils import utc_now


class ExerciseCategory(Base):
    __tablename__ = "exercise_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    emoji = Column(String(8), nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    exercises = relationship("Exercise", back_populates="category")


class Exercise(Base):
    """
    Library exercise. ``trainer_id`` is NULL for the shared catalogue and set
    for exercises a trainer added for their own clients.
    """
    __tablename__ = "exercises"

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("exercise_categories.id"), nullable=False)
    trainer_id = Column(Integer, ForeignKey("trainers.id"), nullable=True, index=True)

    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    instructions = Column(Text, nullable=True)
    muscle_groups = Column(TagList, nullable=False, default=list)
    equipment = Column(TagList, nullable=False, default=list)
    video_url = Column(String, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)

    category = relationship("ExerciseCategory", back_populates="exercises")
