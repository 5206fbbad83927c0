from sqlalchemy import Column, Integer, String, Float, ForeignKey, Text, DateTime, Date, Boolean, Index
from sqlalchemy.orm import relationship
from coachdesk.core.database import Base, TagList
from coachdesk.core.utils import utc_now

class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    trainer_id = Column(Integer, ForeignKey("trainers.id"), nullable=False, index=True)

    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    birth_date = Column(Date, nullable=True)
    weight = Column(Float, nullable=True)  # kg
    height = Column(Float, nullable=True)  # cm
    goals = Column(TagList, nullable=False, default=list)
    medical_restrictions = Column(Text, nullable=True)

    # Public numeric handle plus the private capability token of the client link
    handle = Column(String(16), unique=True, index=True, nullable=True)
    access_token = Column(String(128), nullable=False)
    access_token_digest = Column(String(64), unique=True, index=True, nullable=False)  # sha256 of access_token

    # Soft delete; clients with plans are never hard-deleted
    active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    trainer = relationship("Trainer", back_populates="clients")
    training_plans = relationship("TrainingPlan", back_populates="client")
    nutrition_plans = relationship("NutritionPlan", back_populates="client")
    completion_events = relationship("CompletionEvent", back_populates="client")

    __table_args__ = (
        Index("ix_clients_trainer_active", "trainer_id", "active"),
    )
