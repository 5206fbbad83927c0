from sqlalchemy import Column, Integer, String, DateTime, Boolean
from sqlalchemy.orm import relationship
from coachdesk.core.database import Base, TagList
from coachdesk.core.utils import utc_now

class Trainer(Base):
    """
    A personal trainer. Owns clients, plans, private library exercises
    and at most one current subscription.
    """
    __tablename__ = "trainers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    cref = Column(String, nullable=True)  # professional registration number
    specializations = Column(TagList, nullable=False, default=list)
    active = Column(Boolean, default=True, nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)  # platform staff, may grant subscriptions

    created_at = Column(DateTime, default=utc_now, nullable=False)

    clients = relationship("Client", back_populates="trainer")
    subscriptions = relationship("Subscription", back_populates="trainer")
