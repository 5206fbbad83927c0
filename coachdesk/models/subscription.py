from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from coachdesk.core.database import Base
from coachdesk.core.utils import utc_now

SUBSCRIPTION_STATUSES = ("active", "canceled", "past_due", "unpaid", "trialing")
# Statuses that grant the plan's client limit
ENTITLED_STATUSES = ("active", "trialing")
BILLING_PERIODS = ("monthly", "quarterly", "yearly")


class SubscriptionPlan(Base):
    __tablename__ = "subscription_plans"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    student_limit = Column(Integer, nullable=False)
    billing_period = Column(String(16), nullable=False, default="monthly")
    price_cents = Column(Integer, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True, index=True)
    trainer_id = Column(Integer, ForeignKey("trainers.id"), nullable=False, index=True)
    plan_id = Column(Integer, ForeignKey("subscription_plans.id"), nullable=False)

    status = Column(String(16), nullable=False, default="active")
    # Display value only; quota decisions always count clients live
    students_count = Column(Integer, nullable=False, default=0)

    current_period_start = Column(DateTime, nullable=True)
    current_period_end = Column(DateTime, nullable=True)
    cancel_at_period_end = Column(Boolean, default=False, nullable=False)
    provider_subscription_id = Column(String, unique=True, nullable=True, index=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    trainer = relationship("Trainer", back_populates="subscriptions")
    plan = relationship("SubscriptionPlan")
    payments = relationship("PaymentRecord", back_populates="subscription", cascade="all, delete-orphan")


class PaymentRecord(Base):
    __tablename__ = "payment_records"

    id = Column(Integer, primary_key=True, index=True)
    subscription_id = Column(Integer, ForeignKey("subscriptions.id", ondelete="CASCADE"), nullable=False, index=True)
    provider_payment_id = Column(String, nullable=True)
    amount_cents = Column(Integer, nullable=False, default=0)
    currency = Column(String(8), nullable=True)
    status = Column(String(16), nullable=False)  # 'succeeded' | 'failed'
    paid_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    subscription = relationship("Subscription", back_populates="payments")
