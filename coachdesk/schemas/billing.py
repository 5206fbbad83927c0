from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
from datetime import datetime


class SubscriptionPlanResponse(BaseModel):
    id: int
    name: str
    student_limit: int
    billing_period: str
    price_cents: int

    class Config:
        from_attributes = True


class SubscriptionResponse(BaseModel):
    id: int
    trainer_id: int
    status: str
    students_count: int
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    cancel_at_period_end: bool
    plan: SubscriptionPlanResponse

    class Config:
        from_attributes = True


class QuotaUsage(BaseModel):
    limit: int
    active_clients: int
    remaining: int
    can_add_client: bool
    near_limit: bool
    expiring_soon: bool
    on_free_tier: bool
    subscription: Optional[SubscriptionResponse] = None


class BillingEvent(BaseModel):
    """Webhook envelope as sent by the payment provider."""
    type: str
    data: Dict[str, Any] = Field(default_factory=dict)


class AssignSubscription(BaseModel):
    trainer_id: int
    plan_id: int
    months: int = Field(1, ge=1, le=36)
    status: str = Field("active", pattern="^(active|trialing)$")
