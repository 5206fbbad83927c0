import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coachdesk.api.routes.auth import get_current_admin, get_current_trainer
from coachdesk.core.database import get_db
from coachdesk.models.trainer import Trainer
from coachdesk.schemas.billing import (
    AssignSubscription,
    BillingEvent,
    SubscriptionPlanResponse,
    SubscriptionResponse,
)
from coachdesk.services.billing import BillingService
from coachdesk.services.quota_gate import QuotaGate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/plans", response_model=List[SubscriptionPlanResponse])
def list_plans(db: Session = Depends(get_db)):
    return BillingService.list_plans(db)


@router.get("/subscription", response_model=Optional[SubscriptionResponse])
def get_subscription(db: Session = Depends(get_db), current_trainer: Trainer = Depends(get_current_trainer)):
    """Current entitled subscription, or null on the free tier."""
    return QuotaGate.active_subscription(db, current_trainer.id)


@router.post("/webhook")
def billing_webhook(event: BillingEvent, db: Session = Depends(get_db)):
    handled = BillingService.apply_billing_event(db, event)
    return {"received": True, "handled": handled}


@router.post("/assign", response_model=SubscriptionResponse, status_code=status.HTTP_201_CREATED)
def assign_subscription(
    data: AssignSubscription,
    db: Session = Depends(get_db),
    admin: Trainer = Depends(get_current_admin),
):
    """Grants a plan to a trainer without a payment. Platform administrators only."""
    subscription = BillingService.assign_subscription(
        db, data.trainer_id, data.plan_id, months=data.months, status=data.status
    )
    logger.info("Admin %s assigned plan %s to trainer %s", admin.id, data.plan_id, data.trainer_id)
    return subscription
