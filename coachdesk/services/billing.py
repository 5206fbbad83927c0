import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from coachdesk.core.exceptions import NotFoundError, ValidationError
from coachdesk.core.utils import utc_now
from coachdesk.models.subscription import (
    PaymentRecord,
    Subscription,
    SubscriptionPlan,
    ENTITLED_STATUSES,
    SUBSCRIPTION_STATUSES,
)
from coachdesk.models.trainer import Trainer
from coachdesk.schemas.billing import BillingEvent
from coachdesk.services.quota_gate import QuotaGate

logger = logging.getLogger(__name__)

# Days per month used for manual assignments
_DAYS_PER_MONTH = 30


def _from_timestamp(value) -> Optional[datetime]:
    """Provider timestamps are unix seconds; stored values are naive UTC."""
    if value is None:
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc).replace(tzinfo=None)


class BillingService:

    @staticmethod
    def list_plans(db: Session) -> List[SubscriptionPlan]:
        return (
            db.query(SubscriptionPlan)
            .filter(SubscriptionPlan.active.is_(True))
            .order_by(SubscriptionPlan.student_limit, SubscriptionPlan.id)
            .all()
        )

    @staticmethod
    def _find_by_provider_id(db: Session, provider_id) -> Optional[Subscription]:
        if not provider_id:
            return None
        return (
            db.query(Subscription)
            .filter(Subscription.provider_subscription_id == str(provider_id))
            .first()
        )

    @staticmethod
    def apply_billing_event(db: Session, event: BillingEvent) -> bool:
        """
        Applies one provider webhook event. Returns False when the event was
        ignored (unknown type or unknown subscription). Signatures are not checked.
        """
        payload = event.data.get("object", event.data) or {}
        handlers = {
            "customer.subscription.created": BillingService._on_subscription_update,
            "customer.subscription.updated": BillingService._on_subscription_update,
            "customer.subscription.deleted": BillingService._on_subscription_deleted,
            "invoice.payment_succeeded": BillingService._on_payment_succeeded,
            "invoice.payment_failed": BillingService._on_payment_failed,
        }
        handler = handlers.get(event.type)
        if handler is None:
            logger.info("Unhandled billing event type: %s", event.type)
            return False

        try:
            handled = handler(db, payload)
            if handled:
                db.commit()
        except Exception:
            db.rollback()
            logger.exception("Billing event %s failed", event.type)
            raise
        return handled

    @staticmethod
    def _on_subscription_update(db: Session, payload: dict) -> bool:
        subscription = BillingService._find_by_provider_id(db, payload.get("id"))
        if subscription is None:
            logger.warning("Billing event for unknown subscription %r ignored", payload.get("id"))
            return False

        status = payload.get("status")
        if status is not None:
            if status not in SUBSCRIPTION_STATUSES:
                raise ValidationError(f"Unknown subscription status: {status!r}", field="status")
            subscription.status = status
        if "current_period_start" in payload:
            subscription.current_period_start = _from_timestamp(payload["current_period_start"])
        if "current_period_end" in payload:
            subscription.current_period_end = _from_timestamp(payload["current_period_end"])
        if "cancel_at_period_end" in payload:
            subscription.cancel_at_period_end = bool(payload["cancel_at_period_end"])

        logger.info("Subscription %s synced: status=%s", subscription.id, subscription.status)
        return True

    @staticmethod
    def _on_subscription_deleted(db: Session, payload: dict) -> bool:
        subscription = BillingService._find_by_provider_id(db, payload.get("id"))
        if subscription is None:
            logger.warning("Cancellation for unknown subscription %r ignored", payload.get("id"))
            return False
        subscription.status = "canceled"
        logger.info("Subscription %s canceled by provider", subscription.id)
        return True

    @staticmethod
    def _record_payment(db: Session, payload: dict, status: str, amount_key: str) -> bool:
        subscription = BillingService._find_by_provider_id(db, payload.get("subscription"))
        if subscription is None:
            logger.warning("Invoice for unknown subscription %r ignored", payload.get("subscription"))
            return False

        paid_at = None
        if status == "succeeded":
            transitions = payload.get("status_transitions") or {}
            paid_at = _from_timestamp(transitions.get("paid_at")) or utc_now()

        db.add(PaymentRecord(
            subscription_id=subscription.id,
            provider_payment_id=payload.get("payment_intent"),
            amount_cents=int(payload.get(amount_key) or 0),
            currency=payload.get("currency"),
            status=status,
            paid_at=paid_at,
        ))
        logger.info("Payment %s recorded for subscription %s", status, subscription.id)
        return True

    @staticmethod
    def _on_payment_succeeded(db: Session, payload: dict) -> bool:
        return BillingService._record_payment(db, payload, "succeeded", "amount_paid")

    @staticmethod
    def _on_payment_failed(db: Session, payload: dict) -> bool:
        return BillingService._record_payment(db, payload, "failed", "amount_due")

    @staticmethod
    def assign_subscription(
        db: Session,
        trainer_id: int,
        plan_id: int,
        months: int = 1,
        status: str = "active",
    ) -> Subscription:
        """Manual assignment (no payment provider). Other entitled subscriptions are canceled."""
        if status not in ENTITLED_STATUSES:
            raise ValidationError(f"Cannot assign a subscription as {status!r}", field="status")
        if months < 1:
            raise ValidationError("months must be at least 1", field="months")

        trainer = db.query(Trainer).filter(Trainer.id == trainer_id).first()
        if not trainer:
            raise NotFoundError("Trainer", trainer_id)
        plan = (
            db.query(SubscriptionPlan)
            .filter(SubscriptionPlan.id == plan_id, SubscriptionPlan.active.is_(True))
            .first()
        )
        if not plan:
            raise NotFoundError("Subscription plan", plan_id)

        try:
            previous = (
                db.query(Subscription)
                .filter(
                    Subscription.trainer_id == trainer_id,
                    Subscription.status.in_(ENTITLED_STATUSES),
                )
                .all()
            )
            for old in previous:
                old.status = "canceled"

            now = utc_now()
            subscription = Subscription(
                trainer_id=trainer_id,
                plan_id=plan.id,
                status=status,
                current_period_start=now,
                current_period_end=now + timedelta(days=_DAYS_PER_MONTH * months),
                cancel_at_period_end=False,
            )
            db.add(subscription)
            db.flush()
            QuotaGate.refresh_students_count(db, trainer_id)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(subscription)
        logger.info(
            "Trainer %s assigned plan %s (%s clients) for %s month(s); %s previous canceled",
            trainer_id, plan.name, plan.student_limit, months, len(previous),
        )
        return subscription
