import logging
import threading
from contextlib import contextmanager
from datetime import timedelta
from typing import Dict, Optional

from sqlalchemy import func, text
from sqlalchemy.orm import Session

from coachdesk.core.config import settings
from coachdesk.core.exceptions import QuotaExceededError
from coachdesk.core.utils import utc_now
from coachdesk.models.client import Client
from coachdesk.models.subscription import Subscription, ENTITLED_STATUSES

logger = logging.getLogger(__name__)

# First key of pg_advisory_xact_lock(int, int); the second is the trainer id
_CLIENT_QUOTA_LOCK_NAMESPACE = 4201

# Per-trainer locks for databases without advisory locks (SQLite dev/tests)
_process_locks: Dict[int, threading.Lock] = {}
_process_locks_guard = threading.Lock()


def _process_lock(trainer_id: int) -> threading.Lock:
    with _process_locks_guard:
        return _process_locks.setdefault(trainer_id, threading.Lock())


class QuotaGate:
    """
    Decides whether a trainer may have one more active client.

    Limits come from the trainer's current entitled subscription, or the free
    tier when there is none. Usage is always a live count of active clients;
    ``Subscription.students_count`` is only refreshed for display.
    """

    @staticmethod
    def active_subscription(db: Session, trainer_id: int) -> Optional[Subscription]:
        return (
            db.query(Subscription)
            .filter(
                Subscription.trainer_id == trainer_id,
                Subscription.status.in_(ENTITLED_STATUSES),
            )
            .order_by(Subscription.created_at.desc(), Subscription.id.desc())
            .first()
        )

    @staticmethod
    def client_limit(db: Session, trainer_id: int) -> int:
        subscription = QuotaGate.active_subscription(db, trainer_id)
        if subscription is None:
            return settings.FREE_TIER_CLIENT_LIMIT
        return subscription.plan.student_limit

    @staticmethod
    def count_active_clients(db: Session, trainer_id: int) -> int:
        return (
            db.query(func.count(Client.id))
            .filter(Client.trainer_id == trainer_id, Client.active.is_(True))
            .scalar()
        ) or 0

    @staticmethod
    def can_create_client(db: Session, trainer_id: int) -> bool:
        return QuotaGate.count_active_clients(db, trainer_id) < QuotaGate.client_limit(db, trainer_id)

    @staticmethod
    def assert_can_create_client(db: Session, trainer_id: int) -> None:
        limit = QuotaGate.client_limit(db, trainer_id)
        current = QuotaGate.count_active_clients(db, trainer_id)
        if current >= limit:
            logger.info("Quota rejected for trainer %s: %s/%s active clients", trainer_id, current, limit)
            raise QuotaExceededError(limit=limit, current=current)

    @staticmethod
    @contextmanager
    def creation_guard(db: Session, trainer_id: int):
        """
        Serializes "count active clients" + "insert/activate client" per trainer.

        The caller must commit (or roll back) inside the block. On PostgreSQL a
        transaction-scoped advisory lock is taken and released by that commit;
        elsewhere a process-local lock is held until the block exits.
        """
        if db.get_bind().dialect.name == "postgresql":
            db.execute(
                text("SELECT pg_advisory_xact_lock(:namespace, :trainer_id)"),
                {"namespace": _CLIENT_QUOTA_LOCK_NAMESPACE, "trainer_id": trainer_id},
            )
            yield
        else:
            with _process_lock(trainer_id):
                yield

    @staticmethod
    def refresh_students_count(db: Session, trainer_id: int) -> None:
        """Recomputes the cached display counter. Does not commit."""
        count = QuotaGate.count_active_clients(db, trainer_id)
        subscription = QuotaGate.active_subscription(db, trainer_id)
        if subscription is not None:
            subscription.students_count = count

    @staticmethod
    def usage(db: Session, trainer_id: int) -> dict:
        subscription = QuotaGate.active_subscription(db, trainer_id)
        limit = subscription.plan.student_limit if subscription else settings.FREE_TIER_CLIENT_LIMIT
        count = QuotaGate.count_active_clients(db, trainer_id)

        expiring_soon = False
        if subscription is not None and subscription.current_period_end is not None:
            expiring_soon = subscription.current_period_end - utc_now() <= timedelta(days=settings.EXPIRY_WARNING_DAYS)

        return {
            "limit": limit,
            "active_clients": count,
            "remaining": max(limit - count, 0),
            "can_add_client": count < limit,
            "near_limit": limit > 0 and count / limit >= settings.NEAR_LIMIT_RATIO,
            "expiring_soon": expiring_soon,
            "on_free_tier": subscription is None,
            "subscription": subscription,
        }
