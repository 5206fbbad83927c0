import threading
from datetime import timedelta

import pytest
from sqlalchemy.orm import sessionmaker

from coachdesk.core.config import settings
from coachdesk.core.database import Base, build_engine
from coachdesk.core.exceptions import QuotaExceededError
from coachdesk.core.security import security
from coachdesk.core.utils import utc_now
from coachdesk.models.client import Client
from coachdesk.models.subscription import Subscription, SubscriptionPlan
from coachdesk.models.trainer import Trainer
from coachdesk.schemas.client import ClientCreate
from coachdesk.services.client_service import ClientService
from coachdesk.services.quota_gate import QuotaGate


def test_free_tier_limit(db_session, trainer, make_client):
    limit = settings.FREE_TIER_CLIENT_LIMIT
    for _ in range(limit):
        make_client(trainer)

    assert QuotaGate.client_limit(db_session, trainer.id) == limit
    assert not QuotaGate.can_create_client(db_session, trainer.id)
    with pytest.raises(QuotaExceededError) as exc_info:
        make_client(trainer)
    assert exc_info.value.limit == limit
    assert exc_info.value.current == limit
    assert exc_info.value.status_code == 402
    assert QuotaGate.count_active_clients(db_session, trainer.id) == limit


def test_one_below_limit_allows_creation(db_session, trainer, make_client, make_subscription):
    make_subscription(trainer, student_limit=3)
    make_client(trainer)
    make_client(trainer)

    assert QuotaGate.can_create_client(db_session, trainer.id)
    make_client(trainer)
    assert not QuotaGate.can_create_client(db_session, trainer.id)


def test_subscription_limit_replaces_free_tier(db_session, trainer, make_client, make_subscription):
    make_subscription(trainer, student_limit=2)
    make_client(trainer)
    make_client(trainer)
    with pytest.raises(QuotaExceededError):
        make_client(trainer)


def test_trialing_is_entitled_and_canceled_is_not(db_session, trainer, make_subscription):
    subscription = make_subscription(trainer, student_limit=20, status="trialing")
    assert QuotaGate.client_limit(db_session, trainer.id) == 20

    subscription.status = "canceled"
    db_session.commit()
    assert QuotaGate.client_limit(db_session, trainer.id) == settings.FREE_TIER_CLIENT_LIMIT

    subscription.status = "past_due"
    db_session.commit()
    assert QuotaGate.active_subscription(db_session, trainer.id) is None


def test_deactivation_frees_a_slot(db_session, trainer, make_client, make_subscription):
    make_subscription(trainer, student_limit=1)
    first = make_client(trainer)

    ClientService.deactivate_client(db_session, trainer.id, first.id)
    second = make_client(trainer)

    assert second.active
    with pytest.raises(QuotaExceededError):
        ClientService.reactivate_client(db_session, trainer.id, first.id)
    db_session.refresh(first)
    assert first.active is False


def test_counts_are_per_trainer(db_session, trainer, other_trainer, make_client, make_subscription):
    make_subscription(trainer, student_limit=1)
    make_client(trainer)
    make_client(other_trainer)
    make_client(other_trainer)
    assert QuotaGate.count_active_clients(db_session, trainer.id) == 1
    assert QuotaGate.count_active_clients(db_session, other_trainer.id) == 2


def test_students_count_is_kept_for_display(db_session, trainer, make_client, make_subscription):
    subscription = make_subscription(trainer, student_limit=10)
    client = make_client(trainer)
    make_client(trainer)
    db_session.refresh(subscription)
    assert subscription.students_count == 2

    ClientService.deactivate_client(db_session, trainer.id, client.id)
    db_session.refresh(subscription)
    assert subscription.students_count == 1


def test_stale_students_count_is_never_trusted(db_session, trainer, make_client, make_subscription):
    subscription = make_subscription(trainer, student_limit=2)
    make_client(trainer)
    make_client(trainer)
    subscription.students_count = 0
    db_session.commit()

    with pytest.raises(QuotaExceededError):
        make_client(trainer)


def test_usage(db_session, trainer, make_client, make_subscription):
    usage = QuotaGate.usage(db_session, trainer.id)
    assert usage["on_free_tier"] is True
    assert usage["remaining"] == settings.FREE_TIER_CLIENT_LIMIT

    subscription = make_subscription(trainer, student_limit=5)
    subscription.current_period_end = utc_now() + timedelta(days=3)
    db_session.commit()
    for _ in range(4):
        make_client(trainer)

    usage = QuotaGate.usage(db_session, trainer.id)
    assert usage["limit"] == 5
    assert usage["active_clients"] == 4
    assert usage["remaining"] == 1
    assert usage["can_add_client"] is True
    assert usage["near_limit"] is True
    assert usage["expiring_soon"] is True
    assert usage["on_free_tier"] is False


def test_concurrent_creates_never_exceed_limit(tmp_path):
    """Two requests racing for the last slot: exactly one wins."""
    engine = build_engine(f"sqlite:///{tmp_path / 'quota.db'}", connect_args={"check_same_thread": False, "timeout": 30})
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    setup = Session()
    trainer = Trainer(name="Racer", email="race@example.com", hashed_password=security.hash_password("x"),
                      specializations=[], active=True)
    plan = SubscriptionPlan(name="One", student_limit=1, price_cents=0)
    setup.add_all([trainer, plan])
    setup.flush()
    setup.add(Subscription(trainer_id=trainer.id, plan_id=plan.id, status="active"))
    setup.commit()
    trainer_id = trainer.id
    setup.close()

    barrier = threading.Barrier(2)
    outcomes = []
    outcomes_lock = threading.Lock()

    def attempt(name):
        db = Session()
        try:
            barrier.wait()
            ClientService.create_client(db, trainer_id, ClientCreate(name=name))
            result = "created"
        except QuotaExceededError:
            result = "rejected"
        finally:
            db.close()
        with outcomes_lock:
            outcomes.append(result)

    threads = [threading.Thread(target=attempt, args=(f"Client {i}",)) for i in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)

    check = Session()
    active = check.query(Client).filter(Client.trainer_id == trainer_id, Client.active.is_(True)).count()
    check.close()
    engine.dispose()

    assert sorted(outcomes) == ["created", "rejected"]
    assert active == 1
