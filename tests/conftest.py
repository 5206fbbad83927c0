"""
Pytest configuration and fixtures.

Every test gets a fresh in-memory SQLite database; the application engine
is never touched. Services are called with ``db_session`` directly, HTTP
tests go through ``api_client`` whose ``get_db`` is bound to the same
database.
"""
import os

# Must be set before coachdesk.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("DB_BOOTSTRAP", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from coachdesk.core.database import Base, build_engine, get_db
from coachdesk.core.security import security
from coachdesk.main import app
from coachdesk.models.exercise import Exercise, ExerciseCategory
from coachdesk.models.subscription import Subscription, SubscriptionPlan
from coachdesk.models.trainer import Trainer
from coachdesk.schemas.client import ClientCreate
from coachdesk.services.client_service import ClientService
from coachdesk.services.trainer_service import TrainerService


@pytest.fixture
def test_engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


def _make_trainer(db, email, name="Test Trainer", is_admin=False):
    trainer = Trainer(
        name=name,
        email=email,
        hashed_password=security.hash_password("secret123"),
        specializations=[],
        active=True,
        is_admin=is_admin,
    )
    db.add(trainer)
    db.commit()
    db.refresh(trainer)
    return trainer


@pytest.fixture
def trainer(db_session):
    return _make_trainer(db_session, "coach@example.com")


@pytest.fixture
def other_trainer(db_session):
    return _make_trainer(db_session, "rival@example.com", name="Other Trainer")


@pytest.fixture
def make_client(db_session):
    """Factory: creates an active client through the quota-gated service."""
    counter = {"n": 0}

    def _make(trainer, name=None, **fields):
        counter["n"] += 1
        data = ClientCreate(name=name or f"Client {counter['n']}", **fields)
        return ClientService.create_client(db_session, trainer.id, data)

    return _make


@pytest.fixture
def client_record(trainer, make_client):
    return make_client(trainer, name="Ana Souza", email="ana@example.com", phone="+55 11 99999-0000")


@pytest.fixture
def category(db_session):
    category = ExerciseCategory(name="Pernas", emoji="🦵")
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def exercises(db_session, category):
    """Ten global library exercises."""
    rows = [
        Exercise(category_id=category.id, name=f"Exercise {i}", muscle_groups=["legs"], equipment=[])
        for i in range(10)
    ]
    db_session.add_all(rows)
    db_session.commit()
    for row in rows:
        db_session.refresh(row)
    return rows


@pytest.fixture
def make_subscription(db_session):
    """Factory: gives a trainer a subscription with the given limit and status."""

    def _make(trainer, student_limit, status="active", provider_subscription_id=None):
        plan = SubscriptionPlan(name=f"Tier {student_limit}", student_limit=student_limit, price_cents=1000)
        db_session.add(plan)
        db_session.flush()
        subscription = Subscription(
            trainer_id=trainer.id,
            plan_id=plan.id,
            status=status,
            provider_subscription_id=provider_subscription_id,
        )
        db_session.add(subscription)
        db_session.commit()
        db_session.refresh(subscription)
        return subscription

    return _make


@pytest.fixture
def api_client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(trainer):
    return {"Authorization": f"Bearer {TrainerService.issue_token(trainer)}"}


@pytest.fixture
def admin_headers(db_session):
    admin = _make_trainer(db_session, "staff@example.com", name="Platform Staff", is_admin=True)
    return {"Authorization": f"Bearer {TrainerService.issue_token(admin)}"}
