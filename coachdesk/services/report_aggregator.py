import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from coachdesk.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from coachdesk.models.client import Client
from coachdesk.models.completion import ITEM_KIND_EXERCISE, ITEM_KIND_MEAL
from coachdesk.models.nutrition import NutritionPlan, Meal
from coachdesk.models.training import TrainingPlan, TrainingSession, ExerciseAssignment
from coachdesk.services.completion_ledger import CompletionLedger

logger = logging.getLogger(__name__)


@dataclass
class ClientReport:
    client_id: int
    client_name: str
    client_email: Optional[str]
    client_phone: Optional[str]
    start_date: date
    end_date: date
    exercises_completed: int
    total_exercises: int
    meals_completed: int
    total_meals: int
    completion_rate: float


def _count_assigned_exercises(db: Session, trainer_id: int, client_id: int) -> int:
    return (
        db.query(func.count(ExerciseAssignment.id))
        .join(TrainingSession, ExerciseAssignment.session_id == TrainingSession.id)
        .join(TrainingPlan, TrainingSession.plan_id == TrainingPlan.id)
        .filter(
            TrainingPlan.client_id == client_id,
            TrainingPlan.trainer_id == trainer_id,
            TrainingPlan.active.is_(True),
        )
        .scalar()
    ) or 0


def _count_assigned_meals(db: Session, trainer_id: int, client_id: int) -> int:
    return (
        db.query(func.count(Meal.id))
        .join(NutritionPlan, Meal.plan_id == NutritionPlan.id)
        .filter(
            NutritionPlan.client_id == client_id,
            NutritionPlan.trainer_id == trainer_id,
            NutritionPlan.active.is_(True),
        )
        .scalar()
    ) or 0


class ReportAggregator:

    @staticmethod
    def _select_clients(db: Session, trainer_id: int, client_ids: Optional[List[int]]) -> List[Client]:
        if client_ids is None:
            return (
                db.query(Client)
                .filter(Client.trainer_id == trainer_id, Client.active.is_(True))
                .order_by(Client.name, Client.id)
                .all()
            )

        # Keep the caller's order, drop repeats
        wanted = list(dict.fromkeys(client_ids))
        found = {c.id: c for c in db.query(Client).filter(Client.id.in_(wanted)).all()} if wanted else {}
        clients = []
        for client_id in wanted:
            client = found.get(client_id)
            if client is None:
                raise NotFoundError("Client", client_id)
            if client.trainer_id != trainer_id:
                raise ForbiddenError(f"Client {client_id} belongs to another trainer")
            clients.append(client)
        return clients

    @staticmethod
    def build_report(
        db: Session,
        trainer_id: int,
        start: date,
        end: date,
        client_ids: Optional[List[int]] = None,
    ) -> List[ClientReport]:
        """
        Completion statistics per client over the inclusive local date range.

        Totals count line items in the trainer's active plans as they are now;
        completed counts are events in range on any of the trainer's plans, so
        the rate can go above 1 over a multi-day range.
        """
        if end < start:
            raise ValidationError("end_date must not be before start_date", field="end_date")

        reports = []
        for client in ReportAggregator._select_clients(db, trainer_id, client_ids):
            total_exercises = _count_assigned_exercises(db, trainer_id, client.id)
            total_meals = _count_assigned_meals(db, trainer_id, client.id)
            exercises_completed = CompletionLedger.count_completions(
                db, client.id, ITEM_KIND_EXERCISE, start, end, trainer_id=trainer_id
            )
            meals_completed = CompletionLedger.count_completions(
                db, client.id, ITEM_KIND_MEAL, start, end, trainer_id=trainer_id
            )

            reports.append(ClientReport(
                client_id=client.id,
                client_name=client.name,
                client_email=client.email,
                client_phone=client.phone,
                start_date=start,
                end_date=end,
                exercises_completed=exercises_completed,
                total_exercises=total_exercises,
                meals_completed=meals_completed,
                total_meals=total_meals,
                completion_rate=exercises_completed / total_exercises if total_exercises else 0.0,
            ))

        logger.info("Report for trainer %s: %s clients, %s..%s", trainer_id, len(reports), start, end)
        return reports
