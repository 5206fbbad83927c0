import logging
from datetime import date
from typing import Optional, Set

from sqlalchemy import func
from sqlalchemy.orm import Session

from coachdesk.core.exceptions import NotFoundError, ValidationError
from coachdesk.core.utils import day_bounds_utc, get_local_date, range_bounds_utc, utc_now
from coachdesk.models.client import Client
from coachdesk.models.completion import CompletionEvent, ITEM_KIND_EXERCISE, ITEM_KIND_MEAL, ITEM_KINDS
from coachdesk.models.nutrition import NutritionPlan, Meal
from coachdesk.models.training import TrainingPlan, TrainingSession, ExerciseAssignment

logger = logging.getLogger(__name__)


def _check_kind(item_kind: str) -> None:
    if item_kind not in ITEM_KINDS:
        raise ValidationError(f"Unknown item kind: {item_kind!r}", field="item_kind")


def _item_column(item_kind: str):
    if item_kind == ITEM_KIND_EXERCISE:
        return CompletionEvent.exercise_assignment_id
    return CompletionEvent.meal_id


class CompletionLedger:
    """
    Log of "client finished item on day". Completion state is never stored as
    a flag: an item is done on a local calendar day when an event for it
    exists inside that day, and toggling it off deletes that day's event.
    """

    @staticmethod
    def _load_item(db: Session, client_id: int, item_id: int, item_kind: str):
        """Returns the exercise assignment or meal, only if it sits in one of the client's plans."""
        if item_kind == ITEM_KIND_EXERCISE:
            item = (
                db.query(ExerciseAssignment)
                .join(TrainingSession, ExerciseAssignment.session_id == TrainingSession.id)
                .join(TrainingPlan, TrainingSession.plan_id == TrainingPlan.id)
                .filter(ExerciseAssignment.id == item_id, TrainingPlan.client_id == client_id)
                .first()
            )
            label = "Exercise assignment"
        else:
            item = (
                db.query(Meal)
                .join(NutritionPlan, Meal.plan_id == NutritionPlan.id)
                .filter(Meal.id == item_id, NutritionPlan.client_id == client_id)
                .first()
            )
            label = "Meal"
        if item is None:
            raise NotFoundError(label, item_id)
        return item

    @staticmethod
    def _day_events(db: Session, client_id: int, item_id: int, item_kind: str, on_date: date):
        start, end = day_bounds_utc(on_date)
        return db.query(CompletionEvent).filter(
            CompletionEvent.client_id == client_id,
            CompletionEvent.item_kind == item_kind,
            _item_column(item_kind) == item_id,
            CompletionEvent.completed_at >= start,
            CompletionEvent.completed_at < end,
        )

    @staticmethod
    def toggle_completion(
        db: Session,
        client_id: int,
        item_id: int,
        item_kind: str,
        on_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> bool:
        """
        Flips the item's state for the day and returns the new state.

        Not safe to retry blindly: a repeated call flips the state back.
        Today's events are stamped with the current time; back-filled days are
        stamped at the start of that local day.
        """
        _check_kind(item_kind)
        today = get_local_date()
        day = on_date or today

        try:
            # Row lock serializes concurrent toggles of the same client
            client = db.query(Client).filter(Client.id == client_id).with_for_update().first()
            if client is None:
                raise NotFoundError("Client", client_id)
            item = CompletionLedger._load_item(db, client_id, item_id, item_kind)

            existing = CompletionLedger._day_events(db, client_id, item_id, item_kind, day).all()
            if existing:
                for event in existing:
                    db.delete(event)
                completed = False
            else:
                event = CompletionEvent(
                    client_id=client_id,
                    item_kind=item_kind,
                    completed_at=utc_now() if day == today else day_bounds_utc(day)[0],
                    notes=notes,
                )
                if item_kind == ITEM_KIND_EXERCISE:
                    event.exercise_assignment = item
                else:
                    event.meal = item
                db.add(event)
                completed = True

            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(
            "Client %s toggled %s %s on %s -> %s",
            client_id, item_kind, item_id, day.isoformat(), "done" if completed else "not done",
        )
        return completed

    @staticmethod
    def is_completed_on(db: Session, client_id: int, item_id: int, item_kind: str, on_date: date) -> bool:
        _check_kind(item_kind)
        query = CompletionLedger._day_events(db, client_id, item_id, item_kind, on_date)
        return db.query(query.exists()).scalar()

    @staticmethod
    def completed_item_ids(db: Session, client_id: int, item_kind: str, on_date: date) -> Set[int]:
        """Ids of the items of one kind the client completed on ``on_date``."""
        _check_kind(item_kind)
        start, end = day_bounds_utc(on_date)
        column = _item_column(item_kind)
        rows = (
            db.query(column)
            .filter(
                CompletionEvent.client_id == client_id,
                CompletionEvent.item_kind == item_kind,
                CompletionEvent.completed_at >= start,
                CompletionEvent.completed_at < end,
            )
            .distinct()
            .all()
        )
        return {row[0] for row in rows}

    @staticmethod
    def count_completions(
        db: Session,
        client_id: int,
        item_kind: str,
        start: date,
        end: date,
        trainer_id: Optional[int] = None,
    ) -> int:
        """
        Events of one kind for the client over the local days ``start``..``end``
        inclusive. With ``trainer_id`` only items of that trainer's plans count.
        """
        _check_kind(item_kind)
        lower, upper = range_bounds_utc(start, end)

        query = db.query(func.count(CompletionEvent.id)).filter(
            CompletionEvent.client_id == client_id,
            CompletionEvent.item_kind == item_kind,
            CompletionEvent.completed_at >= lower,
            CompletionEvent.completed_at < upper,
        )
        if trainer_id is not None:
            if item_kind == ITEM_KIND_EXERCISE:
                query = (
                    query.join(ExerciseAssignment, CompletionEvent.exercise_assignment_id == ExerciseAssignment.id)
                    .join(TrainingSession, ExerciseAssignment.session_id == TrainingSession.id)
                    .join(TrainingPlan, TrainingSession.plan_id == TrainingPlan.id)
                    .filter(TrainingPlan.trainer_id == trainer_id)
                )
            elif item_kind == ITEM_KIND_MEAL:
                query = (
                    query.join(Meal, CompletionEvent.meal_id == Meal.id)
                    .join(NutritionPlan, Meal.plan_id == NutritionPlan.id)
                    .filter(NutritionPlan.trainer_id == trainer_id)
                )
        return query.scalar() or 0
