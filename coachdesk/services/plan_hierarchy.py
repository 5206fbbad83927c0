"""
Plan hierarchy store.

Training and nutrition plans share one shape, plan -> children -> line items:

    TrainingPlan  -> TrainingSession (one per day_of_week) -> ExerciseAssignment
    NutritionPlan -> Meal                                  -> FoodLine

The plan editor always saves the whole tree. ``replace_plan_tree`` diffs the
submitted tree against what is stored and applies the difference in one
transaction: ids missing from the payload are deleted (with their completion
events), items without an id are inserted, the rest are updated in place, and
``order_index`` is renumbered 0..n-1 from the array positions.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ValidationError as PydanticValidationError
from sqlalchemy import or_
from sqlalchemy.orm import Session

from coachdesk.core.exceptions import (
    DuplicateDayError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from coachdesk.core.utils import utc_now
from coachdesk.models.client import Client
from coachdesk.models.exercise import Exercise
from coachdesk.models.nutrition import NutritionPlan, Meal, FoodLine
from coachdesk.models.training import TrainingPlan, TrainingSession, ExerciseAssignment
from coachdesk.schemas.nutrition import MealIn
from coachdesk.schemas.training import TrainingSessionIn

logger = logging.getLogger(__name__)

PLAN_KIND_TRAINING = "training"
PLAN_KIND_NUTRITION = "nutrition"

# Sessions are parked on negative days while a tree is rewritten so the
# (plan_id, day_of_week) unique key never sees two rows on one day mid-flush.
_PARKED_DAY = -1


class PlanShape:
    """Describes how one kind of plan tree maps onto models and editor schemas."""

    def __init__(
        self,
        kind: str,
        plan_model,
        child_model,
        item_model,
        children: str,
        items: str,
        parent: str,
        child_schema,
        plan_fields: Sequence[str],
        child_fields: Sequence[str],
        item_fields: Sequence[str],
        scheduled_by_day: bool = False,
    ):
        self.kind = kind
        self.plan_model = plan_model
        self.child_model = child_model
        self.item_model = item_model
        self.children = children
        self.items = items
        self.parent = parent
        self.child_schema = child_schema
        self.plan_fields = tuple(plan_fields)
        self.child_fields = tuple(child_fields)
        self.item_fields = tuple(item_fields)
        self.scheduled_by_day = scheduled_by_day

    @property
    def child_label(self) -> str:
        return self.child_model.__name__

    @property
    def item_label(self) -> str:
        return self.item_model.__name__


PLAN_SHAPES: Dict[str, PlanShape] = {
    PLAN_KIND_TRAINING: PlanShape(
        kind=PLAN_KIND_TRAINING,
        plan_model=TrainingPlan,
        child_model=TrainingSession,
        item_model=ExerciseAssignment,
        children="sessions",
        items="exercises",
        parent="session",
        child_schema=TrainingSessionIn,
        plan_fields=("name", "description", "active", "duration_weeks", "sessions_per_week"),
        child_fields=("name", "description"),
        item_fields=("exercise_id", "sets", "reps_min", "reps_max", "rest_seconds", "weight_kg", "notes"),
        scheduled_by_day=True,
    ),
    PLAN_KIND_NUTRITION: PlanShape(
        kind=PLAN_KIND_NUTRITION,
        plan_model=NutritionPlan,
        child_model=Meal,
        item_model=FoodLine,
        children="meals",
        items="foods",
        parent="meal",
        child_schema=MealIn,
        plan_fields=("name", "description", "active", "daily_calories", "daily_protein", "daily_carbs", "daily_fat"),
        child_fields=("name", "time_of_day"),
        item_fields=("food_name", "quantity", "unit", "calories", "protein", "carbs", "fat", "notes"),
    ),
}


def get_shape(kind: str) -> PlanShape:
    shape = PLAN_SHAPES.get(kind)
    if shape is None:
        raise ValidationError(f"Unknown plan kind: {kind!r}", field="kind")
    return shape


def _coerce_children(shape: PlanShape, children: Optional[Sequence[Any]]) -> List[BaseModel]:
    nodes = []
    for child in children or []:
        if isinstance(child, shape.child_schema):
            nodes.append(child)
            continue
        if isinstance(child, BaseModel):
            child = child.model_dump()
        try:
            nodes.append(shape.child_schema.model_validate(child))
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid {shape.child_label}: {e}") from e
    return nodes


class PlanHierarchyService:

    # --- Lookups ---

    @staticmethod
    def _load_plan(db: Session, shape: PlanShape, plan_id: int, trainer_id: int, for_update: bool = False):
        query = db.query(shape.plan_model).filter(shape.plan_model.id == plan_id)
        if for_update:
            query = query.with_for_update()
        plan = query.first()
        if plan is None:
            raise NotFoundError(shape.plan_model.__name__, plan_id)
        if plan.trainer_id != trainer_id:
            raise ForbiddenError("Plan belongs to another trainer")
        return plan

    @staticmethod
    def get_plan(db: Session, trainer_id: int, plan_id: int, kind: str):
        return PlanHierarchyService._load_plan(db, get_shape(kind), plan_id, trainer_id)

    @staticmethod
    def list_plans_for_client(
        db: Session,
        client_id: int,
        kind: str,
        active_only: bool = False,
        trainer_id: Optional[int] = None,
    ) -> list:
        """Plans of one kind for a client, newest first. ``trainer_id`` enforces ownership."""
        shape = get_shape(kind)
        client = db.query(Client).filter(Client.id == client_id).first()
        if client is None:
            raise NotFoundError("Client", client_id)
        if trainer_id is not None and client.trainer_id != trainer_id:
            raise ForbiddenError("Client belongs to another trainer")

        model = shape.plan_model
        query = db.query(model).filter(model.client_id == client_id)
        if active_only:
            query = query.filter(model.active.is_(True))
        return query.order_by(model.created_at.desc(), model.id.desc()).all()

    @staticmethod
    def current_plan(db: Session, client_id: int, kind: str):
        """
        The authoritative plan of a kind: the most recently created active one,
        ties broken by the highest id. None when the client has no active plan.
        """
        model = get_shape(kind).plan_model
        return (
            db.query(model)
            .filter(model.client_id == client_id, model.active.is_(True))
            .order_by(model.created_at.desc(), model.id.desc())
            .first()
        )

    # --- Mutations ---

    @staticmethod
    def create_plan(
        db: Session,
        trainer_id: int,
        client_id: int,
        kind: str,
        attrs: Dict[str, Any],
        children: Optional[Sequence[Any]] = None,
    ):
        """
        Creates a plan (optionally with its initial tree) for a client of the
        acting trainer. Other active plans of the client are left untouched.
        """
        shape = get_shape(kind)

        client = db.query(Client).filter(Client.id == client_id).first()
        if client is None:
            raise NotFoundError("Client", client_id)
        if client.trainer_id != trainer_id:
            raise ValidationError("Client does not belong to this trainer", field="client_id")
        if not client.active:
            raise ValidationError("Client is inactive", field="client_id")

        name = (attrs.get("name") or "").strip()
        if not name:
            raise ValidationError("Plan name is required", field="name")

        values = {f: attrs[f] for f in shape.plan_fields if attrs.get(f) is not None}
        values["name"] = name
        nodes = _coerce_children(shape, children)

        plan = shape.plan_model(client_id=client_id, trainer_id=trainer_id, **values)
        try:
            db.add(plan)
            db.flush()
            if nodes:
                PlanHierarchyService._apply_tree(db, shape, plan, nodes)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(plan)
        logger.info("%s %s created for client %s by trainer %s", shape.plan_model.__name__, plan.id, client_id, trainer_id)
        return plan

    @staticmethod
    def update_plan_attrs(db: Session, trainer_id: int, plan_id: int, kind: str, attrs: Dict[str, Any]):
        """Updates plan-level fields only (name, targets, active flag); the tree is untouched."""
        shape = get_shape(kind)
        plan = PlanHierarchyService._load_plan(db, shape, plan_id, trainer_id)

        if "name" in attrs:
            name = (attrs["name"] or "").strip()
            if not name:
                raise ValidationError("Plan name is required", field="name")
            attrs = {**attrs, "name": name}

        columns = shape.plan_model.__table__.c
        for field in shape.plan_fields:
            if field in attrs:
                if attrs[field] is None and not columns[field].nullable:
                    raise ValidationError(f"{field} cannot be null", field=field)
                setattr(plan, field, attrs[field])

        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(plan)
        return plan

    @staticmethod
    def replace_plan_tree(db: Session, trainer_id: int, plan_id: int, kind: str, children: Sequence[Any]):
        """Authoritative save path of the plan editor. All-or-nothing."""
        shape = get_shape(kind)
        nodes = _coerce_children(shape, children)

        try:
            plan = PlanHierarchyService._load_plan(db, shape, plan_id, trainer_id, for_update=True)
            PlanHierarchyService._apply_tree(db, shape, plan, nodes)
            plan.updated_at = utc_now()
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(plan)
        logger.info(
            "%s %s tree replaced: %s %s(s)",
            shape.plan_model.__name__, plan_id, len(nodes), shape.child_label,
        )
        return plan

    @staticmethod
    def delete_plan(db: Session, trainer_id: int, plan_id: int, kind: str) -> None:
        """Hard delete; children, line items and their completion events go with it."""
        shape = get_shape(kind)
        try:
            plan = PlanHierarchyService._load_plan(db, shape, plan_id, trainer_id, for_update=True)
            db.delete(plan)
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info("%s %s deleted by trainer %s", shape.plan_model.__name__, plan_id, trainer_id)

    # --- Tree diff ---

    @staticmethod
    def _validate_tree(db: Session, shape: PlanShape, plan, nodes, existing_children: dict, existing_items: dict) -> None:
        """Checks the desired final state. Nothing is written before this passes."""
        seen_children = set()
        seen_items = set()
        days = set()

        for node in nodes:
            if node.id is not None:
                if node.id in seen_children:
                    raise ValidationError(f"{shape.child_label} {node.id} appears more than once")
                if node.id not in existing_children:
                    raise NotFoundError(shape.child_label, node.id)
                seen_children.add(node.id)

            if shape.scheduled_by_day:
                if not 0 <= node.day_of_week <= 6:
                    raise ValidationError("day_of_week must be between 0 and 6", field="day_of_week")
                if node.day_of_week in days:
                    raise DuplicateDayError(node.day_of_week)
                days.add(node.day_of_week)

            for item in getattr(node, shape.items):
                if item.id is None:
                    continue
                if item.id in seen_items:
                    raise ValidationError(f"{shape.item_label} {item.id} appears more than once")
                if item.id not in existing_items:
                    raise NotFoundError(shape.item_label, item.id)
                seen_items.add(item.id)

        if shape.kind == PLAN_KIND_TRAINING:
            wanted = {item.exercise_id for node in nodes for item in node.exercises}
            if wanted:
                visible = {
                    row.id
                    for row in db.query(Exercise.id).filter(
                        Exercise.id.in_(wanted),
                        or_(Exercise.trainer_id.is_(None), Exercise.trainer_id == plan.trainer_id),
                    )
                }
                missing = sorted(wanted - visible)
                if missing:
                    raise NotFoundError("Exercise", missing[0])

    @staticmethod
    def _apply_tree(db: Session, shape: PlanShape, plan, nodes) -> None:
        existing_children = {child.id: child for child in getattr(plan, shape.children)}
        existing_items = {
            item.id: item
            for child in existing_children.values()
            for item in getattr(child, shape.items)
        }

        PlanHierarchyService._validate_tree(db, shape, plan, nodes, existing_children, existing_items)

        # 1. Upsert children in their final order; scheduled ones are parked.
        targets = []
        for position, node in enumerate(nodes):
            if node.id is not None:
                child = existing_children[node.id]
            else:
                child = shape.child_model()
                getattr(plan, shape.children).append(child)
            for field in shape.child_fields:
                setattr(child, field, getattr(node, field))
            child.order_index = position
            if shape.scheduled_by_day:
                child.day_of_week = _PARKED_DAY - position
            targets.append(child)
        db.flush()

        # 2. Upsert line items under their (possibly new) parent.
        kept_items = set()
        for child, node in zip(targets, nodes):
            for position, item_node in enumerate(getattr(node, shape.items)):
                if item_node.id is not None:
                    item = existing_items[item_node.id]
                    kept_items.add(item.id)
                    if getattr(item, shape.parent) is not child:
                        setattr(item, shape.parent, child)
                else:
                    item = shape.item_model()
                    getattr(child, shape.items).append(item)
                for field in shape.item_fields:
                    setattr(item, field, getattr(item_node, field))
                item.order_index = position

        # 3. Delete what the editor dropped, cascading to completion events.
        #    Moved items were reparented above, so deleting their old parent
        #    no longer reaches them.
        for item_id, item in existing_items.items():
            if item_id not in kept_items:
                parent = getattr(item, shape.parent)
                db.delete(item)
                getattr(parent, shape.items).remove(item)
        kept_children = {node.id for node in nodes if node.id is not None}
        for child_id, child in existing_children.items():
            if child_id not in kept_children:
                db.delete(child)
                getattr(plan, shape.children).remove(child)
        db.flush()

        # 4. Unpark days now that no removed session holds them.
        if shape.scheduled_by_day:
            for child, node in zip(targets, nodes):
                child.day_of_week = node.day_of_week
            db.flush()
