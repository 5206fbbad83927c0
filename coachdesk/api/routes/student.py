"""
Client-facing pages. No login: every request carries the client's link
(handle + token) and is resolved by ClientAccessResolver alone.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from coachdesk.core.database import get_db
from coachdesk.core.utils import get_local_date
from coachdesk.models.client import Client
from coachdesk.models.completion import ITEM_KIND_EXERCISE, ITEM_KIND_MEAL
from coachdesk.schemas.completion import StudentDashboard, ToggleCompletionRequest, ToggleCompletionResponse
from coachdesk.services.access_resolver import ClientAccessResolver
from coachdesk.services.completion_ledger import CompletionLedger
from coachdesk.services.plan_hierarchy import PlanHierarchyService, PLAN_KIND_NUTRITION, PLAN_KIND_TRAINING

router = APIRouter()


def _dashboard(db: Session, client: Client) -> dict:
    today = get_local_date()
    return {
        "client": client,
        "day": today,
        "training_plan": PlanHierarchyService.current_plan(db, client.id, PLAN_KIND_TRAINING),
        "nutrition_plan": PlanHierarchyService.current_plan(db, client.id, PLAN_KIND_NUTRITION),
        "completed_exercise_ids": sorted(
            CompletionLedger.completed_item_ids(db, client.id, ITEM_KIND_EXERCISE, today)
        ),
        "completed_meal_ids": sorted(
            CompletionLedger.completed_item_ids(db, client.id, ITEM_KIND_MEAL, today)
        ),
    }


@router.get("/t/{token}", response_model=StudentDashboard)
def student_page_by_token(token: str, db: Session = Depends(get_db)):
    client = ClientAccessResolver.resolve_by_token(db, token)
    return _dashboard(db, client)


@router.get("/{handle}", response_model=StudentDashboard)
def student_page(handle: str, token: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    client = ClientAccessResolver.resolve(db, handle, token)
    return _dashboard(db, client)


@router.post("/{handle}/toggle", response_model=ToggleCompletionResponse)
def toggle_item(handle: str, data: ToggleCompletionRequest, db: Session = Depends(get_db)):
    """Flips one exercise or meal between done and not done for the day."""
    client = ClientAccessResolver.resolve(db, handle, data.token)
    day = data.day or get_local_date()
    completed = CompletionLedger.toggle_completion(db, client.id, data.item_id, data.item_kind, on_date=day)
    return {
        "item_id": data.item_id,
        "item_kind": data.item_kind,
        "day": day,
        "completed": completed,
    }
