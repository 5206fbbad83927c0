from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from coachdesk.api.routes.auth import get_current_trainer
from coachdesk.core.database import get_db
from coachdesk.models.trainer import Trainer
from coachdesk.schemas.training import (
    TrainingPlanCreate,
    TrainingPlanUpdate,
    TrainingTreeReplace,
    TrainingPlanResponse,
)
from coachdesk.services.client_service import ClientService
from coachdesk.services.plan_hierarchy import PlanHierarchyService, PLAN_KIND_TRAINING

router = APIRouter()


@router.post("/", response_model=TrainingPlanResponse, status_code=status.HTTP_201_CREATED)
def create_training_plan(
    data: TrainingPlanCreate,
    db: Session = Depends(get_db),
    current_trainer: Trainer = Depends(get_current_trainer),
):
    attrs = data.model_dump(exclude={"client_id", "sessions"})
    return PlanHierarchyService.create_plan(
        db, current_trainer.id, data.client_id, PLAN_KIND_TRAINING, attrs, children=data.sessions
    )


@router.get("/clients/{client_id}", response_model=List[TrainingPlanResponse])
def list_client_training_plans(
    client_id: int,
    active_only: bool = False,
    db: Session = Depends(get_db),
    current_trainer: Trainer = Depends(get_current_trainer),
):
    return PlanHierarchyService.list_plans_for_client(
        db, client_id, PLAN_KIND_TRAINING, active_only=active_only, trainer_id=current_trainer.id
    )


@router.get("/clients/{client_id}/current", response_model=Optional[TrainingPlanResponse])
def get_current_training_plan(
    client_id: int,
    db: Session = Depends(get_db),
    current_trainer: Trainer = Depends(get_current_trainer),
):
    """The plan the client sees: latest active one, or null."""
    ClientService.get_client_for_trainer(db, current_trainer.id, client_id)
    return PlanHierarchyService.current_plan(db, client_id, PLAN_KIND_TRAINING)


@router.get("/{plan_id}", response_model=TrainingPlanResponse)
def get_training_plan(plan_id: int, db: Session = Depends(get_db), current_trainer: Trainer = Depends(get_current_trainer)):
    return PlanHierarchyService.get_plan(db, current_trainer.id, plan_id, PLAN_KIND_TRAINING)


@router.patch("/{plan_id}", response_model=TrainingPlanResponse)
def update_training_plan(
    plan_id: int,
    data: TrainingPlanUpdate,
    db: Session = Depends(get_db),
    current_trainer: Trainer = Depends(get_current_trainer),
):
    return PlanHierarchyService.update_plan_attrs(
        db, current_trainer.id, plan_id, PLAN_KIND_TRAINING, data.model_dump(exclude_unset=True)
    )


@router.put("/{plan_id}/tree", response_model=TrainingPlanResponse)
def replace_training_tree(
    plan_id: int,
    data: TrainingTreeReplace,
    db: Session = Depends(get_db),
    current_trainer: Trainer = Depends(get_current_trainer),
):
    """Saves the editor's full session/exercise tree in one transaction."""
    return PlanHierarchyService.replace_plan_tree(
        db, current_trainer.id, plan_id, PLAN_KIND_TRAINING, data.sessions
    )


@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_training_plan(plan_id: int, db: Session = Depends(get_db), current_trainer: Trainer = Depends(get_current_trainer)):
    PlanHierarchyService.delete_plan(db, current_trainer.id, plan_id, PLAN_KIND_TRAINING)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
