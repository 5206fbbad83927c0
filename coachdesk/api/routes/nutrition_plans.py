from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from coachdesk.api.routes.auth import get_current_trainer
from coachdesk.core.database import get_db
from coachdesk.models.trainer import Trainer
from coachdesk.schemas.nutrition import (
    NutritionPlanCreate,
    NutritionPlanUpdate,
    NutritionTreeReplace,
    NutritionPlanResponse,
)
from coachdesk.services.client_service import ClientService
from coachdesk.services.plan_hierarchy import PlanHierarchyService, PLAN_KIND_NUTRITION

router = APIRouter()


@router.post("/", response_model=NutritionPlanResponse, status_code=status.HTTP_201_CREATED)
def create_nutrition_plan(
    data: NutritionPlanCreate,
    db: Session = Depends(get_db),
    current_trainer: Trainer = Depends(get_current_trainer),
):
    attrs = data.model_dump(exclude={"client_id", "meals"})
    return PlanHierarchyService.create_plan(
        db, current_trainer.id, data.client_id, PLAN_KIND_NUTRITION, attrs, children=data.meals
    )


@router.get("/clients/{client_id}", response_model=List[NutritionPlanResponse])
def list_client_nutrition_plans(
    client_id: int,
    active_only: bool = False,
    db: Session = Depends(get_db),
    current_trainer: Trainer = Depends(get_current_trainer),
):
    return PlanHierarchyService.list_plans_for_client(
        db, client_id, PLAN_KIND_NUTRITION, active_only=active_only, trainer_id=current_trainer.id
    )


@router.get("/clients/{client_id}/current", response_model=Optional[NutritionPlanResponse])
def get_current_nutrition_plan(
    client_id: int,
    db: Session = Depends(get_db),
    current_trainer: Trainer = Depends(get_current_trainer),
):
    ClientService.get_client_for_trainer(db, current_trainer.id, client_id)
    return PlanHierarchyService.current_plan(db, client_id, PLAN_KIND_NUTRITION)


@router.get("/{plan_id}", response_model=NutritionPlanResponse)
def get_nutrition_plan(plan_id: int, db: Session = Depends(get_db), current_trainer: Trainer = Depends(get_current_trainer)):
    return PlanHierarchyService.get_plan(db, current_trainer.id, plan_id, PLAN_KIND_NUTRITION)


@router.patch("/{plan_id}", response_model=NutritionPlanResponse)
def update_nutrition_plan(
    plan_id: int,
    data: NutritionPlanUpdate,
    db: Session = Depends(get_db),
    current_trainer: Trainer = Depends(get_current_trainer),
):
    return PlanHierarchyService.update_plan_attrs(
        db, current_trainer.id, plan_id, PLAN_KIND_NUTRITION, data.model_dump(exclude_unset=True)
    )


@router.put("/{plan_id}/tree", response_model=NutritionPlanResponse)
def replace_nutrition_tree(
    plan_id: int,
    data: NutritionTreeReplace,
    db: Session = Depends(get_db),
    current_trainer: Trainer = Depends(get_current_trainer),
):
    return PlanHierarchyService.replace_plan_tree(
        db, current_trainer.id, plan_id, PLAN_KIND_NUTRITION, data.meals
    )


@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_nutrition_plan(plan_id: int, db: Session = Depends(get_db), current_trainer: Trainer = Depends(get_current_trainer)):
    PlanHierarchyService.delete_plan(db, current_trainer.id, plan_id, PLAN_KIND_NUTRITION)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
