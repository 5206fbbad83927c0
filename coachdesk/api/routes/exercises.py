from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from coachdesk.api.routes.auth import get_current_trainer
from coachdesk.core.database import get_db
from coachdesk.models.trainer import Trainer
from coachdesk.schemas.exercise import (
    ExerciseCategoryCreate,
    ExerciseCategoryResponse,
    ExerciseCreate,
    ExerciseUpdate,
    ExerciseResponse,
)
from coachdesk.services.exercise_library import ExerciseLibrary

router = APIRouter()


@router.get("/categories", response_model=List[ExerciseCategoryResponse])
def list_categories(db: Session = Depends(get_db), current_trainer: Trainer = Depends(get_current_trainer)):
    return ExerciseLibrary.list_categories(db)


@router.post("/categories", response_model=ExerciseCategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    data: ExerciseCategoryCreate,
    db: Session = Depends(get_db),
    current_trainer: Trainer = Depends(get_current_trainer),
):
    return ExerciseLibrary.create_category(db, data)


@router.get("/", response_model=List[ExerciseResponse])
def list_exercises(
    category_id: Optional[int] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_trainer: Trainer = Depends(get_current_trainer),
):
    """Global catalogue plus the trainer's own exercises."""
    return ExerciseLibrary.list_exercises(db, current_trainer.id, category_id=category_id, search=search)


@router.post("/", response_model=ExerciseResponse, status_code=status.HTTP_201_CREATED)
def create_exercise(
    data: ExerciseCreate,
    db: Session = Depends(get_db),
    current_trainer: Trainer = Depends(get_current_trainer),
):
    return ExerciseLibrary.create_exercise(db, current_trainer.id, data)


@router.get("/{exercise_id}", response_model=ExerciseResponse)
def get_exercise(exercise_id: int, db: Session = Depends(get_db), current_trainer: Trainer = Depends(get_current_trainer)):
    return ExerciseLibrary.get_exercise(db, current_trainer.id, exercise_id)


@router.patch("/{exercise_id}", response_model=ExerciseResponse)
def update_exercise(
    exercise_id: int,
    data: ExerciseUpdate,
    db: Session = Depends(get_db),
    current_trainer: Trainer = Depends(get_current_trainer),
):
    return ExerciseLibrary.update_exercise(db, current_trainer.id, exercise_id, data)


@router.delete("/{exercise_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_exercise(exercise_id: int, db: Session = Depends(get_db), current_trainer: Trainer = Depends(get_current_trainer)):
    ExerciseLibrary.delete_exercise(db, current_trainer.id, exercise_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
