from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coachdesk.api.routes.auth import get_current_trainer
from coachdesk.core.database import get_db
from coachdesk.models.trainer import Trainer
from coachdesk.schemas.trainer import TrainerRegister, TrainerResponse
from coachdesk.services.trainer_service import TrainerService

router = APIRouter()


@router.post("/register", response_model=TrainerResponse, status_code=status.HTTP_201_CREATED)
def register_trainer(data: TrainerRegister, db: Session = Depends(get_db)):
    return TrainerService.register_trainer(db, data)


@router.get("/me", response_model=TrainerResponse)
def read_me(current_trainer: Trainer = Depends(get_current_trainer)):
    return current_trainer
