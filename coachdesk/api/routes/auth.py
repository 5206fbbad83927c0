import logging

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from coachdesk.core.database import get_db
from coachdesk.core.exceptions import ForbiddenError, UnauthorizedError
from coachdesk.core.security import security
from coachdesk.models.trainer import Trainer
from coachdesk.schemas.trainer import TrainerLogin, Token
from coachdesk.services.trainer_service import TrainerService

logger = logging.getLogger(__name__)

router = APIRouter()

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")


@router.post("/login", response_model=Token)
def login(credentials: TrainerLogin, db: Session = Depends(get_db)):
    trainer = TrainerService.authenticate(db, credentials.email, credentials.password)
    logger.info("Trainer %s logged in", trainer.id)
    return {
        "access_token": TrainerService.issue_token(trainer),
        "token_type": "bearer",
        "trainer": trainer,
    }


def get_current_trainer(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> Trainer:
    """Resolves the acting trainer from the bearer token. Client links never go through here."""
    payload = security.decode_access_token(token)
    if payload is None:
        raise UnauthorizedError("Invalid or expired token")

    trainer_id = payload.get("trainer_id")
    if trainer_id is None:
        raise UnauthorizedError("Invalid or expired token")

    trainer = db.query(Trainer).filter(Trainer.id == trainer_id).first()
    if trainer is None or not trainer.active:
        raise UnauthorizedError("Invalid or expired token")
    return trainer


def get_current_admin(current_trainer: Trainer = Depends(get_current_trainer)) -> Trainer:
    if not current_trainer.is_admin:
        logger.warning("Trainer %s attempted an admin-only action", current_trainer.id)
        raise ForbiddenError("Only platform administrators can perform this action")
    return current_trainer
