import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coachdesk.core.exceptions import UnauthorizedError, ValidationError
from coachdesk.core.security import security
from coachdesk.models.trainer import Trainer
from coachdesk.schemas.trainer import TrainerRegister

logger = logging.getLogger(__name__)


class TrainerService:

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[Trainer]:
        return db.query(Trainer).filter(Trainer.email == email.strip().lower()).first()

    @staticmethod
    def register_trainer(db: Session, data: TrainerRegister) -> Trainer:
        """New trainers start on the free tier (no subscription row)."""
        email = data.email.strip().lower()
        if TrainerService.get_by_email(db, email):
            raise ValidationError("Email is already registered", field="email")

        trainer = Trainer(
            name=data.name.strip(),
            email=email,
            hashed_password=security.hash_password(data.password),
            phone=data.phone,
            cref=data.cref,
            specializations=data.specializations,
            active=True,
        )
        db.add(trainer)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise ValidationError("Email is already registered", field="email") from e
        db.refresh(trainer)
        logger.info("Trainer registered: %s (id %s)", trainer.email, trainer.id)
        return trainer

    @staticmethod
    def authenticate(db: Session, email: str, password: str) -> Trainer:
        trainer = TrainerService.get_by_email(db, email)
        if not trainer or not security.verify_password(password, trainer.hashed_password):
            logger.info("Failed login for %s", email)
            raise UnauthorizedError("Incorrect email or password")
        if not trainer.active:
            raise UnauthorizedError("Account is disabled")
        return trainer

    @staticmethod
    def issue_token(trainer: Trainer) -> str:
        return security.create_access_token({"sub": trainer.email, "trainer_id": trainer.id})
