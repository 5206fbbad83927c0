import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coachdesk.core.config import settings
from coachdesk.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from coachdesk.core.security import security
from coachdesk.core.utils import normalize_tags
from coachdesk.models.client import Client
from coachdesk.models.trainer import Trainer
from coachdesk.schemas.client import ClientCreate, ClientUpdate
from coachdesk.services.quota_gate import QuotaGate

logger = logging.getLogger(__name__)


class ClientService:

    @staticmethod
    def get_client_for_trainer(db: Session, trainer_id: int, client_id: int) -> Client:
        client = db.query(Client).filter(Client.id == client_id).first()
        if not client:
            raise NotFoundError("Client", client_id)
        if client.trainer_id != trainer_id:
            raise ForbiddenError("Client belongs to another trainer")
        return client

    @staticmethod
    def list_clients(db: Session, trainer_id: int, include_inactive: bool = False) -> List[Client]:
        query = db.query(Client).filter(Client.trainer_id == trainer_id)
        if not include_inactive:
            query = query.filter(Client.active.is_(True))
        return query.order_by(Client.name, Client.id).all()

    @staticmethod
    def create_client(db: Session, trainer_id: int, data: ClientCreate) -> Client:
        """Creates an active client, subject to the trainer's quota."""
        trainer = db.query(Trainer).filter(Trainer.id == trainer_id, Trainer.active.is_(True)).first()
        if not trainer:
            raise NotFoundError("Trainer", trainer_id)

        with QuotaGate.creation_guard(db, trainer_id):
            try:
                QuotaGate.assert_can_create_client(db, trainer_id)

                link_token = security.generate_link_token()
                client = Client(
                    trainer_id=trainer_id,
                    name=data.name.strip(),
                    email=data.email,
                    phone=data.phone.strip() if data.phone else None,
                    birth_date=data.birth_date,
                    weight=data.weight,
                    height=data.height,
                    goals=normalize_tags(data.goals),
                    medical_restrictions=data.medical_restrictions,
                    access_token=link_token,
                    access_token_digest=security.link_token_digest(link_token),
                    active=True,
                )
                db.add(client)
                db.flush()
                client.handle = str(settings.CLIENT_HANDLE_OFFSET + client.id)

                QuotaGate.refresh_students_count(db, trainer_id)
                db.commit()
            except IntegrityError as e:
                db.rollback()
                raise ValidationError(f"Could not create client: {e.orig}") from e
            except Exception:
                db.rollback()
                raise

        db.refresh(client)
        logger.info("Client %s created for trainer %s (handle %s)", client.id, trainer_id, client.handle)
        return client

    @staticmethod
    def update_client(db: Session, trainer_id: int, client_id: int, data: ClientUpdate) -> Client:
        client = ClientService.get_client_for_trainer(db, trainer_id, client_id)

        update_data = data.model_dump(exclude_unset=True)
        if "name" in update_data:
            name = (update_data["name"] or "").strip()
            if not name:
                raise ValidationError("Name cannot be blank", field="name")
            update_data["name"] = name
        if "goals" in update_data:
            update_data["goals"] = normalize_tags(update_data["goals"])

        for field, value in update_data.items():
            setattr(client, field, value)

        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise ValidationError(f"Could not update client: {e.orig}") from e
        db.refresh(client)
        return client

    @staticmethod
    def deactivate_client(db: Session, trainer_id: int, client_id: int) -> Client:
        """Soft delete: the client keeps their plans and history but frees a quota slot."""
        client = ClientService.get_client_for_trainer(db, trainer_id, client_id)
        if not client.active:
            return client

        try:
            client.active = False
            db.flush()
            QuotaGate.refresh_students_count(db, trainer_id)
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(client)
        logger.info("Client %s deactivated by trainer %s", client_id, trainer_id)
        return client

    @staticmethod
    def reactivate_client(db: Session, trainer_id: int, client_id: int) -> Client:
        """Reactivation takes a quota slot, so it goes through the same gate as creation."""
        client = ClientService.get_client_for_trainer(db, trainer_id, client_id)
        if client.active:
            return client

        with QuotaGate.creation_guard(db, trainer_id):
            try:
                QuotaGate.assert_can_create_client(db, trainer_id)
                client.active = True
                db.flush()
                QuotaGate.refresh_students_count(db, trainer_id)
                db.commit()
            except Exception:
                db.rollback()
                raise

        db.refresh(client)
        logger.info("Client %s reactivated by trainer %s", client_id, trainer_id)
        return client
