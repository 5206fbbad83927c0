from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coachdesk.api.routes.auth import get_current_trainer
from coachdesk.core.database import get_db
from coachdesk.models.trainer import Trainer
from coachdesk.schemas.billing import QuotaUsage
from coachdesk.schemas.client import ClientCreate, ClientUpdate, ClientResponse
from coachdesk.services.client_service import ClientService
from coachdesk.services.quota_gate import QuotaGate

router = APIRouter()


@router.get("/quota", response_model=QuotaUsage)
def get_quota(db: Session = Depends(get_db), current_trainer: Trainer = Depends(get_current_trainer)):
    """Usage of the trainer's client limit, for the dashboard banner."""
    return QuotaGate.usage(db, current_trainer.id)


@router.get("/", response_model=List[ClientResponse])
def list_clients(
    include_inactive: bool = False,
    db: Session = Depends(get_db),
    current_trainer: Trainer = Depends(get_current_trainer),
):
    return ClientService.list_clients(db, current_trainer.id, include_inactive=include_inactive)


@router.post("/", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
def create_client(
    data: ClientCreate,
    db: Session = Depends(get_db),
    current_trainer: Trainer = Depends(get_current_trainer),
):
    return ClientService.create_client(db, current_trainer.id, data)


@router.get("/{client_id}", response_model=ClientResponse)
def get_client(client_id: int, db: Session = Depends(get_db), current_trainer: Trainer = Depends(get_current_trainer)):
    return ClientService.get_client_for_trainer(db, current_trainer.id, client_id)


@router.patch("/{client_id}", response_model=ClientResponse)
def update_client(
    client_id: int,
    data: ClientUpdate,
    db: Session = Depends(get_db),
    current_trainer: Trainer = Depends(get_current_trainer),
):
    return ClientService.update_client(db, current_trainer.id, client_id, data)


@router.delete("/{client_id}", response_model=ClientResponse)
def deactivate_client(client_id: int, db: Session = Depends(get_db), current_trainer: Trainer = Depends(get_current_trainer)):
    """Soft delete; plans and completion history are kept."""
    return ClientService.deactivate_client(db, current_trainer.id, client_id)


@router.post("/{client_id}/reactivate", response_model=ClientResponse)
def reactivate_client(client_id: int, db: Session = Depends(get_db), current_trainer: Trainer = Depends(get_current_trainer)):
    return ClientService.reactivate_client(db, current_trainer.id, client_id)
