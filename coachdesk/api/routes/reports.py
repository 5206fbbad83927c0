from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coachdesk.api.routes.auth import get_current_trainer
from coachdesk.core.database import get_db
from coachdesk.models.trainer import Trainer
from coachdesk.schemas.report import ReportRequest, ClientReportResponse
from coachdesk.services.report_aggregator import ReportAggregator

router = APIRouter()


@router.post("/", response_model=List[ClientReportResponse])
def build_report(
    data: ReportRequest,
    db: Session = Depends(get_db),
    current_trainer: Trainer = Depends(get_current_trainer),
):
    """Per-client completion statistics; rendering to PDF happens on the caller's side."""
    return ReportAggregator.build_report(
        db, current_trainer.id, data.start_date, data.end_date, client_ids=data.client_ids
    )
