from datetime import timedelta

import pytest

from coachdesk.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from coachdesk.core.utils import get_local_date
from coachdesk.services.client_service import ClientService
from coachdesk.services.completion_ledger import CompletionLedger
from coachdesk.services.plan_hierarchy import PlanHierarchyService, PLAN_KIND_NUTRITION, PLAN_KIND_TRAINING
from coachdesk.services.report_aggregator import ReportAggregator


@pytest.fixture
def ten_assignments(db_session, trainer, client_record, exercises):
    plan = PlanHierarchyService.create_plan(
        db_session, trainer.id, client_record.id, PLAN_KIND_TRAINING, {"name": "Full program"},
        children=[
            {"name": "A", "day_of_week": 1, "exercises": [{"exercise_id": e.id} for e in exercises[:5]]},
            {"name": "B", "day_of_week": 4, "exercises": [{"exercise_id": e.id} for e in exercises[5:]]},
        ],
    )
    return [a.id for s in plan.sessions for a in s.exercises]


def test_completion_rate(db_session, trainer, client_record, ten_assignments):
    for item_id in ten_assignments[:7]:
        CompletionLedger.toggle_completion(db_session, client_record.id, item_id, "exercise")
    today = get_local_date()

    [report] = ReportAggregator.build_report(db_session, trainer.id, today, today, client_ids=[client_record.id])

    assert report.client_id == client_record.id
    assert report.client_name == "Ana Souza"
    assert report.client_email == "ana@example.com"
    assert report.total_exercises == 10
    assert report.exercises_completed == 7
    assert report.completion_rate == pytest.approx(0.7)


def test_no_assignments_means_zero_rate(db_session, trainer, client_record):
    today = get_local_date()
    [report] = ReportAggregator.build_report(db_session, trainer.id, today, today)
    assert report.total_exercises == 0
    assert report.exercises_completed == 0
    assert report.completion_rate == 0


def test_range_outside_completions(db_session, trainer, client_record, ten_assignments):
    CompletionLedger.toggle_completion(db_session, client_record.id, ten_assignments[0], "exercise")
    last_week = get_local_date() - timedelta(days=7)

    [report] = ReportAggregator.build_report(db_session, trainer.id, last_week, last_week + timedelta(days=2))
    assert report.exercises_completed == 0
    assert report.total_exercises == 10


def test_inactive_plans_do_not_count_toward_totals(db_session, trainer, client_record, ten_assignments):
    plan_id = PlanHierarchyService.current_plan(db_session, client_record.id, PLAN_KIND_TRAINING).id
    PlanHierarchyService.update_plan_attrs(db_session, trainer.id, plan_id, PLAN_KIND_TRAINING, {"active": False})
    today = get_local_date()

    [report] = ReportAggregator.build_report(db_session, trainer.id, today, today)
    assert report.total_exercises == 0
    assert report.completion_rate == 0


def test_meals_are_reported(db_session, trainer, client_record):
    plan = PlanHierarchyService.create_plan(
        db_session, trainer.id, client_record.id, PLAN_KIND_NUTRITION, {"name": "Diet"},
        children=[{"name": "Breakfast"}, {"name": "Lunch"}, {"name": "Dinner"}],
    )
    CompletionLedger.toggle_completion(db_session, client_record.id, plan.meals[1].id, "meal")
    today = get_local_date()

    [report] = ReportAggregator.build_report(db_session, trainer.id, today, today)
    assert report.total_meals == 3
    assert report.meals_completed == 1


def test_defaults_to_active_clients(db_session, trainer, make_client, client_record):
    gone = make_client(trainer, name="Zed")
    kept = make_client(trainer, name="Bia")
    ClientService.deactivate_client(db_session, trainer.id, gone.id)
    today = get_local_date()

    reports = ReportAggregator.build_report(db_session, trainer.id, today, today)
    assert [r.client_id for r in reports] == [client_record.id, kept.id]


def test_foreign_client_forbidden(db_session, trainer, other_trainer, make_client, client_record):
    foreign = make_client(other_trainer, name="Not yours")
    today = get_local_date()
    with pytest.raises(ForbiddenError):
        ReportAggregator.build_report(db_session, trainer.id, today, today, client_ids=[client_record.id, foreign.id])


def test_unknown_client(db_session, trainer):
    today = get_local_date()
    with pytest.raises(NotFoundError):
        ReportAggregator.build_report(db_session, trainer.id, today, today, client_ids=[31337])


def test_inverted_range(db_session, trainer):
    today = get_local_date()
    with pytest.raises(ValidationError):
        ReportAggregator.build_report(db_session, trainer.id, today, today - timedelta(days=1))


def test_deleted_plan_contributes_nothing(db_session, trainer, client_record, ten_assignments):
    for item_id in ten_assignments[:4]:
        CompletionLedger.toggle_completion(db_session, client_record.id, item_id, "exercise")
    plan_id = PlanHierarchyService.current_plan(db_session, client_record.id, PLAN_KIND_TRAINING).id
    PlanHierarchyService.delete_plan(db_session, trainer.id, plan_id, PLAN_KIND_TRAINING)
    today = get_local_date()

    [report] = ReportAggregator.build_report(db_session, trainer.id, today, today)
    assert report.total_exercises == 0
    assert report.exercises_completed == 0
    assert report.completion_rate == 0
