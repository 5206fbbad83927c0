import pytest

from coachdesk.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from coachdesk.schemas.exercise import ExerciseCategoryCreate, ExerciseCreate, ExerciseUpdate
from coachdesk.services.exercise_library import ExerciseLibrary
from coachdesk.services.plan_hierarchy import PlanHierarchyService, PLAN_KIND_TRAINING


def test_trainer_sees_global_and_own(db_session, trainer, other_trainer, category, exercises):
    mine = ExerciseLibrary.create_exercise(
        db_session, trainer.id,
        ExerciseCreate(category_id=category.id, name="Nordic curl", muscle_groups=["hamstrings", " Hamstrings "]),
    )
    ExerciseLibrary.create_exercise(
        db_session, other_trainer.id, ExerciseCreate(category_id=category.id, name="Secret squat")
    )

    visible = ExerciseLibrary.list_exercises(db_session, trainer.id)
    names = [e.name for e in visible]
    assert "Nordic curl" in names
    assert "Secret squat" not in names
    assert len(visible) == len(exercises) + 1
    assert mine.muscle_groups == ["hamstrings"]

    assert [e.name for e in ExerciseLibrary.list_exercises(db_session, trainer.id, search="nordic")] == ["Nordic curl"]


def test_global_exercises_are_read_only(db_session, trainer, exercises):
    with pytest.raises(ForbiddenError):
        ExerciseLibrary.update_exercise(db_session, trainer.id, exercises[0].id, ExerciseUpdate(name="Renamed"))
    with pytest.raises(ForbiddenError):
        ExerciseLibrary.delete_exercise(db_session, trainer.id, exercises[0].id)


def test_private_exercise_hidden_from_others(db_session, trainer, other_trainer, category):
    private = ExerciseLibrary.create_exercise(
        db_session, other_trainer.id, ExerciseCreate(category_id=category.id, name="Secret")
    )
    with pytest.raises(NotFoundError):
        ExerciseLibrary.get_exercise(db_session, trainer.id, private.id)


def test_exercise_in_use_cannot_be_deleted(db_session, trainer, client_record, category):
    mine = ExerciseLibrary.create_exercise(db_session, trainer.id, ExerciseCreate(category_id=category.id, name="Row"))
    PlanHierarchyService.create_plan(
        db_session, trainer.id, client_record.id, PLAN_KIND_TRAINING, {"name": "P"},
        children=[{"name": "A", "day_of_week": 0, "exercises": [{"exercise_id": mine.id}]}],
    )
    with pytest.raises(ValidationError):
        ExerciseLibrary.delete_exercise(db_session, trainer.id, mine.id)

    unused = ExerciseLibrary.create_exercise(
        db_session, trainer.id, ExerciseCreate(category_id=category.id, name="Unused")
    )
    ExerciseLibrary.delete_exercise(db_session, trainer.id, unused.id)
    with pytest.raises(NotFoundError):
        ExerciseLibrary.get_exercise(db_session, trainer.id, unused.id)


def test_categories(db_session, category):
    ExerciseLibrary.create_category(db_session, ExerciseCategoryCreate(name="Costas", emoji="🏋️"))
    assert [c.name for c in ExerciseLibrary.list_categories(db_session)] == ["Costas", "Pernas"]
    with pytest.raises(ValidationError):
        ExerciseLibrary.create_category(db_session, ExerciseCategoryCreate(name="pernas"))


def test_unknown_category(db_session, trainer):
    with pytest.raises(NotFoundError):
        ExerciseLibrary.create_exercise(db_session, trainer.id, ExerciseCreate(category_id=77, name="Lost"))
