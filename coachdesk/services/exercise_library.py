import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coachdesk.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from coachdesk.models.exercise import Exercise, ExerciseCategory
from coachdesk.models.training import ExerciseAssignment
from coachdesk.schemas.exercise import ExerciseCategoryCreate, ExerciseCreate, ExerciseUpdate

logger = logging.getLogger(__name__)


class ExerciseLibrary:
    """
    Shared exercise catalogue plus each trainer's private additions.
    Entries with ``trainer_id`` NULL are global and read-only for trainers.
    """

    # --- Categories ---

    @staticmethod
    def list_categories(db: Session) -> List[ExerciseCategory]:
        return db.query(ExerciseCategory).order_by(ExerciseCategory.name).all()

    @staticmethod
    def create_category(db: Session, data: ExerciseCategoryCreate) -> ExerciseCategory:
        name = data.name.strip()
        if not name:
            raise ValidationError("Category name cannot be blank", field="name")
        exists = db.query(ExerciseCategory).filter(ExerciseCategory.name.ilike(name)).first()
        if exists:
            raise ValidationError(f"Category '{name}' already exists", field="name")

        category = ExerciseCategory(name=name, emoji=data.emoji)
        db.add(category)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise ValidationError(f"Could not create category: {e.orig}") from e
        db.refresh(category)
        return category

    # --- Exercises ---

    @staticmethod
    def _visible(db: Session, trainer_id: int):
        return db.query(Exercise).filter(
            or_(Exercise.trainer_id.is_(None), Exercise.trainer_id == trainer_id)
        )

    @staticmethod
    def list_exercises(
        db: Session,
        trainer_id: int,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[Exercise]:
        query = ExerciseLibrary._visible(db, trainer_id)
        if category_id is not None:
            query = query.filter(Exercise.category_id == category_id)
        if search:
            query = query.filter(Exercise.name.ilike(f"%{search.strip()}%"))
        return query.order_by(Exercise.name, Exercise.id).all()

    @staticmethod
    def get_exercise(db: Session, trainer_id: int, exercise_id: int) -> Exercise:
        exercise = ExerciseLibrary._visible(db, trainer_id).filter(Exercise.id == exercise_id).first()
        if not exercise:
            raise NotFoundError("Exercise", exercise_id)
        return exercise

    @staticmethod
    def _get_own(db: Session, trainer_id: int, exercise_id: int) -> Exercise:
        exercise = ExerciseLibrary.get_exercise(db, trainer_id, exercise_id)
        if exercise.trainer_id != trainer_id:
            raise ForbiddenError("Global library exercises cannot be modified")
        return exercise

    @staticmethod
    def _check_category(db: Session, category_id: int) -> None:
        if not db.query(ExerciseCategory).filter(ExerciseCategory.id == category_id).first():
            raise NotFoundError("Exercise category", category_id)

    @staticmethod
    def create_exercise(db: Session, trainer_id: int, data: ExerciseCreate) -> Exercise:
        ExerciseLibrary._check_category(db, data.category_id)
        name = data.name.strip()
        if not name:
            raise ValidationError("Exercise name cannot be blank", field="name")

        exercise = Exercise(
            category_id=data.category_id,
            trainer_id=trainer_id,
            name=name,
            description=data.description,
            instructions=data.instructions,
            muscle_groups=data.muscle_groups,
            equipment=data.equipment,
            video_url=data.video_url,
        )
        db.add(exercise)
        db.commit()
        db.refresh(exercise)
        logger.info("Trainer %s added exercise %s (%s)", trainer_id, exercise.id, exercise.name)
        return exercise

    @staticmethod
    def update_exercise(db: Session, trainer_id: int, exercise_id: int, data: ExerciseUpdate) -> Exercise:
        exercise = ExerciseLibrary._get_own(db, trainer_id, exercise_id)

        update_data = data.model_dump(exclude_unset=True)
        if "category_id" in update_data:
            ExerciseLibrary._check_category(db, update_data["category_id"])
        if "name" in update_data:
            name = (update_data["name"] or "").strip()
            if not name:
                raise ValidationError("Exercise name cannot be blank", field="name")
            update_data["name"] = name

        for field, value in update_data.items():
            setattr(exercise, field, value)
        db.commit()
        db.refresh(exercise)
        return exercise

    @staticmethod
    def delete_exercise(db: Session, trainer_id: int, exercise_id: int) -> None:
        exercise = ExerciseLibrary._get_own(db, trainer_id, exercise_id)

        in_use = (
            db.query(ExerciseAssignment.id)
            .filter(ExerciseAssignment.exercise_id == exercise_id)
            .first()
        )
        if in_use:
            raise ValidationError("Exercise is assigned in a training plan and cannot be deleted")

        db.delete(exercise)
        db.commit()
        logger.info("Trainer %s deleted exercise %s", trainer_id, exercise_id)
