import sys
import os
import logging

# Add the current directory to sys.path to import coachdesk
sys.path.append(os.getcwd())

from coachdesk.core.database import SessionLocal
from coachdesk.core.logging import setup_logging
from coachdesk.models import trainer, client, training, nutrition, completion  # noqa: F401
from coachdesk.models.exercise import ExerciseCategory, Exercise
from coachdesk.models.subscription import SubscriptionPlan

logger = logging.getLogger("seed_db")

SUBSCRIPTION_PLANS = [
    {"name": "Starter", "student_limit": 15, "billing_period": "monthly", "price_cents": 2990},
    {"name": "Pro", "student_limit": 50, "billing_period": "monthly", "price_cents": 5990},
    {"name": "Studio", "student_limit": 200, "billing_period": "monthly", "price_cents": 12990},
    {"name": "Pro Anual", "student_limit": 50, "billing_period": "yearly", "price_cents": 59900},
]

CATEGORIES = {
    "Peito": ("💪", ["Supino reto", "Crucifixo com halteres"]),
    "Costas": ("🏋️", ["Puxada frontal", "Remada curvada"]),
    "Pernas": ("🦵", ["Agachamento livre", "Leg press 45"]),
    "Ombros": ("🤸", ["Desenvolvimento com halteres", "Elevação lateral"]),
    "Cardio": ("🏃", ["Esteira", "Bicicleta ergométrica"]),
}


def seed():
    db = SessionLocal()
    try:
        # 1. Subscription tiers
        for data in SUBSCRIPTION_PLANS:
            exists = (
                db.query(SubscriptionPlan)
                .filter(SubscriptionPlan.name == data["name"], SubscriptionPlan.billing_period == data["billing_period"])
                .first()
            )
            if exists:
                logger.info("Plan already exists: %s", data["name"])
                continue
            db.add(SubscriptionPlan(**data))
            logger.info("Plan created: %s (%s clients)", data["name"], data["student_limit"])
        db.commit()

        # 2. Global exercise library (trainer_id NULL)
        for name, (emoji, exercises) in CATEGORIES.items():
            category = db.query(ExerciseCategory).filter(ExerciseCategory.name == name).first()
            if not category:
                category = ExerciseCategory(name=name, emoji=emoji)
                db.add(category)
                db.flush()
                logger.info("Category created: %s", name)
            for exercise_name in exercises:
                exists = (
                    db.query(Exercise)
                    .filter(Exercise.name == exercise_name, Exercise.trainer_id.is_(None))
                    .first()
                )
                if not exists:
                    db.add(Exercise(category_id=category.id, name=exercise_name, muscle_groups=[name], equipment=[]))
        db.commit()

        # 3. Platform administrator (existing account, by email)
        admin_email = os.getenv("ADMIN_EMAIL")
        if admin_email:
            admin = db.query(trainer.Trainer).filter(trainer.Trainer.email == admin_email.strip().lower()).first()
            if admin:
                admin.is_admin = True
                db.commit()
                logger.info("Trainer %s promoted to administrator", admin.id)
            else:
                logger.warning("ADMIN_EMAIL %s does not match any trainer", admin_email)

        logger.info("Seed completed")
    except Exception:
        db.rollback()
        logger.exception("Seed failed")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    setup_logging()
    seed()
