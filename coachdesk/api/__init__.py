from fastapi import APIRouter
from .routes import auth, trainers, clients, training_plans, nutrition_plans, exercises, student, reports, billing

api_router = APIRouter()


api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(trainers.router, prefix="/trainers", tags=["Trainers"])
api_router.include_router(clients.router, prefix="/clients", tags=["Clients"])
api_router.include_router(training_plans.router, prefix="/training-plans", tags=["Training plans"])
api_router.include_router(nutrition_plans.router, prefix="/nutrition-plans", tags=["Nutrition plans"])
api_router.include_router(exercises.router, prefix="/exercises", tags=["Exercise library"])
api_router.include_router(student.router, prefix="/student", tags=["Client pages"])
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])
api_router.include_router(billing.router, prefix="/billing", tags=["Billing"])
