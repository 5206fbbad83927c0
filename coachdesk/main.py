import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from coachdesk.core.config import settings
from coachdesk.core.database import engine, Base
from coachdesk.core.exceptions import APIException
from coachdesk.core.logging import setup_logging

from coachdesk.models import trainer, client, exercise, training, nutrition, completion, subscription  # noqa: F401
from coachdesk.api import api_router

setup_logging()
logger = logging.getLogger(__name__)

# Schema is owned by Alembic; create_all is only for throwaway dev databases
if settings.DB_BOOTSTRAP:
    Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.PROJECT_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": exc.error_code},
        headers=exc.headers,
    )


app.include_router(api_router)


@app.get("/")
def read_root():
    return {"message": f"{settings.PROJECT_NAME} running", "environment": settings.ENVIRONMENT}


@app.get("/health")
def health():
    return {"status": "OK"}
