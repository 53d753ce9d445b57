# Nova tutoring backend entrypoint: FastAPI app wiring routers and error handlers.

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from nova.app.core.dev_seed import ensure_default_dev_tutors
from nova.app.core.errors import Conflict, NovaError, ValidationError
from nova.app.core.settings import get_settings
from nova.app.api import accounts
from nova.app.api import connections
from nova.app.api import me
from nova.app.api import public
from nova.app.api import sessions
from nova.app.api import students
from nova.app.api import tutor_profiles
from nova.app.api import tutor_students
from nova.app.db.base import Base
from nova.app.db.session import SessionLocal, engine

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version=settings.api_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(me.router)
app.include_router(students.router)
app.include_router(sessions.router)
app.include_router(tutor_students.router)
app.include_router(tutor_profiles.router)
app.include_router(connections.router)
app.include_router(accounts.router)
app.include_router(public.router)


@app.exception_handler(NovaError)
async def nova_error_handler(request: Request, exc: NovaError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"), "message": error.get("msg", "")}
        for error in exc.errors()
    ]
    error = ValidationError("Validation error", details=details)
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    # Constraint violations that escaped a service still must not leak driver text
    logger.warning("Unhandled integrity error on %s %s", request.method, request.url.path)
    error = Conflict("Record already exists")
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


@app.get("/")
def read_root():
    return {"app": "Nova tutoring backend", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def prepare_database():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        ensure_default_dev_tutors(db)
    finally:
        db.close()
