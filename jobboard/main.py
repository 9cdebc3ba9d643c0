import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from .config import settings
from .database import engine, Base
from .errors import ServiceError
from . import models  # registers models with this Base
from .routes import (
    application_routes,
    auth_routes,
    cv_routes,
    file_routes,
    job_offer_routes,
    profile_routes,
    skill_routes,
    user_routes,
)

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Create tables once when app starts
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.backend_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.__cause__ or exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


app.include_router(auth_routes.router)
app.include_router(profile_routes.router)
app.include_router(skill_routes.router)
app.include_router(job_offer_routes.router)
app.include_router(application_routes.router)
app.include_router(cv_routes.router)
app.include_router(file_routes.router)
app.include_router(user_routes.router)


@app.get("/")
def root():
    return {"message": f"{settings.app_name} ✅"}


@app.get("/health")
def health():
    return {"status": "healthy"}
