from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from bilemo.core.config import settings
from bilemo.core.errors import (
    ValidationFailed,
    request_validation_handler,
    validation_failed_handler,
)
from bilemo.core.log import configure_logging
from bilemo.api.v1.api import api_router
from bilemo.db.session import init_db

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan,
)

# Set up CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify actual origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Validation failures are reported as 400 with a list of violations
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(ValidationFailed, validation_failed_handler)

app.include_router(api_router, prefix=settings.API_PREFIX)
