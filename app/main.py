# app/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from app.api.v1.api import api_router
from app.core.config import settings
from app.core.exceptions import PortalError, StoreUnavailableError, ValidationError
from app.core.limiter import limiter

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="[%(asctime)s] %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Campus events service starting up (env=%s)", settings.ENV)
    yield
    logger.info("Campus events service shutting down")


app = FastAPI(
    title="Campus Events Registration Service",
    version="1.0.0",
    description="""
        **Campus Event Registration Portal**

        * **Students**: browse upcoming events, register, cancel, download receipts
        * **Administrators**: create and manage events, view registrants and portal statistics

        ## Authentication

        All endpoints except `/health` require a bearer JWT issued by the
        auth provider: `Authorization: Bearer <token>`.
        """,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_notice())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    error = ValidationError.from_pydantic(exc.errors())
    logger.info(f"Rejected invalid input on {request.url.path}: {error.errors}")
    return JSONResponse(status_code=error.status_code, content=error.to_notice())


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.url.path}: {exc}", exc_info=exc)
    error = StoreUnavailableError()
    return JSONResponse(status_code=error.status_code, content=error.to_notice())


app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    return {"status": "Campus events service is running"}
