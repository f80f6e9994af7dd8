from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from booth_booker.config import settings
from booth_booker.db import init_database
from booth_booker.exceptions import BookingError
from booth_booker.logging_config import setup_logging
from booth_booker.routers import auth, bookings, exhibitions

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    "lifespan for logging and database setup"
    setup_logging()
    init_database()
    yield


app = FastAPI(
    lifespan=lifespan,
    title=settings.APP_NAME,
    description="Exhibition booth booking backed by FastAPI.",
    version=settings.APP_VERSION,
)


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError):
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


app.include_router(auth.router)
app.include_router(exhibitions.router)
app.include_router(bookings.router)
