import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from pymongo.errors import PyMongoError

from .config import get_settings
from .db import close_mongo_connection, connect_to_mongo, is_connected
from .errors import ServiceError
from .logging_config import setup_logging
from .routers import (
    admin,
    auth,
    biodatas,
    favourites,
    payments,
    premium_requests,
    success_stories,
    users,
)

settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger("uvicorn.error")

app = FastAPI(title="Matrimony API", default_response_class=ORJSONResponse)

logger.info("[CORS] allow_origins=%s", settings.allow_origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)
app.add_middleware(GZipMiddleware, minimum_size=512)


# Simple slow-request logger
@app.middleware("http")
async def log_slow_requests(request: Request, call_next):
    t0 = time.time()
    response = await call_next(request)
    dt = (time.time() - t0) * 1000
    if dt >= get_settings().slow_request_ms:
        logger.warning(
            "[perf] slow request %s %s %dms status=%s",
            request.method,
            request.url.path,
            int(dt),
            response.status_code,
        )
    return response


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return ORJSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return ORJSONResponse(status_code=400, content={"message": "invalid request", "errors": errors})


@app.exception_handler(PyMongoError)
async def storage_error_handler(request: Request, exc: PyMongoError):
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return ORJSONResponse(status_code=500, content={"message": "storage unavailable"})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return ORJSONResponse(status_code=500, content={"message": "internal server error"})


@app.on_event("startup")
async def startup():
    await connect_to_mongo()


@app.on_event("shutdown")
async def shutdown():
    await close_mongo_connection()


# Routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(biodatas.router)
app.include_router(payments.router)
app.include_router(premium_requests.router)
app.include_router(favourites.router)
app.include_router(success_stories.router)
app.include_router(admin.router)


@app.get("/")
async def root():
    return {"status": "matrimony-api-ok"}


@app.get("/health/db")
async def db_health():
    return {
        "mongo": "connected" if is_connected() else "disconnected",
        "db": str(get_settings().mongo_db),
    }
