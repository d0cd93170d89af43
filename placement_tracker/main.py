from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
import uvicorn

from placement_tracker.core.database import init_db
from placement_tracker.core.exceptions import PersistenceError, TrackerError
from placement_tracker.core.rate_limiter import limiter
from placement_tracker.dependencies.error_code import get_error_response
from placement_tracker.dependencies.versions import api_router
from placement_tracker.logs.logging_config import logger, setup_logging
from placement_tracker.middleware.request_logging import RequestLoggingMiddleware
from placement_tracker.middleware.response_time import ResponseTimeMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    await init_db()
    yield


app = FastAPI(title="Placement Tracker API", lifespan=lifespan)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(ResponseTimeMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.include_router(api_router, prefix="/api")


@app.exception_handler(TrackerError)
async def tracker_error_handler(request: Request, exc: TrackerError):
    if isinstance(exc, PersistenceError):
        # driver errors stay in the logs
        logger.error(f"{request.method} {request.url.path}: {exc.message} ({exc.original_error})")
        details = "A database error occurred, please retry later"
    else:
        details = exc.message
    return JSONResponse(
        status_code=exc.http_status,
        content=get_error_response(exc.code, details),
    )


@app.get("/")
async def hello():
    return {"msg": "Placement Tracker API is running!"}


if __name__ == "__main__":
    uvicorn.run("placement_tracker.main:app", reload=True)
