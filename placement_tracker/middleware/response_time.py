import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from placement_tracker.core.config import settings
from placement_tracker.core.monitoring import record_response_time
from placement_tracker.logs.logging_config import logger


class ResponseTimeMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        response.headers["X-Response-Time"] = f"{process_time:.6f}"
        # route template keeps one metric per endpoint, not per id
        route = request.scope.get("route")
        record_response_time(route.path if route else "unmatched", process_time)

        if process_time > settings.slow_request_threshold:
            logger.warning(f"Slow request: {request.method} {request.url.path} took {process_time:.3f}s")

        return response
