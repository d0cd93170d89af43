import time
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        client = request.client.host if request.client else "unknown"

        logger.info(f"{request.method} {request.url.path} from {client}")

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"{request.method} {request.url.path} failed after "
                f"{time.time() - start_time:.3f}s: {e}"
            )
            raise

        process_time = time.time() - start_time
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} in {process_time:.3f}s")
        response.headers["X-Process-Time"] = f"{process_time:.6f}"
        return response
