import time
import uuid
from typing import Callable
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from utils.logging import log_request_start, log_request_end, log_error, log_periodic_stats, quiz_logger

UNLOGGED_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}
REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tags each quiz request with a short id and logs its start, end and failures"""

    def __init__(self, app, log_periodic_stats_interval: int = 300):
        super().__init__(app)
        self.log_periodic_stats_interval = log_periodic_stats_interval
        self.last_stats_log = time.time()

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request.state.request_id = request_id

        if request.url.path in UNLOGGED_PATHS:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response

        start_time = time.time()
        endpoint = f"{request.method} {request.url.path}"
        request_info = log_request_start(request, endpoint, request_id)

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            log_error(e, endpoint, {
                "request_id": request_id,
                "duration_ms": round(duration_ms, 2),
                "query": str(request.url.query),
            })
            log_request_end(request_info, duration_ms, 500)

            # Details stay in the log; the caller gets the request id to quote
            return JSONResponse(
                status_code=500,
                content={"error": "InternalError", "detail": f"Internal server error (request {request_id})"},
                headers={REQUEST_ID_HEADER: request_id},
            )

        log_request_end(request_info, (time.time() - start_time) * 1000, response.status_code)
        response.headers[REQUEST_ID_HEADER] = request_id

        if time.time() - self.last_stats_log > self.log_periodic_stats_interval:
            log_periodic_stats()
            self.last_stats_log = time.time()

        return response


class PerformanceLoggingMiddleware(BaseHTTPMiddleware):
    """Warns when a generation round-trip exceeds the threshold and sets X-Response-Time"""

    def __init__(self, app, slow_request_threshold_ms: float = 10000):
        super().__init__(app)
        self.slow_request_threshold_ms = slow_request_threshold_ms

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000

        if duration_ms > self.slow_request_threshold_ms:
            quiz_logger.logger.warning(
                f"🐌 SLOW REQUEST | {request.method} {request.url.path} | "
                f"Duration: {duration_ms:.2f}ms | Threshold: {self.slow_request_threshold_ms:.0f}ms"
            )

        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        return response
