from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Optional
import time
import logging

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    """Extract client IP address from request"""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"


def get_user_agent(request: Request) -> str:
    return request.headers.get("user-agent", "")


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging; per-user activity is recorded by the service decorators"""

    def __init__(self, app, exclude_paths: Optional[list] = None):
        super().__init__(app)
        self.exclude_paths = exclude_paths or [
            "/docs",
            "/redoc",
            "/openapi.json",
            "/favicon.ico",
            "/health",
        ]

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        # Skip logging for excluded paths
        if any(request.url.path.startswith(path) for path in self.exclude_paths):
            return await call_next(request)

        method = request.method
        path = request.url.path
        client_ip = get_client_ip(request)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"Request failed: {method} {path} - {e}")
            raise

        response_time = time.time() - start_time
        status_code = response.status_code

        if self._should_log_request(method, status_code):
            self._log_request(method, path, status_code, response_time, client_ip)

        return response

    def _should_log_request(self, method: str, status_code: int) -> bool:
        # Writes and failures only
        return method != "GET" or status_code >= 400

    def _log_request(self, method: str, path: str, status_code: int, response_time: float, client_ip: str):
        message = (
            f"Request: {method} {path} - Status: {status_code} - "
            f"Time: {response_time:.3f}s - IP: {client_ip}"
        )
        if status_code >= 500:
            logger.error(message)
        elif status_code >= 400:
            logger.warning(message)
        else:
            logger.info(message)
