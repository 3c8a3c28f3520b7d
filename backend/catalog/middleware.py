"""
Request logging middleware for monitoring API performance.
"""
import time
import logging

logger = logging.getLogger(__name__)

SLOW_REQUEST_MS = 2000


class RequestLoggingMiddleware:
    """
    Middleware to log API request timing.

    Logs method, path, response status and duration in milliseconds for
    every request except static files and the health check. Requests slower
    than two seconds are logged as warnings.
    """

    EXCLUDED_PATHS = ['/static/', '/api/health/']

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if not self.should_log(request.path):
            return self.get_response(request)

        start_time = time.time()
        response = self.get_response(request)
        duration_ms = int((time.time() - start_time) * 1000)

        if duration_ms > SLOW_REQUEST_MS:
            logger.warning(
                f"Very slow request detected: {request.method} {request.path} "
                f"took {duration_ms}ms"
            )
        else:
            logger.info(
                f"{request.method} {request.path} -> {response.status_code} ({duration_ms}ms)"
            )

        return response

    def should_log(self, path):
        """
        Determine if the request should be logged.

        Args:
            path: The request path

        Returns:
            bool: True if the request should be logged
        """
        return not any(path.startswith(p) for p in self.EXCLUDED_PATHS)
