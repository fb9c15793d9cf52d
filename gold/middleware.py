import logging
import time

logger = logging.getLogger(__name__)

LOGGED_BODY_METHODS = ("POST", "PUT", "PATCH")
MAX_LOGGED_BODY = 2000


class RequestResponseLoggingMiddleware:
    """
    Logs every API call: method, path, request body for writes, and the
    response status with its JSON body and duration.

    Admin and static paths are passed through without logging.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if not request.path.startswith("/api/"):
            return self.get_response(request)

        started = time.monotonic()
        logger.info(
            "API request: %s %s body=%s",
            request.method,
            request.get_full_path(),
            self._request_body(request),
        )

        response = self.get_response(request)

        logger.info(
            "API response: %s %s status=%d duration_ms=%.1f body=%s",
            request.method,
            request.get_full_path(),
            response.status_code,
            (time.monotonic() - started) * 1000,
            self._response_body(response),
        )
        return response

    @staticmethod
    def _request_body(request):
        if request.method not in LOGGED_BODY_METHODS:
            return "-"
        if "multipart/form-data" in request.META.get("CONTENT_TYPE", ""):
            return "<multipart>"
        # Django caches request.body, so reading it here leaves it for the view.
        try:
            return request.body.decode("utf-8")[:MAX_LOGGED_BODY] or "-"
        except UnicodeDecodeError:
            return "<undecodable>"

    @staticmethod
    def _response_body(response):
        content_type = response.get("Content-Type", "")
        if getattr(response, "streaming", False):
            return "<streaming>"
        if not content_type.startswith("application/json"):
            return f"<{content_type or 'no content type'}>"
        try:
            return response.content.decode("utf-8")[:MAX_LOGGED_BODY]
        except UnicodeDecodeError:
            return "<undecodable>"
