"""
Custom middleware components for the account check service.

This module defines middleware classes for:
- Request ID generation and tracking
- Request logging against the response time budget
"""
import logging
import time
import uuid

from django.conf import settings

logger = logging.getLogger(__name__)


class RequestIDMiddleware:
    """
    Middleware to attach a unique request ID to each request.

    An incoming X-Request-ID header is reused so a request can be traced
    across services; otherwise a new one is generated.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = request.META.get("HTTP_X_REQUEST_ID") or str(uuid.uuid4())
        request.request_id = request_id

        response = self.get_response(request)

        response["X-Request-ID"] = request_id
        return response


class RequestLoggingMiddleware:
    """
    Middleware to log all API requests.

    Logs include method, path, status code, response time and request ID.
    Requests slower than RESPONSE_BUDGET_SECONDS are logged as warnings.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        self.response_budget = float(getattr(settings, "RESPONSE_BUDGET_SECONDS", 2.0))

    def __call__(self, request):
        start_time = time.time()

        response = self.get_response(request)

        response_time = time.time() - start_time

        # Only log API requests
        if request.path.startswith('/api/'):
            log_data = {
                'method': request.method,
                'path': request.path,
                'status_code': response.status_code,
                'response_time': f"{response_time:.4f}s",
                'client_ip': self._get_client_ip(request),
                'request_id': getattr(request, 'request_id', 'N/A'),
            }

            if response.status_code >= 500:
                logger.error(f"API Request: {log_data}")
            elif response_time > self.response_budget:
                logger.warning(f"API Request over {self.response_budget}s budget: {log_data}")
            elif response.status_code >= 400:
                logger.warning(f"API Request: {log_data}")
            else:
                logger.info(f"API Request: {log_data}")

        return response

    def _get_client_ip(self, request):
        """Extract client IP from request"""
        x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
        if x_forwarded_for:
            ip = x_forwarded_for.split(',')[0]
        else:
            ip = request.META.get('REMOTE_ADDR')
        return ip
