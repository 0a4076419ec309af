from django.conf import settings
from django.http import HttpResponse
from django.utils.cache import patch_vary_headers

ALLOW_METHODS = ("GET", "POST", "PATCH", "PUT", "DELETE", "OPTIONS")
ALLOW_HEADERS = ("Content-Type", "X-API-Key", "X-User-Id", "Idempotency-Key")
PREFLIGHT_MAX_AGE = 600


class OrderDeskCORSMiddleware:
    """Answers preflight requests and tags responses for the SPA origins.

    Every origin is accepted while DEBUG is on; otherwise only those listed in
    ``CORS_ALLOWED_ORIGINS``.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        origin = request.headers.get("Origin")
        is_preflight = request.method == "OPTIONS" and "Access-Control-Request-Method" in request.headers

        response = HttpResponse(status=204) if is_preflight else self.get_response(request)
        if origin and self.origin_allowed(origin):
            response["Access-Control-Allow-Origin"] = origin
            patch_vary_headers(response, ("Origin",))
            if is_preflight:
                response["Access-Control-Allow-Methods"] = ", ".join(ALLOW_METHODS)
                response["Access-Control-Allow-Headers"] = ", ".join(ALLOW_HEADERS)
                response["Access-Control-Max-Age"] = str(PREFLIGHT_MAX_AGE)
        return response

    @staticmethod
    def origin_allowed(origin: str) -> bool:
        if settings.DEBUG:
            return True
        return origin in getattr(settings, "CORS_ALLOWED_ORIGINS", ())
