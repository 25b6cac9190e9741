import logging
import re
import uuid
from contextvars import ContextVar

from django.http import JsonResponse

from core.exceptions import error_body

# Services log from deep inside a request without access to it; the request
# id travels in this context var instead.
_request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

ACTOR_HEADER = "X-Actor"
ACTOR_PATTERN = re.compile(r"^(ADMIN|DEALER:\S.*)$")
# Caller-supplied request ids are kept only when they fit AuditLog.request_id
REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._:-]{1,64}")


def get_current_request_id() -> str | None:
    """Return the request id of the request being served, if any."""
    return _request_id_ctx.get()


class RequestIDFilter(logging.Filter):
    """Adds request_id to every record so the formatter can print it."""

    def filter(self, record):
        request = getattr(record, "request", None)
        record.request_id = (
            getattr(request, "request_id", None) or get_current_request_id()
        )
        return True


class RequestIDMiddleware:
    """
    Accept the caller's X-Request-ID when it is a short token of safe
    characters, otherwise mint one. Expose it to logging and echo it on the
    response.
    """

    HEADER_NAME = "HTTP_X_REQUEST_ID"
    RESPONSE_HEADER = "X-Request-ID"

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = request.META.get(self.HEADER_NAME) or ""
        if not REQUEST_ID_PATTERN.fullmatch(request_id):
            request_id = str(uuid.uuid4())
        request.request_id = request_id
        token = _request_id_ctx.set(request_id)
        try:
            response = self.get_response(request)
        finally:
            _request_id_ctx.reset(token)
        response[self.RESPONSE_HEADER] = request_id
        return response


class ActorHeaderMiddleware:
    """
    Resolve the acting party from the X-Actor header.

    The actor is "ADMIN" or "DEALER:<name>" and is recorded verbatim in the
    audit trail. Mutations without a well-formed actor are refused with 400;
    reads and health probes need none.
    """

    MUTATION_METHODS = ("POST", "PATCH", "PUT", "DELETE")
    EXCLUDED_PATHS = ("/api/health/",)

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        actor = (request.headers.get(ACTOR_HEADER) or "").strip()
        request.actor = actor or None

        if self._requires_actor(request):
            rejection = self._check_actor(actor)
            if rejection is not None:
                return rejection

        return self.get_response(request)

    def _requires_actor(self, request):
        return request.method in self.MUTATION_METHODS and not request.path.startswith(
            self.EXCLUDED_PATHS
        )

    def _check_actor(self, actor):
        if not actor:
            return JsonResponse(
                error_body(
                    "VALIDATION_ERROR",
                    "X-Actor header is required for mutation operations",
                ),
                status=400,
            )
        if not ACTOR_PATTERN.match(actor):
            return JsonResponse(
                error_body(
                    "VALIDATION_ERROR",
                    "X-Actor must be 'ADMIN' or 'DEALER:<name>'",
                    {"actor": actor},
                ),
                status=400,
            )
        return None
