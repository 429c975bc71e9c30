"""Cross-origin access policy for the gateway.

Browser clients only receive an ``Access-Control-Allow-Origin`` grant when
their origin matches the allow-list. Requests from other origins are still
processed and answered; the user agent is what blocks them.
"""

from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from shared.logging import get_logger
from shared.models import AccessPolicyDecision

logger = get_logger(__name__)

ALLOW_METHODS = ("GET", "POST", "OPTIONS")
ALLOW_HEADERS = ("Content-Type",)


class AccessPolicy:
    """
    Computes the CORS grant for a request origin.

    With ``open_access`` every origin gets ``*``. Otherwise the first
    allow-list entry contained in the caller's origin is echoed verbatim.
    """

    def __init__(self, allowed_origins: Iterable[str] = (), open_access: bool = False) -> None:
        self.allowed_origins = tuple(allowed_origins)
        self.open_access = open_access

    def decide(self, origin: Optional[str]) -> AccessPolicyDecision:
        if self.open_access:
            allow_origin: Optional[str] = "*"
        elif origin:
            allow_origin = next(
                (allowed for allowed in self.allowed_origins if allowed in origin),
                None
            )
        else:
            allow_origin = None

        return AccessPolicyDecision(
            allow_origin=allow_origin,
            allow_methods=ALLOW_METHODS,
            allow_headers=ALLOW_HEADERS,
        )


def request_origin(request: Request) -> Optional[str]:
    """Return the caller's declared origin, falling back to the referer."""
    return request.headers.get("origin") or request.headers.get("referer")


class AccessPolicyMiddleware(BaseHTTPMiddleware):
    """Applies an AccessPolicy to every response and answers pre-flight requests."""

    def __init__(self, app: ASGIApp, policy: AccessPolicy) -> None:
        super().__init__(app)
        self.policy = policy

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        origin = request_origin(request)
        decision = self.policy.decide(origin)

        if decision.allow_origin is None and origin:
            logger.debug("Origin not granted CORS access", origin=origin)

        if request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            response = await call_next(request)

        response.headers.update(decision.headers())
        return response
