"""Request Logging Middleware

Each request gets a correlation id (taken from `X-Correlation-ID` when the
client sends one) that is bound to the log context and echoed back. The
raw query is logged before any coercion runs; the completion event names
the matched route template and the slots that were parsed for it.
"""
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from core.logging import api_logger, bind_context, clear_context, generate_correlation_id

log = api_logger()

CORRELATION_HEADER = "X-Correlation-ID"


def _raw_query(request: Request) -> dict[str, str | list[str]] | None:
    params = request.query_params
    if not params:
        return None
    raw: dict[str, str | list[str]] = {}
    for name in dict.fromkeys(params.keys()):
        values = params.getlist(name)
        raw[name] = values[0] if len(values) == 1 else values
    return raw


def _route_template(request: Request) -> str | None:
    route = request.scope.get("route")
    return getattr(route, "path", None)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or generate_correlation_id()
        clear_context()
        bind_context(correlation_id=correlation_id, method=request.method, path=request.url.path)
        # Created up front so the route handler writes into the same state
        state = request.state
        start = time.perf_counter()
        log.info("request_started", query=_raw_query(request))

        try:
            response = await call_next(request)
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            response.headers[CORRELATION_HEADER] = correlation_id

            status = response.status_code
            log_method = log.info if status < 400 else (log.warning if status < 500 else log.error)
            log_method(
                "request_completed",
                status=status,
                duration_ms=duration_ms,
                route=_route_template(request),
                slots=sorted(getattr(state, "validated", None) or ()),
            )
            return response
        except Exception as exc:
            log.exception("request_failed", error_type=type(exc).__name__,
                duration_ms=round((time.perf_counter() - start) * 1000, 2))
            raise
        finally:
            clear_context()
