"""Validation at the HTTP Boundary

Routes declare schemas for their request parts (query string, path
parameters, headers, body). When a route is registered, the configured
parts are rewritten so their fields accept text input; on each request the
raw parts are parsed against the (rewritten) schemas and the typed results
are handed to the endpoint.

Usage:
    router = APIRouter(route_class=CoercingRoute)

    @router.get("/items")
    @route_schema(query=s.object_({"page": s.number().int_(), "tags": s.array(s.string())}))
    async def list_items(query: dict = Validated("query")):
        ...

Invalid data becomes unrepresentable once parsed through the boundary.
"""
from __future__ import annotations

import weakref
from dataclasses import dataclass, replace
from typing import Any, Callable, ClassVar, Iterable, Iterator

from fastapi import Depends, Request
from fastapi.routing import APIRoute
from starlette.datastructures import Headers, ImmutableMultiDict
from starlette.responses import Response

from core.config import settings
from core.errors import AppError, AppErrorException, Err, ErrorCode, Ok
from core.logging import route_context, schema_logger, slot_context

from .errors import QueryCoercionError, ValidationError
from .schema import UNDEFINED, ObjectSchema, Schema

log = schema_logger()

SLOTS = ("query", "path", "headers", "body")
ROUTE_SCHEMA_ATTR = "__route_schema__"


# ============================================================================
# Route Schemas
# ============================================================================

@dataclass(frozen=True, slots=True)
class RouteSchema:
    """Schemas declared for the parts of one route's requests."""
    query: Schema | None = None
    path: Schema | None = None
    headers: Schema | None = None
    body: Schema | None = None

    def get(self, slot: str) -> Schema | None:
        return getattr(self, slot)

    def declared(self) -> Iterator[tuple[str, Schema]]:
        """(slot, schema) pairs for every declared slot, in request order."""
        for slot in SLOTS:
            if (schema := getattr(self, slot)) is not None:
                yield slot, schema


def route_schema(*, query: Schema | None = None, path: Schema | None = None,
                 headers: Schema | None = None, body: Schema | None = None) -> Callable:
    """Attach a RouteSchema to an endpoint.

    Apply below the router decorator so the schema is in place when the
    route is registered.
    """
    declared = RouteSchema(query=query, path=path, headers=headers, body=body)

    def decorator(func: Callable) -> Callable:
        setattr(func, ROUTE_SCHEMA_ATTR, declared)
        return func
    return decorator


def get_route_schema(endpoint: Callable) -> RouteSchema | None:
    return getattr(endpoint, ROUTE_SCHEMA_ATTR, None)


# Rewritten object schemas; identity-keyed so the schemas themselves stay untouched
_processed: weakref.WeakSet[ObjectSchema] = weakref.WeakSet()


def is_processed(schema: Schema) -> bool:
    return isinstance(schema, ObjectSchema) and schema in _processed


def mark_processed(schema: ObjectSchema) -> None:
    _processed.add(schema)


def _check_slots(slots: Iterable[str]) -> tuple[str, ...]:
    slots = tuple(slots)
    if unknown := [s for s in slots if s not in SLOTS]:
        raise ValueError(f"Unknown schema slot(s) {unknown}; expected any of {list(SLOTS)}")
    return slots


# ============================================================================
# Registration Hook
# ============================================================================

class QueryCoercionHook:
    """Rewrites the configured slots of a route schema for text input.

    Usage:
        hook = QueryCoercionHook(slots=("query", "headers"))
        declared = hook.on_route(declared, route_path="/items")
    """

    __slots__ = ("slots", "transformer")

    def __init__(self, slots: Iterable[str] = ("query",), transformer=None):
        self.slots = _check_slots(slots)
        self.transformer = transformer

    def on_route(self, declared: RouteSchema, *, route_path: str = "") -> RouteSchema:
        """Return the route schema with each configured object slot rewritten.

        Raises:
            QueryCoercionError: a field schema has no textual form.
        """
        from engines.transform import DEFAULT_TRANSFORMER

        transformer = self.transformer or DEFAULT_TRANSFORMER
        updates: dict[str, ObjectSchema] = {}
        for slot in self.slots:
            schema = declared.get(slot)
            if not isinstance(schema, ObjectSchema):
                continue
            if is_processed(schema):
                log.debug("query_coercion_skipped", route=route_path, slot=slot)
                continue
            try:
                rewritten = transformer.coerce_object(schema)
            except QueryCoercionError as e:
                log.error("query_coercion_failed", route=route_path, slot=slot, field=e.field_key,
                    kind=e.kind_name, error=str(e))
                raise
            mark_processed(rewritten)
            updates[slot] = rewritten
            log.debug("query_coercion_applied", route=route_path, slot=slot, fields=len(rewritten.fields))
        return replace(declared, **updates) if updates else declared


# ============================================================================
# Raw Request Parts
# ============================================================================

def _flatten(multi: ImmutableMultiDict | Headers) -> dict[str, str | list[str]]:
    """One occurrence -> str, repeated key -> list[str] in order."""
    flat: dict[str, str | list[str]] = {}
    for key in dict.fromkeys(multi.keys()):
        values = multi.getlist(key)
        flat[key] = values[0] if len(values) == 1 else list(values)
    return flat


async def collect_raw(request: Request, slot: str) -> Any:
    """Raw value of one request part, in the shape its schema parses."""
    match slot:
        case "query":
            return _flatten(request.query_params)
        case "path":
            return dict(request.path_params)
        case "headers":
            return _flatten(request.headers)
        case "body":
            if not await request.body():
                return UNDEFINED
            try:
                return await request.json()
            except ValueError as e:
                raise AppErrorException(AppError(code=ErrorCode.E2021_INVALID_JSON,
                    message=f"Invalid JSON in request body: {e}"))
        case _:
            raise ValueError(f"Unknown schema slot: {slot}")


async def validate_request(declared: RouteSchema, request: Request) -> dict[str, Any]:
    """Parse every declared slot; the first invalid slot raises ValidationError."""
    validated: dict[str, Any] = {}
    for slot, schema in declared.declared():
        with slot_context(slot):
            match schema.safe_parse(await collect_raw(request, slot)):
                case Ok(value):
                    validated[slot] = value
                    log.debug("request_slot_validated",
                        fields=sorted(value) if isinstance(value, dict) else None)
                case Err(error):
                    log.info("request_validation_failed", errors=error.summary(), error_count=len(error.details))
                    raise ValidationError(message=f"Invalid {slot}", details=error.details, mode=error.mode)
    return validated


# ============================================================================
# FastAPI Integration
# ============================================================================

class CoercingRoute(APIRoute):
    """APIRoute that applies declared route schemas.

    The registration hook runs when the route is constructed, so a schema
    with no textual form fails while the router is being assembled, never
    during a request.
    """

    hook: ClassVar[QueryCoercionHook] = QueryCoercionHook(settings.COERCION_SLOTS)

    def __init__(self, path: str, endpoint: Callable[..., Any], **kwargs: Any) -> None:
        declared = get_route_schema(endpoint)
        self.route_schema = self.hook.on_route(declared, route_path=path) if declared is not None else None
        super().__init__(path, endpoint, **kwargs)

    def get_route_handler(self) -> Callable[[Request], Any]:
        handler = super().get_route_handler()
        declared = self.route_schema
        if declared is None:
            return handler
        route_path = self.path

        async def validating_handler(request: Request) -> Response:
            with route_context(route_path):
                request.state.validated = await validate_request(declared, request)
            return await handler(request)
        return validating_handler


def coercing_route_class(slots: Iterable[str]) -> type[CoercingRoute]:
    """Route class rewriting a custom set of slots.

    Usage:
        router = APIRouter(route_class=coercing_route_class(["query", "headers"]))
    """
    return type("CoercingRoute", (CoercingRoute,), {"hook": QueryCoercionHook(slots)})


def Validated(slot: str) -> Any:
    """FastAPI dependency yielding the parsed value of one request part.

    Usage:
        async def handler(query: dict = Validated("query")): ...
    """
    _check_slots((slot,))

    def dependency(request: Request) -> Any:
        return getattr(request.state, "validated", {}).get(slot)
    return Depends(dependency)
