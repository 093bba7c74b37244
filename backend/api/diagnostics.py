"""Diagnostics API Routes

Lets clients check how query strings are coerced against a live server.
"""
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel

from core.logging import api_logger
from core.validation import CoercingRoute, Validated, builders as s, route_schema
from engines.dispatch import REJECTED_KINDS, SUPPORTED_KINDS

log = api_logger()

router = APIRouter(route_class=CoercingRoute)


# === Schemas ===

EchoQuery = s.object_({
    "flag": s.boolean().optional(),
    "count": s.number().int_().optional(),
    "big": s.bigint().optional(),
    "since": s.date().optional(),
    "tags": s.array(s.string()).optional(),
    "ids": s.set_(s.number()).optional(),
    "cursor": s.string().nullable().optional(),
    "mode": s.enum_(["strict", "loose"]).default("loose"),
})


# === Response Models ===

class EchoResponse(BaseModel):
    query: dict[str, Any]
    types: dict[str, str]


class KindsResponse(BaseModel):
    supported: list[str]
    rejected: list[str]


# === Routes ===

@router.get("/echo", response_model=EchoResponse)
@route_schema(query=EchoQuery)
async def echo_query(query: dict = Validated("query")):
    """Echo the coerced query with the Python type of each value."""
    types = {key: type(value).__name__ for key, value in query.items()}
    log.debug("query_echoed", fields=list(query))
    # bigints beyond float range survive JSON as text
    if "big" in query:
        query = {**query, "big": str(query["big"])}
    return EchoResponse(query=query, types=types)


@router.get("/kinds", response_model=KindsResponse)
async def list_kinds():
    """Schema kinds that can or cannot be coerced from text."""
    return KindsResponse(
        supported=sorted(k.value for k in SUPPORTED_KINDS),
        rejected=sorted(k.value for k in REJECTED_KINDS),
    )
