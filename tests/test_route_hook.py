import pytest
from fastapi import APIRouter

from core.validation import (
    CoercingRoute,
    ObjectSchema,
    QueryCoercionError,
    QueryCoercionHook,
    RouteSchema,
    Validated,
    builders as s,
    coercing_route_class,
    get_route_schema,
    is_processed,
    route_schema,
)


def query_schema() -> ObjectSchema:
    return s.object_({"page": s.number(), "tags": s.array(s.string())})


class TestHook:
    def test_rewrites_query_object(self):
        original = query_schema()
        declared = RouteSchema(query=original)
        result = QueryCoercionHook().on_route(declared)
        assert result is not declared
        assert result.query is not original
        assert declared.query is original
        assert result.query.parse({"page": "2", "tags": "a"}) == {"page": 2, "tags": ["a"]}

    def test_marks_new_instance_only(self):
        original = query_schema()
        result = QueryCoercionHook().on_route(RouteSchema(query=original))
        assert is_processed(result.query)
        assert not is_processed(original)

    def test_processed_schema_is_skipped(self):
        hook = QueryCoercionHook()
        first = hook.on_route(RouteSchema(query=query_schema()))
        assert hook.on_route(first) is first

    def test_non_object_slot_is_left_alone(self):
        declared = RouteSchema(query=s.string())
        assert QueryCoercionHook().on_route(declared) is declared

    def test_only_configured_slots_are_rewritten(self):
        headers = s.object_({"x-limit": s.number()})
        declared = RouteSchema(query=query_schema(), headers=headers)
        assert QueryCoercionHook().on_route(declared).headers is headers

        result = QueryCoercionHook(slots=("query", "headers")).on_route(declared)
        assert result.headers is not headers
        assert result.headers.parse({"x-limit": "5"}) == {"x-limit": 5}

    def test_unknown_slot(self):
        with pytest.raises(ValueError):
            QueryCoercionHook(slots=("cookies",))
        with pytest.raises(ValueError):
            coercing_route_class(["cookies"])
        with pytest.raises(ValueError):
            Validated("cookies")

    def test_unsupported_field_error_text(self):
        declared = RouteSchema(query=s.object_({"page": s.number(), "filters": s.record(s.string())}))
        with pytest.raises(QueryCoercionError) as exc_info:
            QueryCoercionHook().on_route(declared)
        assert str(exc_info.value) == 'Unsupported schema type for query coercion: RecordSchema at "filters"'


class TestRegistration:
    def test_route_schema_decorator_attaches_schema(self):
        schema = query_schema()

        @route_schema(query=schema)
        async def endpoint():
            return {}

        assert get_route_schema(endpoint) == RouteSchema(query=schema)

    def test_route_holds_rewritten_schema(self):
        router = APIRouter(route_class=CoercingRoute)
        original = query_schema()

        @router.get("/items")
        @route_schema(query=original)
        async def items(query: dict = Validated("query")):
            return query

        route = router.routes[0]
        assert isinstance(route, CoercingRoute)
        assert route.route_schema.query is not original
        assert is_processed(route.route_schema.query)
        assert get_route_schema(items).query is original

    def test_routes_without_schema_are_plain(self):
        router = APIRouter(route_class=CoercingRoute)

        @router.get("/plain")
        async def plain():
            return {"ok": True}

        assert router.routes[0].route_schema is None

    def test_unsupported_field_fails_at_registration(self):
        router = APIRouter(route_class=CoercingRoute)

        async def endpoint(query: dict = Validated("query")):
            return query

        decorated = route_schema(query=s.object_({"meta": s.record(s.string())}))(endpoint)
        with pytest.raises(QueryCoercionError) as exc_info:
            router.get("/bad")(decorated)
        assert str(exc_info.value) == 'Unsupported schema type for query coercion: RecordSchema at "meta"'
        assert router.routes == []

    def test_custom_slot_route_class(self):
        route_class = coercing_route_class(["headers"])
        assert issubclass(route_class, CoercingRoute)
        assert route_class.hook.slots == ("headers",)
        assert CoercingRoute.hook.slots == ("query",)
