from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Protocol

from routelist.domain.models import RouteRecord
from routelist.errors import MalformedRouteError
from routelist.registry.raw import as_raw_route


class MiddlewareController(Protocol):
    def get_middleware(self) -> Mapping[str, Mapping[str, Any]]: ...


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def method_excluded_by_options(method: str, options: Mapping[str, Any]) -> bool:
    """True when an {"only": [...], "except": [...]} entry does not apply to method."""
    only = _as_list(options.get("only"))
    excepted = _as_list(options.get("except"))
    return (bool(only) and method not in only) or (bool(excepted) and method in excepted)


def _method_token(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value.upper()
    if not isinstance(value, (list, tuple, set, frozenset)):
        return None
    if not all(isinstance(m, str) and m for m in value):
        return None
    if isinstance(value, (set, frozenset)):
        # no declaration order to keep
        value = sorted(value)
    return "|".join(m.upper() for m in value)


def _handler_name(uses: Any) -> Optional[str]:
    if uses is None or isinstance(uses, str):
        return uses
    name = getattr(uses, "__qualname__", None) or getattr(uses, "__name__", None)
    if name is None:
        return type(uses).__name__
    if name == "<lambda>" or name.endswith(".<lambda>"):
        return "Closure"
    module = getattr(uses, "__module__", None)
    return f"{module}.{name}" if module else name


def _flatten(value: Any) -> Iterable[str]:
    if value is None:
        return
    if isinstance(value, str):
        yield value
        return
    for item in value:
        if isinstance(item, (list, tuple)):
            yield from _flatten(item)
        elif item is not None:
            yield str(item)


class RouteRecordBuilder:
    """
    RawRoute -> RouteRecord.

    middleware_aliases is the router's middleware name map
    (short alias -> registered identifier); it is only consulted by
    controller_middleware().
    """

    def __init__(self, middleware_aliases: Optional[Mapping[str, str]] = None) -> None:
        self.middleware_aliases: Mapping[str, str] = dict(middleware_aliases or {})

    def build(self, route: Any) -> RouteRecord:
        raw = as_raw_route(route)

        try:
            method = raw.method
            uri = raw.uri
        except AttributeError as exc:
            raise MalformedRouteError(exc.name or "method/uri", route) from exc

        token = _method_token(method) if method else None
        if not token:
            raise MalformedRouteError("method", route)
        if uri is None:
            raise MalformedRouteError("uri", route)
        if not callable(getattr(raw, "attribute", None)):
            raise MalformedRouteError("attribute", route)

        name = raw.attribute("as", "")
        return RouteRecord(
            method=token,
            uri=str(uri),
            name="" if name is None else str(name),
            action=_handler_name(raw.attribute("uses")),
            middleware=tuple(_flatten(raw.attribute("middleware"))),
        )

    def build_all(self, routes: Iterable[Any]) -> list[RouteRecord]:
        return [self.build(r) for r in routes]

    def controller_middleware(self, controller: MiddlewareController, method: str) -> list[str]:
        """
        Middleware a controller declares for one HTTP method, resolved
        through the alias map (unknown names are kept as-is).
        """
        results: list[str] = []
        for name, options in controller.get_middleware().items():
            if not method_excluded_by_options(method, options or {}):
                results.append(self.middleware_aliases.get(name, name))
        return results
