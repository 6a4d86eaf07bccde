from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional, Sequence

from fastapi.routing import APIRoute
from starlette.routing import Host, Mount, Route, WebSocketRoute

logger = logging.getLogger("routelist.registry")

_ENDPOINT_METHODS = ("get", "head", "post", "put", "patch", "delete", "options")


@dataclass(frozen=True)
class AsgiRoute:
    """RawRoute view of a Starlette/FastAPI HTTP route."""

    method: tuple[str, ...]
    uri: str
    attributes: dict[str, Any] = field(default_factory=dict)

    def attribute(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)


def _dependency_name(dep: Any) -> Optional[str]:
    fn = getattr(dep, "dependency", None)
    if fn is None:
        return None
    return getattr(fn, "__name__", None) or type(fn).__name__


def _join_path(prefix: str, path: str) -> str:
    if not prefix:
        return path
    return prefix.rstrip("/") + "/" + path.lstrip("/") if path else prefix


def _route_methods(route: Any) -> tuple[str, ...]:
    methods = getattr(route, "methods", None)
    if methods is None:
        # class-based endpoint (HTTPEndpoint): one method per handler it defines
        endpoint = getattr(route, "endpoint", None)
        methods = [m for m in _ENDPOINT_METHODS if hasattr(endpoint, m)]
    return tuple(sorted(m.upper() for m in methods))


def _http_route(route: Any, prefix: str, dependencies: Sequence[Any]) -> AsgiRoute:
    middleware = [name for name in (_dependency_name(d) for d in dependencies) if name]
    attrs: dict[str, Any] = {"middleware": middleware}
    name = getattr(route, "name", None)
    if name:
        attrs["as"] = name
    endpoint = getattr(route, "endpoint", None)
    if endpoint is not None:
        attrs["uses"] = endpoint

    path = getattr(route, "path", None)
    return AsgiRoute(
        method=_route_methods(route),
        uri=_join_path(prefix, path) if path is not None else path,
        attributes=attrs,
    )


def _walk(routes: Iterable[Any], prefix: str, dependencies: Sequence[Any]) -> Iterator[AsgiRoute]:
    for r in routes:
        if isinstance(r, APIRoute):
            yield _http_route(r, prefix, [*dependencies, *(r.dependencies or [])])
        elif isinstance(r, Route):
            yield _http_route(r, prefix, dependencies)
        elif isinstance(r, WebSocketRoute):
            logger.debug("skipping websocket route %s", r.path)
        elif isinstance(r, (Mount, Host)):
            sub_prefix = _join_path(prefix, r.path) if isinstance(r, Mount) else prefix
            if r.routes:
                yield from _walk(r.routes, sub_prefix, dependencies)
            else:
                logger.debug("mount %s has no route table", sub_prefix or "/")
        elif hasattr(r, "original_router") and hasattr(r, "include_context"):
            # FastAPI >= 0.143 keeps include_router() routers unflattened
            ctx = r.include_context
            yield from _walk(
                r.original_router.routes,
                prefix + (ctx.prefix or ""),
                [*dependencies, *(ctx.dependencies or [])],
            )
        elif getattr(r, "methods", None) is not None and hasattr(r, "path"):
            yield _http_route(r, prefix, [*dependencies, *(getattr(r, "dependencies", None) or [])])
        else:
            logger.warning("skipping unrecognized route entry %r", r)


def routes_from_asgi(app: Any) -> list[AsgiRoute]:
    """
    Flatten the route table of a FastAPI/Starlette app (or router).

    Mounted sub-applications and included routers are walked with their
    prefix; included routers also contribute their dependencies.
    Websocket routes carry no HTTP method and are skipped.
    """
    routes = list(_walk(getattr(app, "routes", None) or [], "", []))
    logger.debug("collected %d HTTP routes from %s", len(routes), type(app).__name__)
    return routes
