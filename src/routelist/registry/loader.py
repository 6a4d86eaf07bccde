from __future__ import annotations

import importlib
import json
import logging
import sys
from pathlib import Path
from typing import Any, Mapping, Optional

from starlette.routing import BaseRoute

from routelist.errors import RegistryLoadError
from routelist.registry.asgi import routes_from_asgi
from routelist.registry.raw import MappingRoute

logger = logging.getLogger("routelist.registry")


def _import_target(target: str, app_dir: Optional[Path]) -> Any:
    module_name, _, attr_path = target.partition(":")
    if not module_name or not attr_path:
        raise RegistryLoadError(
            f"expected 'module:attribute' or a .json file, got {target!r}"
        )

    added: Optional[str] = None
    if app_dir is not None:
        app_dir_s = str(app_dir.expanduser().resolve())
        if app_dir_s not in sys.path:
            sys.path.insert(0, app_dir_s)
            added = app_dir_s

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise RegistryLoadError(f"could not import module {module_name!r}: {exc}") from exc
    finally:
        if added is not None and added in sys.path:
            sys.path.remove(added)

    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise RegistryLoadError(
                f"attribute {attr_path!r} not found in module {module_name!r}"
            ) from exc
    return obj


def _routes_from_object(obj: Any) -> list[Any]:
    routes = getattr(obj, "routes", None)
    if routes is None:
        # plain iterable of route mappings / RawRoutes
        if isinstance(obj, Mapping):
            return [MappingRoute(r) if isinstance(r, Mapping) else r for r in obj.values()]
        try:
            return [MappingRoute(r) if isinstance(r, Mapping) else r for r in obj]
        except TypeError as exc:
            raise RegistryLoadError(
                f"{type(obj).__name__} object exposes no routes"
            ) from exc

    if callable(routes):
        routes = routes()
    routes = list(routes.values() if isinstance(routes, Mapping) else routes)
    if routes and all(isinstance(r, BaseRoute) for r in routes):
        return routes_from_asgi(obj)
    return [MappingRoute(r) if isinstance(r, Mapping) else r for r in routes]


def load_json_routes(path: Path) -> list[MappingRoute]:
    """
    Read a route dump: either a list of route mappings or a mapping of
    key -> route mapping (e.g. "GET/users" -> {...}).
    """
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise RegistryLoadError(f"could not read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise RegistryLoadError(f"invalid JSON in {path}: {exc}") from exc

    if isinstance(payload, Mapping):
        payload = list(payload.values())
    if not isinstance(payload, list) or not all(isinstance(r, Mapping) for r in payload):
        raise RegistryLoadError(f"{path} must hold a list or mapping of route objects")
    return [MappingRoute(r) for r in payload]


def load_registry(target: str, app_dir: Optional[Path] = None) -> list[Any]:
    """
    Resolve a registry target into a list of RawRoutes.

    target is either a path to a .json route dump or "module:attribute"
    where the attribute is an ASGI app/router, an object with a `routes`
    attribute (or method), or an iterable of route mappings.
    """
    if Path(target).suffix.lower() == ".json":
        path = Path(target).expanduser()
        if app_dir is not None and not path.is_absolute():
            path = app_dir / path
        routes: list[Any] = load_json_routes(path)
    else:
        routes = _routes_from_object(_import_target(target, app_dir))

    logger.debug("loaded %d routes from %s", len(routes), target)
    return routes
