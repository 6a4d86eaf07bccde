from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable


@runtime_checkable
class RawRoute(Protocol):
    """
    What the record builder needs from a host registry entry:
      - method: verb token or a collection of tokens
      - uri: path pattern
      - attribute(key): lookup into the route's action/attribute bag
        ("as", "uses", "middleware", ...)
    """

    @property
    def method(self) -> Any: ...

    @property
    def uri(self) -> Any: ...

    def attribute(self, key: str, default: Any = None) -> Any: ...


class MappingRoute:
    """RawRoute over a plain mapping: {"method": ..., "uri": ..., "action": {...}}."""

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any]) -> None:
        self._data = data

    @property
    def method(self) -> Any:
        if "method" in self._data:
            return self._data["method"]
        return self._data.get("methods")

    @property
    def uri(self) -> Any:
        return self._data.get("uri")

    def attribute(self, key: str, default: Any = None) -> Any:
        action = self._data.get("action") or {}
        if not isinstance(action, Mapping):
            # bare "Controller@method" action
            action = {"uses": action}
        return action.get(key, default)

    def __repr__(self) -> str:
        return f"MappingRoute({dict(self._data)!r})"


def as_raw_route(route: Any) -> RawRoute:
    if isinstance(route, Mapping):
        return MappingRoute(route)
    return route
