from __future__ import annotations


class RouteListError(Exception):
    """Base class for every error raised by routelist."""


class EmptyRegistryError(RouteListError):
    """The registry holds no routes at all."""

    def __init__(self, message: str = "Your application doesn't have any routes.") -> None:
        super().__init__(message)


class MalformedRouteError(RouteListError):
    """A raw route lacks a usable method, uri or attribute lookup."""

    def __init__(self, field: str, route: object) -> None:
        self.field = field
        self.route = route
        super().__init__(f"route has no usable {field!r}: {route!r}")


class InvalidSortKeyError(RouteListError, ValueError):
    def __init__(self, key: object) -> None:
        self.key = key
        super().__init__(f"unknown sort key: {key!r}")


class RegistryLoadError(RouteListError):
    """The route registry could not be imported or read."""
