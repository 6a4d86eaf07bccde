from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

HEADERS = ("Method", "URI", "Name", "Action", "Middleware")


class SortKey(str, Enum):
    METHOD = "method"
    URI = "uri"
    NAME = "name"
    ACTION = "action"
    MIDDLEWARE = "middleware"


@dataclass(frozen=True)
class RouteRecord:
    """
    Flat, display-ready view of one registered route.

    Built fresh on every run from exactly one raw route; never persisted.
    """

    method: str                         # GET, POST, GET|HEAD, ...
    uri: str                            # /users/{id}
    name: str = ""                      # declared route name
    action: Optional[str] = None        # Controller@method, module.func, Closure
    middleware: tuple[str, ...] = ()    # declaration order, not de-duped

    @property
    def middleware_label(self) -> str:
        return ",".join(self.middleware)

    def field_text(self, key: SortKey) -> str:
        if key is SortKey.MIDDLEWARE:
            return self.middleware_label
        value = getattr(self, key.value)
        return "" if value is None else str(value)

    def as_row(self) -> tuple[str, str, str, str, str]:
        return (self.method, self.uri, self.name, self.action or "", self.middleware_label)

    def as_dict(self) -> dict[str, object]:
        return {
            "method": self.method,
            "uri": self.uri,
            "name": self.name,
            "action": self.action,
            "middleware": list(self.middleware),
        }


class QuerySpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    method_filter: Optional[str] = None
    name_filter: Optional[str] = None
    path_filter: Optional[str] = None
    sort_key: SortKey = SortKey.URI
    reverse: bool = False
