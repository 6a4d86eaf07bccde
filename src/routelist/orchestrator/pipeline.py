from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from routelist.domain.models import QuerySpec, RouteRecord
from routelist.errors import EmptyRegistryError
from routelist.query.engine import RouteQueryEngine
from routelist.records.builder import RouteRecordBuilder

logger = logging.getLogger("routelist.pipeline")


@dataclass(frozen=True)
class RouteListResult:
    records: list[RouteRecord]
    total: int  # routes registered before filtering


def run_route_list(
    routes: Iterable[Any],
    spec: QuerySpec,
    builder: Optional[RouteRecordBuilder] = None,
    engine: Optional[RouteQueryEngine] = None,
) -> RouteListResult:
    """
    registry -> records -> filter/sort/reverse.

    An empty registry raises EmptyRegistryError before anything is built,
    so callers can tell "no routes at all" apart from "nothing matched".
    """
    raw_routes = list(routes)
    if not raw_routes:
        raise EmptyRegistryError()

    builder = builder or RouteRecordBuilder()
    engine = engine or RouteQueryEngine()

    records = builder.build_all(raw_routes)
    result = engine.run(records, spec)
    logger.debug(
        "%d of %d routes kept (sort=%s, reverse=%s)",
        len(result),
        len(records),
        spec.sort_key.value,
        spec.reverse,
    )
    return RouteListResult(records=result, total=len(records))
