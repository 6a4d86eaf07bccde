from __future__ import annotations

from typing import Iterable, Union

from routelist.domain.models import QuerySpec, RouteRecord, SortKey
from routelist.errors import InvalidSortKeyError


def _coerce_sort_key(key: Union[SortKey, str]) -> SortKey:
    if isinstance(key, SortKey):
        return key
    try:
        return SortKey(key)
    except ValueError as exc:
        raise InvalidSortKeyError(key) from exc


class RouteQueryEngine:
    """
    records -> filter -> stable sort -> optional reverse.

    Filters are substring tests and are ANDed together; empty filter values
    impose no constraint.
    """

    def matches(self, record: RouteRecord, spec: QuerySpec) -> bool:
        if spec.method_filter and spec.method_filter.upper() not in record.method:
            return False
        if spec.name_filter and spec.name_filter not in record.name:
            return False
        if spec.path_filter and spec.path_filter not in record.uri:
            return False
        return True

    def filter(self, records: Iterable[RouteRecord], spec: QuerySpec) -> list[RouteRecord]:
        return [r for r in records if self.matches(r, spec)]

    def sort(self, records: Iterable[RouteRecord], key: Union[SortKey, str]) -> list[RouteRecord]:
        sort_key = _coerce_sort_key(key)
        # sorted() is stable: ties keep registry order
        return sorted(records, key=lambda r: r.field_text(sort_key))

    def run(self, records: Iterable[RouteRecord], spec: QuerySpec) -> list[RouteRecord]:
        out = self.sort(self.filter(records, spec), spec.sort_key)
        if spec.reverse:
            out.reverse()
        return out
