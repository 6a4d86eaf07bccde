from __future__ import annotations

import json
from typing import Iterable

from rich.table import Table
from rich.text import Text

from routelist.domain.models import HEADERS, RouteRecord


def build_table(records: Iterable[RouteRecord]) -> Table:
    table = Table(show_header=True, header_style="bold")
    for header in HEADERS:
        table.add_column(header, no_wrap=header in ("Method", "URI"))

    for r in records:
        # route strings are shown verbatim, never parsed as markup
        table.add_row(*(Text(v) for v in r.as_row()))
    return table


def render_json(records: Iterable[RouteRecord]) -> str:
    return json.dumps([r.as_dict() for r in records], indent=2)
