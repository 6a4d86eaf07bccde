import json
import sys
import textwrap
from pathlib import Path

import pytest

from routelist.errors import RegistryLoadError
from routelist.records.builder import RouteRecordBuilder
from routelist.registry.loader import load_registry


def write(p: Path, s: str) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(textwrap.dedent(s), encoding="utf-8")


def test_load_json_list(tmp_path: Path):
    dump = tmp_path / "routes.json"
    dump.write_text(
        json.dumps([{"method": "GET", "uri": "/a", "action": {"as": "a", "middleware": ["web"]}}]),
        encoding="utf-8",
    )
    routes = load_registry(str(dump))
    rec = RouteRecordBuilder().build(routes[0])
    assert (rec.method, rec.uri, rec.name, rec.middleware) == ("GET", "/a", "a", ("web",))


def test_load_json_keyed_mapping(tmp_path: Path):
    dump = tmp_path / "routes.json"
    dump.write_text(
        json.dumps({"GET/a": {"method": "GET", "uri": "/a"}, "POST/b": {"method": "POST", "uri": "/b"}}),
        encoding="utf-8",
    )
    routes = load_registry(str(dump))
    assert [r.uri for r in routes] == ["/a", "/b"]


def test_load_json_relative_to_app_dir(tmp_path: Path):
    (tmp_path / "routes.json").write_text("[]", encoding="utf-8")
    assert load_registry("routes.json", app_dir=tmp_path) == []


def test_load_json_errors(tmp_path: Path):
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(RegistryLoadError):
        load_registry(str(bad))

    wrong = tmp_path / "wrong.json"
    wrong.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(RegistryLoadError):
        load_registry(str(wrong))

    with pytest.raises(RegistryLoadError):
        load_registry(str(tmp_path / "missing.json"))


def test_load_import_string_fastapi_app(tmp_path: Path):
    write(
        tmp_path / "loader_fixture_fastapi.py",
        """
        from fastapi import FastAPI

        app = FastAPI(openapi_url=None)

        @app.get("/health", name="health")
        def health():
            return {"ok": True}
        """,
    )
    routes = load_registry("loader_fixture_fastapi:app", app_dir=tmp_path)
    rec = RouteRecordBuilder().build(routes[0])
    assert (rec.method, rec.uri, rec.name) == ("GET", "/health", "health")
    assert rec.action == "loader_fixture_fastapi.health"


def test_load_import_string_route_list_and_routes_method(tmp_path: Path):
    write(
        tmp_path / "loader_fixture_plain.py",
        """
        ROUTES = [{"method": "GET", "uri": "/a"}, {"method": "PUT", "uri": "/b"}]

        class Registry:
            def routes(self):
                return ROUTES

        registry = Registry()
        """,
    )
    plain = load_registry("loader_fixture_plain:ROUTES", app_dir=tmp_path)
    assert [r.uri for r in plain] == ["/a", "/b"]

    via_method = load_registry("loader_fixture_plain:registry", app_dir=tmp_path)
    assert [r.method for r in via_method] == ["GET", "PUT"]


def test_load_import_string_errors(tmp_path: Path):
    write(tmp_path / "loader_fixture_empty.py", "value = 3\n")

    with pytest.raises(RegistryLoadError):
        load_registry("no_colon_here")
    with pytest.raises(RegistryLoadError):
        load_registry("loader_fixture_does_not_exist:app", app_dir=tmp_path)
    with pytest.raises(RegistryLoadError):
        load_registry("loader_fixture_empty:app", app_dir=tmp_path)
    with pytest.raises(RegistryLoadError):
        load_registry("loader_fixture_empty:value", app_dir=tmp_path)


def test_load_json_suffix_is_case_insensitive(tmp_path: Path):
    dump = tmp_path / "ROUTES.JSON"
    dump.write_text(json.dumps([{"method": "GET", "uri": "/a"}]), encoding="utf-8")
    assert [r.uri for r in load_registry(str(dump))] == ["/a"]


def test_load_import_string_restores_sys_path(tmp_path: Path):
    write(tmp_path / "loader_fixture_syspath.py", "ROUTES = [{'method': 'GET', 'uri': '/a'}]\n")
    before = list(sys.path)

    load_registry("loader_fixture_syspath:ROUTES", app_dir=tmp_path)
    assert sys.path == before

    with pytest.raises(RegistryLoadError):
        load_registry("loader_fixture_syspath_missing:ROUTES", app_dir=tmp_path)
    assert sys.path == before


def test_load_import_string_app_built_from_routers(tmp_path: Path):
    write(
        tmp_path / "loader_fixture_routers.py",
        """
        from fastapi import APIRouter, FastAPI

        api = APIRouter(prefix="/api")

        @api.get("/users", name="users.index")
        def list_users():
            return []

        app = FastAPI(openapi_url=None)
        app.include_router(api)
        """,
    )
    routes = load_registry("loader_fixture_routers:app", app_dir=tmp_path)
    rec = RouteRecordBuilder().build(routes[0])
    assert (rec.method, rec.uri, rec.name) == ("GET", "/api/users", "users.index")
