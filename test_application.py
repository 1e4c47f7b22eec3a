"""
Tests for the application lifecycle, component lookups and the ASGI surface
"""

import pytest
from fastapi.testclient import TestClient
from structlog.testing import capture_logs

from base_app import BaseApp
from base_app.model.dbic import DBIC, ResultSet
from deep_app import DeepApp
from ext_app import ExtApp
from virtualcomponents import (
    Application,
    ApplicationSetupError,
    ComponentLoadError,
    Model,
)
from virtualcomponents.core.component_base import ComponentKind
from virtualcomponents.core.component_registry import ComponentRegistry
from virtualcomponents.core.utils import merge_hashes, render_table


class TestApplicationSetup:
    """Lifecycle of a plain application."""

    def test_registers_components_and_inner_components(self, make_app):
        app = make_app(BaseApp).setup()
        assert sorted(app.registry().names()) == [
            "base_app.controller.root",
            "base_app.model.dbic",
            "base_app.model.dbic.ResultSet",
            "base_app.view.tt",
        ]
        assert type(app.model("dbic")) is DBIC
        assert type(app.component("model.dbic.ResultSet")) is ResultSet

    def test_modules_without_components_are_skipped(self, make_app):
        app = make_app(BaseApp).setup()
        assert "base_app.model.SUPER" not in app.registry()

    def test_setup_twice(self, make_app):
        app = make_app(BaseApp).setup()
        with pytest.raises(ApplicationSetupError):
            app.setup()

    def test_registry_is_per_class(self, make_app):
        base = make_app(BaseApp).setup()
        ext = make_app(ExtApp).setup()
        assert base.registry() is not ext.registry()
        assert "ext_app.model.dbic" not in base.registry()

    def test_namespace_defaults_to_module_and_is_not_inherited(self):
        assert BaseApp.app_namespace() == "base_app"
        assert ExtApp.app_namespace() == "ext_app"
        assert DeepApp.app_namespace() == "deep_app"

    def test_config_merges_along_hierarchy(self):
        config = ExtApp.get_config()
        assert config["name"] == "Extended"
        assert config["model.dbic"] == {"dsn": "sqlite:///base.db", "pool_size": 5}
        assert BaseApp.get_config()["model.dbic"]["pool_size"] == 1

    def test_debug_flag(self, make_app):
        assert make_app(BaseApp, debug=True).is_debug()
        assert not make_app(BaseApp, debug=False).is_debug()

    def test_failed_instantiation(self, make_app):
        class Exploding(Model):
            def __init__(self, app, name, config):
                raise ValueError("bad config")

        app = make_app(BaseApp)
        with pytest.raises(ComponentLoadError) as exc_info:
            app.setup_component("base_app.model.exploding", Exploding)
        assert "base_app.model.exploding" in str(exc_info.value)
        assert "bad config" in str(exc_info.value)

    def test_non_component_classes_register_as_themselves(self, make_app):
        class Plain:
            pass

        app = make_app(BaseApp)
        assert app.setup_component("base_app.plain", Plain) is Plain


class TestLookups:
    """Component accessors by kind."""

    def test_kind_listings(self, make_app):
        app = make_app(ExtApp).setup()
        assert app.controllers() == ["root"]
        assert app.models() == ["dbic", "plugin.cache", "xml.feed"]
        assert app.views() == ["tt"]

    def test_lookup_by_relative_and_full_name(self, make_app):
        app = make_app(ExtApp).setup()
        assert app.component("model.dbic") is app.component("ext_app.model.dbic")
        assert app.model("missing") is None
        assert app.view("dbic") is None

    def test_registry_stats(self, make_app):
        app = make_app(ExtApp).setup()
        stats = app.registry().get_stats()
        assert stats.total_components == 5
        assert stats.kinds == {"controller": 1, "model": 3, "view": 1}
        assert stats.virtual_components == ["ext_app.model.dbic", "ext_app.view.tt"]
        assert stats.last_setup_time is not None


class TestComponentRegistry:
    """Registry bookkeeping."""

    def test_register_and_lookup(self):
        registry = ComponentRegistry("Test")
        registry.register("app.model.thing", Model)
        assert "app.model.thing" in registry
        assert len(registry) == 1
        assert registry.by_kind(ComponentKind.MODEL) == {"app.model.thing": Model}
        assert registry.by_kind(ComponentKind.VIEW) == {}
        assert registry.get("app.model.other") is None

    def test_register_replaces(self):
        registry = ComponentRegistry("Test")
        registry.register("app.model.thing", Model)
        registry.register("app.model.thing", DBIC)
        assert registry["app.model.thing"] is DBIC
        assert registry.names() == ["app.model.thing"]


class TestAsgi:
    """Controllers are served through FastAPI."""

    def test_requires_setup(self, make_app):
        with pytest.raises(ApplicationSetupError):
            make_app(ExtApp).create_asgi_app()

    def test_inherited_and_local_actions(self, make_app):
        app = make_app(ExtApp).setup()
        client = TestClient(app.create_asgi_app())

        response = client.get("/hello")
        assert response.status_code == 200
        assert response.json() == {
            "greeting": "hello from ExtApp",
            "component": "ext_app.controller.root",
        }
        assert "X-Request-ID" in response.headers

        assert client.get("/new_action").json()["action"] == "new"
        assert client.get("/about").json() == {"name": "Extended"}

    def test_request_logs_name_the_application(self, make_app):
        app = make_app(ExtApp).setup()
        client = TestClient(app.create_asgi_app())
        with capture_logs() as logs:
            response = client.get("/hello")
        completed = [entry for entry in logs if entry["event"] == "Request completed"]
        assert len(completed) == 1
        assert completed[0]["application"] == "ExtApp"
        assert completed[0]["namespace"] == "ext_app"
        assert completed[0]["request_id"] == response.headers["X-Request-ID"]

    def test_virtual_controller_serves_ancestor_actions(self, make_app):
        app = make_app(DeepApp).setup()
        client = TestClient(app.create_asgi_app())
        assert client.get("/new_action").json() == {
            "action": "new",
            "component": "deep_app.controller.root",
        }

    def test_health_and_component_listing(self, make_app):
        app = make_app(ExtApp).setup()
        client = TestClient(app.create_asgi_app())

        health = client.get("/_health/").json()
        assert health["status"] == "healthy"
        assert health["namespace"] == "ext_app"

        listing = {item["name"]: item for item in client.get("/_health/components").json()}
        assert listing["ext_app.model.dbic"]["virtual"] is True
        assert listing["ext_app.model.dbic"]["base"] == "base_app.model.dbic.DBIC"
        assert listing["ext_app.controller.root"]["virtual"] is False
        assert listing["ext_app.controller.root"]["kind"] == "controller"


def test_merge_hashes_is_recursive_and_pure():
    left = {"a": {"x": 1, "y": 2}, "b": 1}
    right = {"a": {"y": 3}, "c": 4}
    assert merge_hashes(left, right) == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}
    assert left == {"a": {"x": 1, "y": 2}, "b": 1}


def test_render_table_wraps_long_names():
    name = "some_long_application.model.component_name"
    table = render_table([name], 20)
    assert "\u2026" not in table
    assert "".join(ch for ch in table if ch.isalnum() or ch in "._") == name
    assert all(len(line) <= 20 for line in table.splitlines())


def test_application_base_has_no_hierarchy():
    assert Application.application_hierarchy() == []
