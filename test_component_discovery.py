"""
Tests for component module discovery
"""

import re

import pytest

from base_app import BaseApp
from ext_app import ExtApp
from virtualcomponents import Application
from virtualcomponents.core.component_discovery import ModuleLocator
from virtualcomponents.core.exceptions import ConfigurationError


class TestModuleLocator:
    """ModuleLocator enumerates modules without importing them."""

    def test_lists_modules_below_each_prefix(self):
        locator = ModuleLocator(["base_app.controller", "base_app.view"])
        assert locator.plugins() == ["base_app.controller.root", "base_app.view.tt"]

    def test_prefixes_are_not_listed(self):
        names = ModuleLocator(["base_app.model"]).plugins()
        assert "base_app.model" not in names
        assert "base_app.model.dbic" in names

    def test_nested_packages_are_walked(self):
        names = ModuleLocator(["ext_app.model"]).plugins()
        assert names == ["ext_app.model.xml", "ext_app.model.xml.feed"]

    def test_missing_prefixes_are_ignored(self):
        locator = ModuleLocator(["base_app.c", "no_such_app.model", "base_app.view"])
        assert locator.plugins() == ["base_app.view.tt"]

    def test_plain_module_prefix_has_no_children(self):
        assert ModuleLocator(["base_app.view.tt"]).plugins() == []

    def test_duplicate_prefixes_are_listed_once(self):
        names = ModuleLocator(["base_app.view", "base_app.view"]).plugins()
        assert names == ["base_app.view.tt"]

    def test_except_accepts_names_and_regexes(self):
        by_name = ModuleLocator(["base_app.model"], **{"except": "base_app.model.SUPER"}).plugins()
        assert by_name == ["base_app.model.dbic"]

        by_regex = ModuleLocator(["base_app.model"], **{"except": re.compile(r".*\.dbic$")}).plugins()
        assert by_regex == ["base_app.model.SUPER"]

    def test_only_keeps_listed_names(self):
        names = ModuleLocator(["base_app.model", "base_app.view"], only=["base_app.view.tt"]).plugins()
        assert names == ["base_app.view.tt"]

    def test_max_depth_stops_recursion(self):
        names = ModuleLocator(["ext_app.model"], max_depth=1).plugins()
        assert names == ["ext_app.model.xml"]

    def test_invalid_max_depth(self):
        with pytest.raises(ConfigurationError):
            ModuleLocator(["ext_app.model"], max_depth=0)

    def test_unknown_options_are_ignored(self):
        names = ModuleLocator(["base_app.view"], require=True).plugins()
        assert names == ["base_app.view.tt"]


class TestSearchComponents:
    """search_components() on plain and virtual-component applications."""

    def test_sorted_by_length(self, make_app):
        app = make_app(BaseApp)
        assert app.search_components() == [
            "base_app.view.tt",
            "base_app.model.dbic",
            "base_app.model.SUPER",
            "base_app.controller.root",
        ]

    def test_super_aliases_are_excluded(self, make_app):
        app = make_app(ExtApp)
        names = app.search_components("base_app")
        assert "base_app.model.SUPER" not in names
        assert names == ["base_app.view.tt", "base_app.model.dbic", "base_app.controller.root"]

    def test_super_marker_is_case_sensitive(self, make_app, monkeypatch):
        found = ["ext_app.model.SUPER", "ext_app.model.super", "ext_app.model.Super", "ext_app.model.superb"]
        monkeypatch.setattr(Application, "search_components", classmethod(lambda cls, namespace=None: found))
        app = make_app(ExtApp)
        assert app.search_components() == ["ext_app.model.super", "ext_app.model.Super", "ext_app.model.superb"]

    def test_relative_search_extra(self, make_app):
        app = make_app(ExtApp)
        assert app.search_components("ext_app") == [
            "ext_app.model.xml",
            "ext_app.plugin.cache",
            "ext_app.model.xml.feed",
            "ext_app.controller.root",
        ]

    def test_absolute_search_extra(self, make_app):
        app = make_app(BaseApp, config={"setup_components": {"search_extra": ["ext_app.plugin"]}})
        assert "ext_app.plugin.cache" in app.search_components()

    def test_search_extra_must_be_a_list(self, make_app):
        app = make_app(BaseApp, config={"setup_components": {"search_extra": ".plugin"}})
        with pytest.raises(ConfigurationError):
            app.search_components()

    def test_options_pass_through(self, make_app):
        app = make_app(ExtApp, config={"setup_components": {"except": "ext_app.plugin.cache"}})
        assert "ext_app.plugin.cache" not in app.search_components("ext_app")

    def test_config_is_not_mutated(self, make_app):
        app = make_app(ExtApp)
        app.search_components("ext_app")
        app.search_components("base_app")
        assert app.get_config()["setup_components"] == {"search_extra": [".plugin"]}
        assert "ext_app.plugin.cache" in app.search_components("ext_app")
