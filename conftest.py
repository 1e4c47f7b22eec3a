"""
Shared pytest fixtures.

The sample applications live in ``testapps/`` and are imported by their
package names (``base_app``, ``ext_app`` ...).
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "testapps"))


@pytest.fixture
def make_app():
    """
    Build a fresh application class that shares the namespace of ``parent``.

    Setup mutates the class it runs on, so every test boots its own copy.
    """
    def factory(parent, **attrs):
        namespace = parent.app_namespace()
        attrs.setdefault("namespace", namespace)
        attrs.setdefault("__module__", namespace)
        return type(parent.__name__, (parent,), attrs)
    return factory


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Configure structlog once so capture_logs() is not overridden during setup()."""
    from virtualcomponents.core.logging import setup_logging

    setup_logging()
