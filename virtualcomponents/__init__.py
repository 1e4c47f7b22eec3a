"""
Applications that inherit and selectively override the controllers, models
and views of a parent application.
"""

from virtualcomponents.core.application import Application
from virtualcomponents.core.component_base import BaseComponent, Controller, Model, View, action
from virtualcomponents.core.exceptions import (
    ApplicationSetupError,
    ComponentLoadError,
    ComponentNotFoundError,
    ConfigurationError,
    VirtualComponentsException,
)
from virtualcomponents.plugins.virtual_components import VirtualComponents

__version__ = "0.1.0"

__all__ = [
    "Application",
    "BaseComponent",
    "Controller",
    "Model",
    "View",
    "action",
    "VirtualComponents",
    "VirtualComponentsException",
    "ApplicationSetupError",
    "ComponentLoadError",
    "ComponentNotFoundError",
    "ConfigurationError",
]
