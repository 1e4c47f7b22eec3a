"""
Base Component System
Flow: Module discovery → Class resolution → Instantiation with config → Registration

Components are the controllers, models and views an application dispatches
requests to. A component is named after the dotted module that defines it,
e.g. ``base_app.model.dbic``.
"""

import inspect
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from .logging import get_logger


class ComponentKind(str, Enum):
    """Kinds of application components."""
    CONTROLLER = "controller"
    MODEL = "model"
    VIEW = "view"
    COMPONENT = "component"


# Leading namespace segments that identify each kind of component
KIND_SEGMENTS: Dict[str, ComponentKind] = {
    "controller": ComponentKind.CONTROLLER,
    "c": ComponentKind.CONTROLLER,
    "model": ComponentKind.MODEL,
    "m": ComponentKind.MODEL,
    "view": ComponentKind.VIEW,
    "v": ComponentKind.VIEW,
}


class ActionSpec(BaseModel):
    """Route declaration attached to a controller method."""
    path: str = Field(default="", description="Path relative to the controller prefix")
    methods: List[str] = Field(default_factory=lambda: ["GET"], description="HTTP methods")
    options: Dict[str, Any] = Field(default_factory=dict, description="Extra APIRouter.add_api_route options")


class ComponentInfo(BaseModel):
    """Description of a registered component."""
    name: str = Field(..., description="Registered component name")
    kind: ComponentKind = Field(..., description="Component kind")
    class_name: str = Field(..., description="Qualified name of the component class")
    virtual: bool = Field(default=False, description="Whether the class was synthesized")
    base: Optional[str] = Field(default=None, description="Ancestor class of a virtual component")


def action(path: str = "", methods: Optional[List[str]] = None, **options: Any) -> Callable:
    """
    Mark a controller method as a request action.

    Args:
        path: Route path below the controller's path prefix
        methods: HTTP methods, GET by default
        **options: Passed through to ``APIRouter.add_api_route``
    """
    def decorator(func: Callable) -> Callable:
        func.__action__ = ActionSpec(path=path, methods=methods or ["GET"], options=options)
        return func
    return decorator


def qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


class BaseComponent:
    """
    Base class for all application components.

    Component Lifecycle:
    1. Discovery finds the module defining the component
    2. The application resolves the component class (or synthesizes a
       virtual subclass of an ancestor's component)
    3. __init__() receives the application class, the registered name and
       the merged configuration
    4. The instance is stored in the application's component registry
    """

    kind: ClassVar[ComponentKind] = ComponentKind.COMPONENT
    config: ClassVar[Dict[str, Any]] = {}

    def __init__(self, app: type, name: str, config: Optional[Dict[str, Any]] = None):
        """Initialize component with its application and configuration."""
        self.app = app
        self.component_name = name
        self.config = dict(config or {})
        self.logger = get_logger(__name__, app=app.__name__, component=name)

    @classmethod
    def is_virtual(cls) -> bool:
        """True only for the synthesized class itself, not its subclasses."""
        return bool(cls.__dict__.get("__virtual_component__", False))

    @classmethod
    def describe(cls, name: str) -> ComponentInfo:
        base = cls.__dict__.get("__virtual_base__")
        return ComponentInfo(
            name=name,
            kind=cls.kind,
            class_name=qualified_name(cls),
            virtual=cls.is_virtual(),
            base=qualified_name(base) if base is not None else None,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.component_name}>"


class Controller(BaseComponent):
    """
    Request dispatching component.

    Methods decorated with :func:`action` become routes mounted under
    ``path_prefix``. When no prefix is set it is derived from the component
    name: ``app.controller.users.admin`` serves ``/users/admin`` and
    ``app.controller.root`` serves ``/``.
    """

    kind = ComponentKind.CONTROLLER
    path_prefix: ClassVar[Optional[str]] = None

    @property
    def prefix(self) -> str:
        if self.path_prefix is not None:
            return self.path_prefix.rstrip("/")
        relative = self.app.relative_name(self.component_name).split(".")
        if relative and relative[0] in KIND_SEGMENTS:
            relative = relative[1:]
        if relative == ["root"]:
            return ""
        return "/" + "/".join(part.replace("_", "-") for part in relative)

    @classmethod
    def actions(cls) -> Dict[str, ActionSpec]:
        """Collect action declarations, including inherited ones."""
        found = {}
        for attr, member in inspect.getmembers(cls, inspect.isfunction):
            spec = getattr(member, "__action__", None)
            if spec is not None:
                found[attr] = spec
        return found

    def build_router(self) -> APIRouter:
        """Create an APIRouter for this controller's actions."""
        router = APIRouter(prefix=self.prefix)
        for attr, spec in self.actions().items():
            path = spec.path
            if path and not path.startswith("/"):
                path = "/" + path
            router.add_api_route(
                path or "/",
                getattr(self, attr),
                methods=spec.methods,
                name=f"{self.component_name}.{attr}",
                **spec.options,
            )
            self.logger.debug("Action registered", action=attr, path=self.prefix + (path or "/"))
        return router


class Model(BaseComponent):
    """Data access component."""

    kind = ComponentKind.MODEL


class View(BaseComponent):
    """Response rendering component."""

    kind = ComponentKind.VIEW
    content_type: ClassVar[str] = "text/html"

    def render(self, template: str, context: Dict[str, Any]) -> str:
        """Render a template with the given context."""
        raise NotImplementedError(f"{type(self).__name__} does not implement render()")


# Classes that mark a kind rather than define a concrete component
ABSTRACT_COMPONENTS = (BaseComponent, Controller, Model, View)
