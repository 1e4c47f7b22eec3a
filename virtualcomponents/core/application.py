"""
Application Class
Flow: setup() → setup_logging() → setup_components() → setup_component() → registry

An application is a class; its namespace is the dotted package its
controllers, models and views live below:

    base_app/
        __init__.py          class BaseApp(Application)
        controller/root.py   class Root(Controller)
        model/dbic.py        class DBIC(Model)

Plugins are mixin classes placed before the parent application in the
bases; they override the lifecycle hooks and call ``super()``. A subclass of
an application that already uses a plugin inherits it and must not list it
again (the bases would have no consistent MRO).
"""

from typing import Any, ClassVar, Collection, Dict, List, Optional, Tuple, Type

from fastapi import FastAPI

from virtualcomponents.api import health
from virtualcomponents.config.settings import get_settings
from virtualcomponents.middleware.logging import LoggingMiddleware

from .component_base import BaseComponent, ComponentKind, Controller, KIND_SEGMENTS
from .component_discovery import ModuleLocator
from .component_loader import component_class_of, inner_components, load_module
from .component_registry import ComponentRegistry
from .exceptions import ApplicationSetupError, ComponentLoadError, ConfigurationError
from .logging import get_logger, setup_logging
from .utils import merge_hashes

# Conventional sub-namespaces searched for components
SEARCH_SUFFIXES: Tuple[str, ...] = (".controller", ".c", ".model", ".m", ".view", ".v")

# Configuration block read by setup_components()
SETUP_COMPONENTS_KEY = "setup_components"


class Application:
    """
    Base class of all applications.

    Class attributes:
    - namespace: dotted package holding the components; defaults to the
      module the application class is defined in. Not inherited.
    - config: configuration dict, merged with the config of every parent
      application (the subclass wins).
    - debug: overrides the DEBUG setting when not None.
    """

    namespace: ClassVar[Optional[str]] = None
    config: ClassVar[Dict[str, Any]] = {}
    debug: ClassVar[Optional[bool]] = None

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @classmethod
    def app_namespace(cls) -> str:
        return cls.__dict__.get("namespace") or cls.__module__

    @classmethod
    def get_config(cls) -> Dict[str, Any]:
        """Configuration merged along the MRO, most-derived values winning."""
        merged: Dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            own = klass.__dict__.get("config")
            if isinstance(own, dict):
                merged = merge_hashes(merged, own)
        return merged

    @classmethod
    def is_debug(cls) -> bool:
        if cls.debug is not None:
            return bool(cls.debug)
        return get_settings().DEBUG

    @classmethod
    def get_log(cls) -> Any:
        return get_logger(__name__, app=cls.__name__)

    @classmethod
    def application_hierarchy(cls) -> List[Type["Application"]]:
        """Application classes in the MRO, most-derived first, excluding Application itself."""
        return [
            klass for klass in cls.__mro__
            if isinstance(klass, type) and issubclass(klass, Application) and klass is not Application
        ]

    @classmethod
    def relative_name(cls, name: str) -> str:
        """``base_app.model.dbic`` → ``model.dbic`` for application ``base_app``."""
        prefix = cls.app_namespace() + "."
        return name[len(prefix):] if name.startswith(prefix) else name

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @classmethod
    def setup(cls) -> Type["Application"]:
        """
        Boot the application.

        Setup Process:
        1. setup_logging() → Configure structlog
        2. registry() → Fresh component registry for this class
        3. setup_components() → Discover, load and register components
        4. Mark the application as set up

        Any component load failure propagates and aborts startup.
        """
        if cls.__dict__.get("_setup_finished"):
            raise ApplicationSetupError(f"{cls.__name__} is already set up", application=cls.__name__)

        setup_logging()
        log = cls.get_log()
        log.info("Setting up application", namespace=cls.app_namespace(), debug=cls.is_debug())

        cls.components = ComponentRegistry(cls.__name__)
        cls.setup_components()
        cls.components.mark_setup()

        cls._setup_finished = True
        log.info("Application setup complete", components=len(cls.components))
        return cls

    @classmethod
    def registry(cls) -> ComponentRegistry:
        """This class's own component registry, created on first use."""
        registry = cls.__dict__.get("components")
        if registry is None:
            registry = ComponentRegistry(cls.__name__)
            cls.components = registry
        return registry

    @classmethod
    def search_components(cls, namespace: Optional[str] = None) -> List[str]:
        """
        Names of the component modules below ``namespace`` (this
        application's namespace by default), shortest first.

        The ``search_extra`` list of the ``setup_components`` config block is
        searched after the conventional paths; entries starting with ``.``
        are relative to ``namespace``. Other options of the block are passed
        to the module locator.
        """
        namespace = namespace or cls.app_namespace()
        options = dict(cls.get_config().get(SETUP_COMPONENTS_KEY) or {})
        extra = options.pop("search_extra", None) or []
        if isinstance(extra, str):
            raise ConfigurationError("search_extra must be a list of package names", option="search_extra")

        search_path = [namespace + suffix for suffix in SEARCH_SUFFIXES]
        for path in extra:
            search_path.append(namespace + path if path.startswith(".") else path)

        names = ModuleLocator(search_path, **options).plugins()
        return sorted(names, key=len)

    @classmethod
    def setup_components(cls) -> None:
        """Load and register every component below this application's namespace."""
        registry = cls.registry()
        names = cls.search_components()
        discovered = set(names)
        for name in names:
            module = load_module(name)
            component_class = component_class_of(module)
            if component_class is None:
                cls.get_log().debug("No component class, skipped", module=name)
                continue
            cls.register_components(name, component_class, inner_components(module, component_class), discovered)
        cls.get_log().debug("Components set up", count=len(registry))

    @classmethod
    def register_components(
        cls,
        name: str,
        component_class: type,
        inner: Dict[str, type],
        discovered: Collection[str],
    ) -> None:
        """Instantiate a component and its inner components and store them in the registry."""
        modules = {name: cls.setup_component(name, component_class)}
        for inner_name, inner_class in inner.items():
            if inner_name not in discovered:
                modules[inner_name] = cls.setup_component(inner_name, inner_class)

        registry = cls.registry()
        for key, component in modules.items():
            registry.register(key, component)

    @classmethod
    def setup_component(cls, name: str, component_class: type) -> Any:
        """
        Create the registered instance of one component.

        Component configuration is the class's own ``config`` merged with
        the application config entry for the relative name (``model.dbic``).
        Classes that are not components register as the class itself.
        """
        if not issubclass(component_class, BaseComponent):
            return component_class

        config = merge_hashes(
            getattr(component_class, "config", None) or {},
            cls.get_config().get(cls.relative_name(name)) or {},
        )
        try:
            return component_class(cls, name, config)
        except Exception as e:
            raise ComponentLoadError(
                name, f'Couldn\'t instantiate component "{name}", "{e}"', cause=e
            ) from e

    # ------------------------------------------------------------------
    # Component lookup
    # ------------------------------------------------------------------

    @classmethod
    def component(cls, name: str) -> Any:
        """Look a component up by full name or by name relative to the namespace."""
        registry = cls.registry()
        if name in registry:
            return registry[name]
        return registry.get(f"{cls.app_namespace()}.{name}")

    @classmethod
    def _lookup(cls, kind: ComponentKind, name: str) -> Any:
        for segment, segment_kind in KIND_SEGMENTS.items():
            if segment_kind != kind:
                continue
            component = cls.component(f"{segment}.{name}")
            if component is not None:
                return component
        # Components found through search_extra sit outside the kind namespaces
        component = cls.component(name)
        if isinstance(component, BaseComponent) and component.kind == kind:
            return component
        return None

    @classmethod
    def _names(cls, kind: ComponentKind) -> List[str]:
        names = []
        for name in cls.registry().by_kind(kind):
            relative = cls.relative_name(name)
            head, _, tail = relative.partition(".")
            names.append(tail if tail and head in KIND_SEGMENTS else relative)
        return sorted(names)

    @classmethod
    def controller(cls, name: str) -> Any:
        return cls._lookup(ComponentKind.CONTROLLER, name)

    @classmethod
    def model(cls, name: str) -> Any:
        return cls._lookup(ComponentKind.MODEL, name)

    @classmethod
    def view(cls, name: str) -> Any:
        return cls._lookup(ComponentKind.VIEW, name)

    @classmethod
    def controllers(cls) -> List[str]:
        return cls._names(ComponentKind.CONTROLLER)

    @classmethod
    def models(cls) -> List[str]:
        return cls._names(ComponentKind.MODEL)

    @classmethod
    def views(cls) -> List[str]:
        return cls._names(ComponentKind.VIEW)

    # ------------------------------------------------------------------
    # ASGI
    # ------------------------------------------------------------------

    @classmethod
    def create_asgi_app(cls) -> FastAPI:
        """Create a FastAPI application dispatching to the registered controllers."""
        if not cls.__dict__.get("_setup_finished"):
            raise ApplicationSetupError(
                f"{cls.__name__}.setup() must run before create_asgi_app()", application=cls.__name__
            )

        settings = get_settings()
        app = FastAPI(
            title=cls.__name__,
            version=settings.APP_VERSION,
            debug=cls.is_debug(),
            docs_url="/docs" if cls.is_debug() else None,
            redoc_url=None,
        )
        app.state.application = cls
        app.add_middleware(LoggingMiddleware)
        app.include_router(health.router, prefix="/_health", tags=["health"])

        for name, controller in cls.registry().by_kind(ComponentKind.CONTROLLER).items():
            if isinstance(controller, Controller):
                app.include_router(controller.build_router(), tags=[cls.relative_name(name)])

        cls.get_log().info("ASGI application created", routes=len(app.routes))
        return app
