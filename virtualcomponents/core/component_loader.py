"""
Component Loader Module
Flow: Import module → Classify failure → Resolve component class → Collect inner components
"""

import importlib
import inspect
from types import ModuleType
from typing import Dict, List, Optional

import structlog

from .component_base import ABSTRACT_COMPONENTS, BaseComponent
from .exceptions import ComponentLoadError, ComponentNotFoundError

logger = structlog.get_logger()


def _normalize(name: str) -> str:
    return name.replace("_", "").lower()


def is_missing_module(error: ModuleNotFoundError, name: str) -> bool:
    """
    True when ``error`` reports ``name`` itself (or one of its parent
    packages) as missing. A module that exists but imports something that
    does not is a load failure, not a missing module.
    """
    missing = error.name
    if not missing:
        return False
    return name == missing or name.startswith(missing + ".")


def load_module(name: str) -> ModuleType:
    """
    Import a component module.

    Raises:
        ComponentNotFoundError: the module (or a parent package) does not exist
        ComponentLoadError: the module exists but raised while importing
    """
    try:
        return importlib.import_module(name)
    except ModuleNotFoundError as e:
        if is_missing_module(e, name):
            raise ComponentNotFoundError(name, missing_module=e.name) from e
        raise ComponentLoadError(name, f"Failed to load class {name}: {e}", cause=e) from e
    except Exception as e:
        raise ComponentLoadError(name, f"Failed to load class {name}: {e}", cause=e) from e


def defined_components(module: ModuleType) -> List[type]:
    """Component classes defined at module level in ``module``, sorted by class name."""
    found = []
    for _, obj in inspect.getmembers(module, inspect.isclass):
        if (issubclass(obj, BaseComponent)
                and obj not in ABSTRACT_COMPONENTS
                and obj.__module__ == module.__name__):
            found.append(obj)
    return found


def component_class_of(module: ModuleType) -> Optional[type]:
    """
    Resolve the primary component class of a module.

    Resolution order:
    1. The module's ``__component__`` attribute
    2. The component class whose name matches the module's last segment,
       ignoring case and underscores (``dbic`` → ``DBIC``)
    3. The only component class defined in the module

    Returns None for modules that define no component, such as plain
    packages grouping nested components.
    """
    name = module.__name__
    explicit = getattr(module, "__component__", None)
    if explicit is not None:
        if not (inspect.isclass(explicit) and issubclass(explicit, BaseComponent)):
            raise ComponentLoadError(name, f"Failed to load class {name}: __component__ is not a component class")
        return explicit

    candidates = defined_components(module)
    wanted = _normalize(name.rsplit(".", 1)[-1])
    for cls in candidates:
        if _normalize(cls.__name__) == wanted:
            return cls
    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        return None
    raise ComponentLoadError(
        name,
        f"Failed to load class {name}: ambiguous component classes "
        f"{', '.join(cls.__name__ for cls in candidates)}; set __component__",
    )


def load_component_class(name: str) -> Optional[type]:
    """Import ``name`` and return its primary component class."""
    return component_class_of(load_module(name))


def inner_components(module: ModuleType, primary: Optional[type] = None) -> Dict[str, type]:
    """
    Extra component classes declared in the same module as the primary one,
    keyed ``<module>.<ClassName>``.
    """
    inner = {}
    for cls in defined_components(module):
        if cls is primary:
            continue
        inner[f"{module.__name__}.{cls.__name__}"] = cls
    if inner:
        logger.debug("Inner components found", module=module.__name__, inner=sorted(inner))
    return inner
