"""
Virtual Components Plugin
Flow: Ancestor chain → search_components() → Rewrite namespace → Load or synthesize → Register

Lets an application inherit the controllers, models and views of the
applications it subclasses. For every component of an ancestor that the
application does not define itself, an empty subclass of the ancestor's
component is created under the application's namespace:

    class ExtApp(VirtualComponents, BaseApp):
        namespace = "ext_app"

    # base_app.model.dbic.DBIC exists, ext_app/model/dbic.py does not:
    ExtApp.setup()
    ExtApp.component("ext_app.model.dbic")   # virtual subclass of DBIC
"""

import types
from collections import Counter
from typing import Dict, List, Optional, Tuple

from virtualcomponents.core.component_base import qualified_name
from virtualcomponents.core.component_loader import (
    component_class_of,
    inner_components,
    load_component_class,
    load_module,
)
from virtualcomponents.core.exceptions import ComponentLoadError, ComponentNotFoundError
from virtualcomponents.core.utils import render_table, term_width

# Last name segment reserved for super-class aliases; never a component
SUPER_MARKER = "SUPER"

Resolved = Tuple[str, type, Dict[str, type]]


def make_virtual_component(name: str, base: type) -> type:
    """Create an empty subclass of ``base`` that lives in module ``name``."""
    def exec_body(namespace):
        namespace["__module__"] = name
        namespace["__qualname__"] = base.__qualname__
        namespace["__doc__"] = f"Virtual component inherited from {qualified_name(base)}."
        namespace["__virtual_component__"] = True
        namespace["__virtual_base__"] = base

    return types.new_class(base.__name__, (base,), exec_body=exec_body)


class VirtualComponents:
    """
    Application plugin: list it before the parent application in the bases.
    Subclasses of such an application inherit it and do not list it again.

    Candidate Resolution (per ancestor component, most-derived ancestor first):
    1. Same namespace as the application → load and register as is
    2. Rewrite the ancestor namespace prefix to the application's
    3. Skip when the rewritten name is registered or already synthesized
    4. Import the rewritten module → the author's override wins
    5. Module not found → synthesize a virtual subclass of the ancestor's class
    6. Any other failure → ComponentLoadError, startup aborts
    """

    @classmethod
    def search_components(cls, namespace: Optional[str] = None) -> List[str]:
        """Component names below ``namespace``, without super-class aliases, shortest first."""
        return [
            name for name in super().search_components(namespace)
            if name.rsplit(".", 1)[-1] != SUPER_MARKER
        ]

    @classmethod
    def setup_components(cls) -> None:
        log = cls.get_log()
        registry = cls.registry()

        hierarchy: List[str] = []
        for klass in cls.application_hierarchy():
            namespace = klass.app_namespace()
            if namespace not in hierarchy:
                hierarchy.append(namespace)

        candidates: List[Tuple[str, str]] = []
        seen: Counter = Counter()
        for ancestor in hierarchy:
            for name in cls.search_components(ancestor):
                seen[name] += 1
                candidates.append((ancestor, name))
        log.debug("Component candidates collected", hierarchy=hierarchy, candidates=len(candidates))

        virtual_components: Dict[str, type] = {}
        for ancestor, name in candidates:
            resolved = cls._resolve_component(ancestor, name, virtual_components)
            if resolved is None:
                continue
            component_name, component_class, inner = resolved
            cls.register_components(component_name, component_class, inner, seen)

        log.debug(
            "Components set up",
            count=len(registry),
            virtual=len(virtual_components),
        )

        if cls.is_debug():
            width = max(term_width() - 6, 20)
            table = render_table(sorted(virtual_components), width)
            log.debug("Dynamically generated components:\n" + table + "\n")

    @classmethod
    def _resolve_component(
        cls,
        ancestor: str,
        name: str,
        virtual_components: Dict[str, type],
    ) -> Optional[Resolved]:
        """Decide which class (if any) registers for one ancestor candidate."""
        namespace = cls.app_namespace()
        registry = cls.registry()

        if ancestor == namespace or not name.startswith(ancestor + "."):
            if name in registry:
                return None
            return cls._load_local(name)

        component_name = namespace + name[len(ancestor):]
        if component_name in registry or component_name in virtual_components:
            return None

        try:
            return cls._load_local(component_name, missing_ok=True)
        except ComponentNotFoundError:
            pass

        try:
            base = load_component_class(name)
        except ComponentLoadError as e:
            raise ComponentLoadError(
                component_name,
                f"Failed to load class {component_name}: {e.cause or e}",
                cause=e.cause,
            ) from e
        if base is None:
            return None
        virtual = make_virtual_component(component_name, base)
        virtual_components[component_name] = virtual
        cls.get_log().debug(
            "Virtual component created", component=component_name, base=qualified_name(base)
        )
        return component_name, virtual, {}

    @classmethod
    def _load_local(cls, name: str, missing_ok: bool = False) -> Optional[Resolved]:
        try:
            module = load_module(name)
        except ComponentNotFoundError as e:
            if missing_ok:
                raise
            raise ComponentLoadError(name, f"Failed to load class {name}: {e}", cause=e) from e
        component_class = component_class_of(module)
        if component_class is None:
            cls.get_log().debug("No component class, skipped", module=name)
            return None
        return name, component_class, inner_components(module, component_class)
