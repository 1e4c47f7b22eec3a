"""
Component Registry - Live registry of an application's components
Flow: Setup hook → register() → Lookup by name or kind → Statistics
"""

from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

import structlog
from pydantic import BaseModel, Field

from .component_base import BaseComponent, ComponentInfo, ComponentKind

logger = structlog.get_logger()


class RegistryStats(BaseModel):
    """Component registry statistics."""
    total_components: int = Field(..., description="Total registered components")
    kinds: Dict[str, int] = Field(..., description="Components per kind")
    virtual_components: List[str] = Field(..., description="Names of synthesized components")
    last_setup_time: Optional[str] = Field(default=None, description="Last setup timestamp")


class ComponentRegistry:
    """
    Registry of component instances for one application class, keyed by the
    component's (rewritten) name.

    Responsibilities:
    - Keep components in registration order
    - Provide lookups by full name
    - Report per-kind listings and statistics
    """

    def __init__(self, owner: str):
        """Initialize an empty registry for the named application."""
        self.owner = owner
        self._components: Dict[str, Any] = {}
        self._last_setup_time: Optional[datetime] = None
        self.logger = logger.bind(registry=owner)

    def register(self, name: str, component: Any) -> None:
        """Store a component instance (or class) under ``name``, replacing any previous entry."""
        replaced = name in self._components
        self._components[name] = component
        self.logger.debug("Component registered", component=name, replaced=replaced)

    def get(self, name: str, default: Any = None) -> Any:
        return self._components.get(name, default)

    def names(self) -> List[str]:
        return list(self._components)

    def by_kind(self, kind: ComponentKind) -> Dict[str, Any]:
        """Components of one kind, keyed by name."""
        found = {}
        for name, component in self._components.items():
            cls = _component_class(component)
            if cls is not None and cls.kind == kind:
                found[name] = component
        return found

    def describe(self) -> List[ComponentInfo]:
        """Describe every registered component."""
        infos = []
        for name, component in self._components.items():
            cls = _component_class(component)
            if cls is not None:
                infos.append(cls.describe(name))
        return infos

    def mark_setup(self) -> None:
        self._last_setup_time = datetime.utcnow()

    def get_stats(self) -> RegistryStats:
        """Get registry statistics."""
        kinds: Dict[str, int] = {}
        virtual = []
        for info in self.describe():
            kinds[info.kind.value] = kinds.get(info.kind.value, 0) + 1
            if info.virtual:
                virtual.append(info.name)
        return RegistryStats(
            total_components=len(self._components),
            kinds=kinds,
            virtual_components=sorted(virtual),
            last_setup_time=self._last_setup_time.isoformat() if self._last_setup_time else None,
        )

    def __contains__(self, name: object) -> bool:
        return name in self._components

    def __getitem__(self, name: str) -> Any:
        return self._components[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._components)

    def __len__(self) -> int:
        return len(self._components)

    def __repr__(self) -> str:
        return f"<ComponentRegistry {self.owner} ({len(self)} components)>"


def _component_class(component: Any) -> Optional[type]:
    """Class of a registered component; plain classes register as themselves."""
    cls = component if isinstance(component, type) else type(component)
    return cls if issubclass(cls, BaseComponent) else None
