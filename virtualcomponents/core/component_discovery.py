"""
Component Discovery Module
Flow: Search paths → Package location → Module enumeration → Filtering
"""

import importlib.util
import pkgutil
import re
from typing import Any, Iterable, Iterator, List, Optional, Pattern, Sequence, Set, Union

import structlog

from .exceptions import ConfigurationError

logger = structlog.get_logger()

NamePattern = Union[str, Pattern, Sequence[str], None]

_KNOWN_OPTIONS = ("only", "except", "max_depth")


def _compile_pattern(option: str, value: NamePattern) -> Optional[Pattern]:
    """
    Turn an ``only``/``except`` option into a regex.

    Accepts a compiled regex, a single module name or a list of names. Plain
    names match exactly.
    """
    if value is None:
        return None
    if isinstance(value, re.Pattern):
        return value
    if isinstance(value, str):
        names = [value]
    else:
        try:
            names = list(value)
        except TypeError as e:
            raise ConfigurationError(
                f"Option '{option}' must be a name, a list of names or a regex", option=option
            ) from e
    return re.compile("^(?:" + "|".join(re.escape(str(name)) for name in names) + ")$")


class ModuleLocator:
    """
    Enumerates the modules available below a set of dotted package prefixes.

    Discovery Process:
    1. _find_package() → Locate each search prefix without running its code
    2. _walk() → Recursively list sub-modules and sub-packages
    3. _accept() → Apply ``only``/``except`` filters

    The prefixes themselves are not listed. Listing a module never imports
    it; only the parent packages of each prefix are imported, as locating a
    dotted name requires.
    """

    def __init__(self, search_path: Iterable[str], **options: Any):
        """
        Args:
            search_path: Dotted package prefixes to enumerate
            **options: ``only``, ``except`` and ``max_depth``; anything else
                is ignored
        """
        self.search_path = [path for path in search_path if path]
        self.only = _compile_pattern("only", options.get("only"))
        self.exclude = _compile_pattern("except", options.get("except"))
        self.max_depth = options.get("max_depth")
        if self.max_depth is not None and (not isinstance(self.max_depth, int) or self.max_depth < 1):
            raise ConfigurationError("Option 'max_depth' must be a positive integer", option="max_depth")

        ignored = sorted(set(options) - set(_KNOWN_OPTIONS))
        if ignored:
            logger.debug("Ignoring unknown locator options", options=ignored)

    def plugins(self) -> List[str]:
        """List module names found below every search prefix, de-duplicated in search order."""
        seen: Set[str] = set()
        found: List[str] = []
        for prefix in self.search_path:
            for name in self._search(prefix):
                if name not in seen and self._accept(name):
                    seen.add(name)
                    found.append(name)
        logger.debug("Modules located", search_path=self.search_path, count=len(found))
        return found

    def _search(self, prefix: str) -> Iterator[str]:
        locations = self._find_package(prefix)
        if locations:
            yield from self._walk(prefix, locations, 1)

    def _find_package(self, name: str) -> Optional[List[str]]:
        """Return the search locations of package ``name`` or None if it is not a package."""
        try:
            spec = importlib.util.find_spec(name)
        except (ImportError, ValueError):
            # A missing parent package means there is nothing to enumerate
            return None
        if spec is None or spec.submodule_search_locations is None:
            return None
        return list(spec.submodule_search_locations)

    def _walk(self, prefix: str, locations: List[str], depth: int) -> Iterator[str]:
        for info in sorted(pkgutil.iter_modules(locations), key=lambda item: item.name):
            fullname = f"{prefix}.{info.name}"
            yield fullname
            if not info.ispkg:
                continue
            if self.max_depth is not None and depth >= self.max_depth:
                continue
            spec = info.module_finder.find_spec(fullname, None)
            if spec is not None and spec.submodule_search_locations:
                yield from self._walk(fullname, list(spec.submodule_search_locations), depth + 1)

    def _accept(self, name: str) -> bool:
        if self.only is not None and not self.only.match(name):
            return False
        if self.exclude is not None and self.exclude.match(name):
            return False
        return True
