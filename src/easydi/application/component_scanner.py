import importlib
import inspect
import logging
import pkgutil
import threading
from types import ModuleType
from typing import Dict, List, Type

from easydi.domain import ComponentScanError, DiscoveredComponent, IComponentDiscovery, ITypeIntrospector

logger = logging.getLogger(__name__)


def default_component_name(service_type: Type) -> str:
    """Class name with its first letter lower-cased, e.g. ``UserService`` -> ``userService``."""
    name = service_type.__name__
    return name[:1].lower() + name[1:]


class ComponentScanner(IComponentDiscovery):
    """Finds ``@component`` classes in a package and all of its subpackages.

    Every module under the package is imported; only classes defined in those
    modules (not re-exported imports) are considered. Results are cached per
    package name.
    """

    def __init__(self, introspector: ITypeIntrospector) -> None:
        self._introspector = introspector
        self._cache: Dict[str, List[DiscoveredComponent]] = {}
        self._lock = threading.Lock()

    def discover(self, package_name: str) -> List[DiscoveredComponent]:
        """Return the components found under ``package_name``.

        Raises:
            ComponentScanError: If the package or one of its modules cannot be imported.

        Example:
            >>> scanner.discover("myapp.services")
            [DiscoveredComponent(service_type=<class 'UserRepository'>, name='userRepository', ...)]
        """
        with self._lock:
            cached = self._cache.get(package_name)
        if cached is not None:
            return list(cached)

        components = [
            component for module in self._iter_modules(package_name) for component in self._components_in(module)
        ]
        logger.debug("Discovered %d components in %s", len(components), package_name)

        with self._lock:
            self._cache[package_name] = components
        return list(components)

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def _iter_modules(self, package_name: str) -> List[ModuleType]:
        try:
            package = importlib.import_module(package_name)
        except Exception as e:
            raise ComponentScanError(package_name, f"{type(e).__name__}: {e}") from e

        modules = [package]
        search_path = getattr(package, "__path__", None)
        if search_path is None:
            return modules

        def on_error(name: str) -> None:
            raise ComponentScanError(package_name, f"Cannot import {name}")

        try:
            for module_info in pkgutil.walk_packages(search_path, prefix=f"{package.__name__}.", onerror=on_error):
                modules.append(importlib.import_module(module_info.name))
        except ComponentScanError:
            raise
        except Exception as e:
            raise ComponentScanError(package_name, f"{type(e).__name__}: {e}") from e
        return modules

    def _components_in(self, module: ModuleType) -> List[DiscoveredComponent]:
        components = []
        for _, member in inspect.getmembers(module, inspect.isclass):
            if member.__module__ != module.__name__:
                continue
            # Unmarked classes are never described.
            marker = self._introspector.component(member)
            if marker is None:
                continue
            components.append(
                DiscoveredComponent(
                    service_type=member,
                    name=marker.name or default_component_name(member),
                    lifetime=marker.lifetime,
                )
            )
        return components
