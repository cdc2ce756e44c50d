from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from easydi.domain.models import BeanDefinition, ComponentInfo, DiscoveredComponent, Recipe, TypeDescriptor

T = TypeVar("T")


class IContainer(ABC):
    """Abstract interface for dependency injection container operations."""

    @abstractmethod
    def register(self, recipe: Recipe) -> BeanDefinition:
        """Register a recipe.

        Args:
            recipe: The recipe to register.
        """

    @abstractmethod
    def register_singletons(self, dependencies: Dict[Type, Callable[["IContainer"], Any]]) -> None:
        """Register multiple singleton dependencies at once.

        Args:
            dependencies: A dictionary mapping types to their builder functions.
        """

    @abstractmethod
    def register_transients(self, dependencies: Dict[Type, Callable[["IContainer"], Any]]) -> None:
        """Register multiple transient dependencies at once.

        Args:
            dependencies: A dictionary mapping types to their builder functions.
        """

    @abstractmethod
    def resolve(self, service_type: Type[T]) -> T:
        """Resolve and return an instance of the requested type.

        Args:
            service_type: The type to resolve.
        """

    @abstractmethod
    def resolve_named(self, name: str, service_type: Type[T]) -> T:
        """Resolve and return the instance registered under ``name``.

        Args:
            name: The registration name.
            service_type: The type the instance must be compatible with.
        """

    @abstractmethod
    def create_instance(self, service_type: Type[T]) -> T:
        """Construct and inject a fresh instance without looking up a recipe for it."""

    @abstractmethod
    def inject_dependencies(self, instance: Any) -> None:
        """Run field injection on an already constructed instance."""

    @abstractmethod
    def clear_caches(self) -> None:
        """Drop derived caches without touching registrations or singleton instances."""

    @abstractmethod
    def clear(self) -> None:
        """Clear all registrations and instances from the container."""

    @abstractmethod
    def get_registry_copy(self) -> List[Recipe]:
        """Get the registered recipes in registration order."""


class IResolver(ABC):
    """Abstract interface for locating the definition that satisfies a request."""

    @abstractmethod
    def resolve(self, service_type: Type) -> BeanDefinition:
        """Find the definition for a type, exact match first, then by capability.

        Raises:
            ServiceNotFoundError: If no registered type satisfies the request.
        """

    @abstractmethod
    def resolve_named(self, name: str, service_type: Type) -> BeanDefinition:
        """Find the definition registered under a name.

        Raises:
            ServiceNotFoundError: If the name is unknown or its type is incompatible.
        """

    @abstractmethod
    def clear_memo(self) -> None:
        """Drop memoized assignability decisions."""


class ILifetimeManager(ABC):
    """Abstract interface for managing dependency lifetimes."""

    @abstractmethod
    def get_or_create(
        self,
        definition: BeanDefinition,
        factory: Callable[[], Any],
    ) -> Any:
        """Get existing instance or create a new one based on lifetime.

        Args:
            definition: The definition containing the recipe and its cache entry.
            factory: A callable producing a fully injected instance.
        """

    @abstractmethod
    def clear_cache(self) -> None:
        """Clear any cached instances managed by this lifetime manager."""


class ITypeIntrospector(ABC):
    """Abstract interface answering which members of a type are marked for injection."""

    @abstractmethod
    def describe(self, service_type: Type) -> TypeDescriptor:
        """Return the descriptor for a type."""

    @abstractmethod
    def component(self, service_type: Type) -> Optional[ComponentInfo]:
        """Return the type's own component marker without describing the rest of the type."""

    @abstractmethod
    def component_name(self, service_type: Type) -> Optional[str]:
        """Return the component marker name, or None when absent or unnamed."""

    @abstractmethod
    def clear_cache(self) -> None:
        """Drop cached descriptors."""


class IComponentDiscovery(ABC):
    """Abstract interface for finding component types in a package."""

    @abstractmethod
    def discover(self, package_name: str) -> List[DiscoveredComponent]:
        """Return the components found in a package and its subpackages."""

    @abstractmethod
    def clear_cache(self) -> None:
        """Drop cached discovery results."""
