import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Type, TypeVar

from easydi.application.circular_detector import CircularDependencyDetector
from easydi.application.component_scanner import ComponentScanner
from easydi.application.introspector import TypeIntrospector
from easydi.application.lifetime_manager import LifetimeManager
from easydi.application.materializer import InstanceMaterializer
from easydi.application.module import Module
from easydi.application.registry import DefinitionRegistry
from easydi.application.resolver import ServiceResolver
from easydi.domain import (
    BeanDefinition,
    ContainerConfig,
    IComponentDiscovery,
    IContainer,
    ILifetimeManager,
    ITypeIntrospector,
    Lifetime,
    Recipe,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DIContainer(IContainer):
    """Main dependency injection container.

    Orchestrates registration and resolution of services. Each container owns
    its registry, caches and introspector; nothing is shared between containers.

    Attributes:
        _config: Container-wide settings.
        _registry: Definitions indexed by name and type.
        _resolver: Component locating the definition for a request.
        _lifetime_manager: Component managing singleton and transient lifetimes.
        _circular_detector: Component detecting circular dependencies.
        _introspector: Component describing injectable members of types.
        _materializer: Component constructing instances and injecting fields.
        _discovery: Component finding ``@component`` classes in packages.
    """

    def __init__(
        self,
        config: Optional[ContainerConfig] = None,
        introspector: Optional[ITypeIntrospector] = None,
        discovery: Optional[IComponentDiscovery] = None,
    ) -> None:
        """Initialize the DI container with an empty registry.

        Args:
            config: Container settings; defaults are used when omitted.
            introspector: Replacement type introspector.
            discovery: Replacement component discovery provider.
        """
        self._config = config or ContainerConfig()
        self._registry = DefinitionRegistry()
        self._resolver = ServiceResolver(self._registry, memoize=self._config.memoize_assignability)
        self._circular_detector = CircularDependencyDetector()
        self._lifetime_manager: ILifetimeManager = LifetimeManager(self._circular_detector)
        self._introspector = introspector or TypeIntrospector()
        self._materializer = InstanceMaterializer(self._introspector, self._circular_detector)
        self._discovery = discovery or ComponentScanner(self._introspector)

    @classmethod
    def from_modules(cls, *modules: Module, config: Optional[ContainerConfig] = None) -> "DIContainer":
        """Create a container and load the given modules into it."""
        container = cls(config=config)
        container.load_modules(*modules)
        return container

    @classmethod
    def from_packages(
        cls,
        package_names: Iterable[str],
        *modules: Module,
        config: Optional[ContainerConfig] = None,
    ) -> "DIContainer":
        """Create a container, load the given modules, then scan packages for components.

        Example:
            >>> container = DIContainer.from_packages(["myapp.services"])
            >>> service = container.resolve(UserService)
        """
        container = cls.from_modules(*modules, config=config)
        container.scan_packages(*package_names)
        return container

    @property
    def config(self) -> ContainerConfig:
        return self._config

    def register(self, recipe: Recipe) -> BeanDefinition:
        """Register a recipe.

        A recipe with neither a factory nor a builder is built by constructing
        its declared type through the ``@inject`` or no-argument constructor.

        Args:
            recipe: The recipe to register.

        Returns:
            The definition holding the recipe and its lifecycle cache entry.
        """
        return self._registry.register(recipe)

    def _register_builders(self, dependencies: Dict[Type, Callable[[IContainer], Any]], lifetime: Lifetime) -> None:
        for service_type, builder in dependencies.items():
            self.register(Recipe(declared_type=service_type, builder=builder, lifetime=lifetime))

    def register_singletons(self, dependencies: Dict[Type, Callable[[IContainer], Any]]) -> None:
        """Register multiple singleton dependencies at once.

        Singleton dependencies are created once and shared across the entire application.

        Args:
            dependencies: Dictionary mapping dependency types to builder functions.
                         Each builder receives the container and returns an instance.

        Example:
            >>> container.register_singletons({
            ...     DatabaseConfig: lambda c: DatabaseConfig.from_env(),
            ...     DatabaseConnection: lambda c: DatabaseConnection(c.resolve(DatabaseConfig)),
            ... })
        """
        self._register_builders(dependencies, Lifetime.SINGLETON)

    def register_transients(self, dependencies: Dict[Type, Callable[[IContainer], Any]]) -> None:
        """Register multiple transient dependencies at once.

        Transient dependencies are created fresh on each resolution.

        Args:
            dependencies: Dictionary mapping dependency types to builder functions.
                         Each builder receives the container and returns an instance.
        """
        self._register_builders(dependencies, Lifetime.TRANSIENT)

    def load_modules(self, *modules: Module) -> None:
        """Register every recipe of the given modules, in order."""
        for module in modules:
            for recipe in module.recipes:
                self.register(recipe)

    def scan_packages(self, *package_names: str) -> None:
        """Register every ``@component`` class found in the given packages.

        Components are registered under their marker name, or the class name
        with a lower-cased first letter, and are constructed reflectively.

        Raises:
            ComponentScanError: If a package cannot be imported.
        """
        for package_name in package_names:
            for discovered in self._discovery.discover(package_name):
                self.register(
                    Recipe(
                        declared_type=discovered.service_type,
                        lifetime=discovered.lifetime or self._config.component_lifetime,
                        name=discovered.name,
                    )
                )
            logger.debug("Scanned package %s", package_name)

    def resolve(self, service_type: Type[T]) -> T:
        """Resolve and return an instance of the specified type.

        Args:
            service_type: The type to resolve.

        Returns:
            Instance of the requested type with all dependencies injected.

        Raises:
            ServiceNotFoundError: If nothing registered satisfies the type.
            CircularDependencyError: If a circular dependency is detected.
            ConstructionError: If the instance cannot be constructed.
            InjectionError: If a field cannot be written.

        Example:
            >>> user_service = container.resolve(UserService)
        """
        return self._get_instance(self._resolver.resolve(service_type))

    def resolve_named(self, name: str, service_type: Type[T]) -> T:
        """Resolve the instance registered under ``name``.

        Raises:
            ServiceNotFoundError: If the name is unknown or its type is not
                compatible with ``service_type``.

        Example:
            >>> premium = container.resolve_named("premiumRepo", UserRepository)
        """
        return self._get_instance(self._resolver.resolve_named(name, service_type))

    def _get_instance(self, definition: BeanDefinition) -> Any:
        return self._lifetime_manager.get_or_create(definition, lambda: self._build(definition))

    def _build(self, definition: BeanDefinition) -> Any:
        recipe = definition.recipe
        if recipe.factory is not None:
            instance = recipe.factory()
        elif recipe.builder is not None:
            instance = recipe.builder(self)
        else:
            instance = self._materializer.construct(recipe.declared_type, self)
        self._materializer.inject(instance, self)
        return instance

    def create_instance(self, service_type: Type[T]) -> T:
        """Construct and inject a fresh instance of ``service_type``.

        No recipe is looked up for ``service_type`` itself; its dependencies are
        still resolved through the registry.
        """
        return self._materializer.create(service_type, self)

    def inject_dependencies(self, instance: Any) -> None:
        """Run field injection on an already constructed instance."""
        self._materializer.inject(instance, self)

    def get_registry_copy(self) -> List[Recipe]:
        """Get the registered recipes in registration order.

        Returns:
            Copy of the registered recipes.
        """
        return self._registry.recipes()

    def clear_caches(self) -> None:
        """Drop the assignability memo, type descriptors and scan results.

        Registered recipes and materialized singletons are left untouched.
        """
        self._resolver.clear_memo()
        self._introspector.clear_cache()
        self._discovery.clear_cache()

    def clear(self) -> None:
        """Clear all registrations, cached instances and derived caches.

        Useful for testing or resetting the container state.
        """
        self._registry.clear()
        self._lifetime_manager.clear_cache()
        self._circular_detector.clear()
        self.clear_caches()
