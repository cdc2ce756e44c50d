from typing import Any, Callable, List, Optional, Type, TypeVar

from easydi.domain import Lifetime, Recipe

T = TypeVar("T")


class Module:
    """Declarative group of recipes loaded into a container in one call.

    Example:
        >>> module = (
        ...     Module()
        ...     .singleton(UserRepository)
        ...     .singleton(UserRepository, PremiumUserRepository, name="premiumRepo")
        ...     .factory(Counter, name="counter")
        ... )
        >>> container.load_modules(module)
    """

    def __init__(self) -> None:
        self._recipes: List[Recipe] = []

    def singleton(
        self,
        service_type: Type[T],
        factory: Optional[Callable[[], Any]] = None,
        name: Optional[str] = None,
    ) -> "Module":
        """Define a singleton recipe.

        Args:
            service_type: The declared type of the recipe.
            factory: Zero-argument callable producing the instance; omitted means
                the container constructs ``service_type`` itself.
            name: Optional registration name.
        """
        return self._add(service_type, factory, name, Lifetime.SINGLETON)

    def factory(
        self,
        service_type: Type[T],
        factory: Optional[Callable[[], Any]] = None,
        name: Optional[str] = None,
    ) -> "Module":
        """Define a transient recipe producing a new instance on every resolution."""
        return self._add(service_type, factory, name, Lifetime.TRANSIENT)

    def _add(
        self,
        service_type: Type,
        factory: Optional[Callable[[], Any]],
        name: Optional[str],
        lifetime: Lifetime,
    ) -> "Module":
        self._recipes.append(Recipe(declared_type=service_type, factory=factory, lifetime=lifetime, name=name or None))
        return self

    @property
    def recipes(self) -> List[Recipe]:
        return list(self._recipes)

    def __len__(self) -> int:
        return len(self._recipes)
