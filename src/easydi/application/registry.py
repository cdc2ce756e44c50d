"""Application layer - Definition registry."""

import logging
import threading
from typing import Dict, Iterator, List, Optional, Tuple, Type

from easydi.domain import BeanDefinition, Recipe

logger = logging.getLogger(__name__)


class DefinitionRegistry:
    """Indexes registered definitions by name and by type.

    A definition registered for a concrete type is also indexed under every
    ancestor in the type's MRO except ``object``, so it is reachable from each
    base class and ABC/Protocol base it inherits from. Per type key, definitions
    keep registration order and exact-type lookups return the first one.

    Attributes:
        _by_name: Name index; the last registration for a name wins.
        _by_type: Type index; lists are never empty when present.
        _definitions: All definitions in registration order.
        _lock: Guards every mutation and snapshot.
    """

    def __init__(self) -> None:
        self._by_name: Dict[str, BeanDefinition] = {}
        self._by_type: Dict[Type, List[BeanDefinition]] = {}
        self._definitions: List[BeanDefinition] = []
        self._lock = threading.RLock()

    def register(self, recipe: Recipe) -> BeanDefinition:
        """Index a recipe and return the definition wrapping it.

        Args:
            recipe: The recipe to register.

        Returns:
            The new definition holding the recipe's lifecycle cache entry.
        """
        definition = BeanDefinition(recipe=recipe)
        declared_type = recipe.declared_type

        with self._lock:
            if recipe.name:
                replaced = self._by_name.get(recipe.name)
                if replaced is not None:
                    logger.debug(
                        "Name '%s' now maps to %s, replacing %s",
                        recipe.name,
                        declared_type.__name__,
                        replaced.declared_type.__name__,
                    )
                self._by_name[recipe.name] = definition

            self._by_type.setdefault(declared_type, []).append(definition)
            for supertype in declared_type.__mro__[1:]:
                if supertype is object:
                    continue
                self._by_type.setdefault(supertype, []).append(definition)

            self._definitions.append(definition)

        logger.debug("Registered %s (%s, name=%r)", declared_type.__name__, recipe.lifetime, recipe.name)
        return definition

    def by_name(self, name: str) -> Optional[BeanDefinition]:
        with self._lock:
            return self._by_name.get(name)

    def by_type(self, service_type: Type) -> Optional[BeanDefinition]:
        """Return the first definition indexed under exactly ``service_type``."""
        with self._lock:
            definitions = self._by_type.get(service_type)
            return definitions[0] if definitions else None

    def iter_types(self) -> Iterator[Tuple[Type, BeanDefinition]]:
        """Iterate ``(type key, first definition)`` pairs over a snapshot of the type index."""
        with self._lock:
            snapshot = [(key, definitions[0]) for key, definitions in self._by_type.items() if definitions]
        return iter(snapshot)

    def definitions(self) -> List[BeanDefinition]:
        with self._lock:
            return list(self._definitions)

    def recipes(self) -> List[Recipe]:
        """Registered recipes in registration order."""
        with self._lock:
            return [definition.recipe for definition in self._definitions]

    def clear(self) -> None:
        """Empty both indices."""
        with self._lock:
            self._by_name.clear()
            self._by_type.clear()
            self._definitions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._definitions)

    def __contains__(self, service_type: object) -> bool:
        with self._lock:
            return service_type in self._by_type
