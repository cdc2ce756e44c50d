import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Type

from easydi.application.circular_detector import CircularDependencyDetector
from easydi.domain import BeanDefinition, CircularDependencyError, ConstructionError, DIException, ILifetimeManager

logger = logging.getLogger(__name__)


class LifetimeManager(ILifetimeManager):
    """Manages instance lifetimes for singleton and transient definitions.

    Singleton entries move from empty to materialized at most once. The first
    caller to find an entry empty builds the instance while holding the
    definition's lock; the instance is published only after the factory has
    returned a fully injected object, so no other thread can observe a
    partially constructed instance.

    Threads building different singletons that need each other would block
    forever on each other's definition locks. Before blocking, a thread follows
    the owner and waiting maps; if the chain leads back to itself it raises
    ``CircularDependencyError`` instead.

    Attributes:
        _detector: Detects a definition re-entering its own construction.
        _materialized: Definitions whose singleton instance has been published.
        _owners: Thread ident holding each definition lock, keyed by ``id(definition)``.
        _waiting: Definition each thread is blocked on, keyed by thread ident.
    """

    def __init__(self, detector: CircularDependencyDetector) -> None:
        self._detector = detector
        self._materialized: List[BeanDefinition] = []
        self._owners: Dict[int, int] = {}
        self._waiting: Dict[int, BeanDefinition] = {}
        self._lock = threading.Lock()

    def get_or_create(self, definition: BeanDefinition, factory: Callable[[], Any]) -> Any:
        """Get existing instance or create new one based on lifetime.

        Args:
            definition: Definition holding the recipe and its cache entry.
            factory: Function producing a new, fully injected instance.

        Returns:
            Instance according to lifetime rules:
            - Singleton: Returns the published instance or builds and publishes it
            - Transient: Always builds a new instance

        Raises:
            CircularDependencyError: If the definition is re-entered while being built, on
                this thread or through threads waiting on each other.
            ConstructionError: If the factory raised a non-DI exception.
        """
        with self._lock:
            definition.resolution_count += 1

        if not definition.recipe.is_singleton:
            return self._build(definition, factory)

        if definition.is_materialized:
            return definition.cached_instance

        with self._detector.constructing(definition):
            self._acquire(definition)
            try:
                if not definition.is_materialized:
                    instance = self._build(definition, factory)
                    definition.cached_instance = instance
                    definition.is_materialized = True
                    with self._lock:
                        self._materialized.append(definition)
                    logger.debug("Materialized singleton %s", definition.declared_type.__name__)
            finally:
                self._release(definition)
            return definition.cached_instance

    def _acquire(self, definition: BeanDefinition) -> None:
        me = threading.get_ident()
        with self._lock:
            chain = self._wait_chain(definition, me)
            if chain is not None:
                logger.warning("Threads building %s wait on each other", definition.declared_type.__name__)
                raise CircularDependencyError(chain + [chain[0]])
            self._waiting[me] = definition

        definition.lock.acquire()
        with self._lock:
            del self._waiting[me]
            self._owners[id(definition)] = me

    def _release(self, definition: BeanDefinition) -> None:
        with self._lock:
            del self._owners[id(definition)]
        definition.lock.release()

    def _wait_chain(self, definition: BeanDefinition, me: int) -> Optional[List[Type]]:
        """Follow lock owners from ``definition``; return the types passed if the path ends at ``me``."""
        chain: List[Type] = []
        visited = set()
        current: Optional[BeanDefinition] = definition
        while current is not None:
            owner = self._owners.get(id(current))
            if owner is None or owner in visited:
                return None
            chain.append(current.declared_type)
            if owner == me:
                return chain
            visited.add(owner)
            current = self._waiting.get(owner)
        return None

    def _build(self, definition: BeanDefinition, factory: Callable[[], Any]) -> Any:
        if definition.recipe.is_singleton:
            return self._invoke(definition, factory)
        with self._detector.constructing(definition):
            return self._invoke(definition, factory)

    @staticmethod
    def _invoke(definition: BeanDefinition, factory: Callable[[], Any]) -> Any:
        try:
            return factory()
        except DIException:
            raise
        except Exception as e:
            raise ConstructionError(definition.declared_type, f"Factory raised {type(e).__name__}: {e}") from e

    def clear_cache(self) -> None:
        """Return every materialized singleton entry to the empty state.

        Useful for testing or resetting container state.
        """
        with self._lock:
            materialized, self._materialized = self._materialized, []
        for definition in materialized:
            definition.reset()
