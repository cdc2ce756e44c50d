"""Application layer - Circular dependency detection."""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Type

from easydi.domain import BeanDefinition, CircularDependencyError

logger = logging.getLogger(__name__)


class CircularDependencyDetector:
    """Detects circular dependencies during construction and injection.

    Tracks two things per thread:
    - the instances currently receiving field injection (the in-flight set);
    - the definitions currently being constructed, in call order.

    Re-entering either one from the same thread is a cycle. State is thread-local,
    so unrelated resolution chains running on other threads never report a cycle
    for each other.

    Attributes:
        _local: Thread-local storage for in-flight instances and definitions.
    """

    def __init__(self) -> None:
        """Initialize the circular dependency detector with thread-local storage."""
        self._local = threading.local()

    def _get_in_flight(self) -> Dict[int, Any]:
        """Get the current thread's in-flight instances keyed by ``id()``."""
        if not hasattr(self._local, "in_flight"):
            self._local.in_flight = {}
        return self._local.in_flight

    def _get_stack(self) -> List[BeanDefinition]:
        """Get the current thread's stack of definitions under construction."""
        if not hasattr(self._local, "stack"):
            self._local.stack = []
        return self._local.stack

    def enter_instance(self, instance: Any) -> None:
        """Mark an instance as receiving field injection.

        Raises:
            CircularDependencyError: If injection into this exact instance is already in progress.
        """
        in_flight = self._get_in_flight()
        if id(instance) in in_flight:
            chain = [type(item) for item in in_flight.values()] + [type(instance)]
            logger.warning("Field injection re-entered %s", type(instance).__name__)
            raise CircularDependencyError(chain)
        in_flight[id(instance)] = instance

    def exit_instance(self, instance: Any) -> None:
        self._get_in_flight().pop(id(instance), None)

    @contextmanager
    def injecting(self, instance: Any) -> Iterator[None]:
        """Context manager wrapping field injection of one instance.

        Example:
            >>> with detector.injecting(service):
            ...     inject_fields(service)
        """
        self.enter_instance(instance)
        try:
            yield
        finally:
            self.exit_instance(instance)

    @contextmanager
    def constructing(self, definition: BeanDefinition) -> Iterator[None]:
        """Context manager wrapping construction of one definition's instance.

        Raises:
            CircularDependencyError: If this thread is already constructing the definition.
        """
        stack = self._get_stack()
        if any(entry is definition for entry in stack):
            start = next(index for index, entry in enumerate(stack) if entry is definition)
            chain: List[Type] = [entry.declared_type for entry in stack[start:]] + [definition.declared_type]
            logger.warning("Construction of %s re-entered itself", definition.declared_type.__name__)
            raise CircularDependencyError(chain)

        stack.append(definition)
        try:
            yield
        finally:
            stack.pop()

    def in_flight_count(self) -> int:
        """Number of instances the current thread is injecting."""
        return len(self._get_in_flight())

    def clear(self) -> None:
        """Clear the current thread's tracking state.

        Useful for testing or error recovery.
        """
        if hasattr(self._local, "in_flight"):
            self._local.in_flight.clear()
        if hasattr(self._local, "stack"):
            self._local.stack.clear()
