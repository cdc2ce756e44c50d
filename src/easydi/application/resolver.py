import threading
from abc import get_cache_token
from typing import Dict, Tuple, Type

from easydi.application.registry import DefinitionRegistry
from easydi.domain import BeanDefinition, IResolver, ServiceNotFoundError


class ServiceResolver(IResolver):
    """Finds the definition satisfying a requested type or name.

    Lookup by type tries the exact type key first and then falls back to the
    first registered type key assignable to the request. Lookup by name is
    strict: an incompatible type fails rather than falling back to a type scan.

    Attributes:
        _registry: The registry to search.
        _memoize: Whether assignability decisions are cached.
        _memo: Assignability decisions keyed by ``(requested, candidate)`` and the ABC cache token.
        _memo_token: ABC cache token the memo was last cleared for.
    """

    def __init__(self, registry: DefinitionRegistry, memoize: bool = True) -> None:
        self._registry = registry
        self._memoize = memoize
        self._memo: Dict[Tuple[Type, Type, object], bool] = {}
        self._memo_token = get_cache_token()
        self._memo_lock = threading.Lock()

    def resolve(self, service_type: Type) -> BeanDefinition:
        """Find the definition for a type.

        Args:
            service_type: The requested type.

        Returns:
            The first definition for the exact type, otherwise the first
            definition of the first assignable type key in registration order.

        Raises:
            ServiceNotFoundError: If nothing registered satisfies the type.

        Example:
            >>> registry.register(Recipe(declared_type=SmtpMailer, factory=SmtpMailer))
            >>> resolver.resolve(Mailer).declared_type
            <class 'SmtpMailer'>
        """
        definition = self._registry.by_type(service_type)
        if definition is not None:
            return definition

        for candidate_type, candidate in self._registry.iter_types():
            if self.is_assignable(service_type, candidate_type):
                return candidate

        raise ServiceNotFoundError(service_type)

    def resolve_named(self, name: str, service_type: Type) -> BeanDefinition:
        """Find the definition registered under ``name``.

        Raises:
            ServiceNotFoundError: If the name is unknown, or if the registered
                declared type is not assignable to ``service_type``.
        """
        definition = self._registry.by_name(name)
        if definition is None:
            raise ServiceNotFoundError(service_type, name=name)

        if not self.is_assignable(service_type, definition.declared_type):
            raise ServiceNotFoundError(service_type, name=name, found_type=definition.declared_type)

        return definition

    def is_assignable(self, requested: Type, candidate: Type) -> bool:
        """Return True if an instance of ``candidate`` satisfies a request for ``requested``."""
        if requested is candidate:
            return True
        if not self._memoize:
            return self._check(requested, candidate)

        key = (requested, candidate, self._sync_memo_token())
        try:
            return self._memo[key]
        except KeyError:
            pass
        except TypeError:
            # Unhashable type arguments cannot be memoized.
            return self._check(requested, candidate)

        result = self._check(requested, candidate)
        with self._memo_lock:
            self._memo[key] = result
        return result

    def clear_memo(self) -> None:
        with self._memo_lock:
            self._memo.clear()

    def _sync_memo_token(self) -> object:
        # ABC.register changes the token, so answers memoized under an older one are stale.
        token = get_cache_token()
        if token != self._memo_token:
            with self._memo_lock:
                if token != self._memo_token:
                    self._memo.clear()
                    self._memo_token = token
        return token

    @staticmethod
    def _check(requested: Type, candidate: Type) -> bool:
        try:
            return issubclass(candidate, requested)
        except TypeError:
            # Generic aliases and non runtime-checkable protocols.
            return False
