"""Unit tests for ServiceResolver."""

from abc import ABC, abstractmethod, get_cache_token
from typing import List, Protocol, runtime_checkable

import pytest

from easydi.application.registry import DefinitionRegistry
from easydi.application.resolver import ServiceResolver
from easydi.domain import IResolver, Recipe, ServiceNotFoundError


class Greeter(ABC):
    @abstractmethod
    def greet(self, name: str) -> str: ...


class EnglishGreeter(Greeter):
    def greet(self, name: str) -> str:
        return f"Hello, {name}!"


class UserRepository:
    pass


class PremiumUserRepository(UserRepository):
    pass


class Counter:
    pass


class Plugin(ABC):
    pass


class AuditPlugin:
    """Implements Plugin only through virtual subclass registration."""


Plugin.register(AuditPlugin)


@runtime_checkable
class Closeable(Protocol):
    def close(self) -> None: ...


class Connection:
    def close(self) -> None:
        pass


@pytest.fixture
def registry():
    return DefinitionRegistry()


@pytest.fixture
def resolver(registry):
    return ServiceResolver(registry)


class TestResolverInitialization:
    """Test cases for ServiceResolver initialization."""

    def test_resolver_implements_interface(self, resolver):
        """Test that ServiceResolver implements IResolver."""
        assert isinstance(resolver, IResolver)


class TestResolveByType:
    """Test cases for resolution by type."""

    def test_exact_type(self, registry, resolver):
        """Test that an exact type match is returned."""
        definition = registry.register(Recipe(declared_type=Counter))

        assert resolver.resolve(Counter) is definition

    def test_exact_match_prefers_first_registered(self, registry, resolver):
        """Test that the first registered definition wins for a type."""
        first = registry.register(Recipe(declared_type=Counter))
        registry.register(Recipe(declared_type=Counter))

        assert resolver.resolve(Counter) is first

    def test_capability_lookup_through_abc(self, registry, resolver):
        """Test that a concrete type is reachable through its abstract base."""
        definition = registry.register(Recipe(declared_type=EnglishGreeter))

        assert resolver.resolve(Greeter) is definition

    def test_ancestor_lookup(self, registry, resolver):
        """Test that a subclass is reachable through its superclass."""
        definition = registry.register(Recipe(declared_type=PremiumUserRepository))

        assert resolver.resolve(UserRepository) is definition

    def test_virtual_subclass_found_by_scan(self, registry, resolver):
        """Test that ABC.register-ed implementations are found by the assignability scan."""
        definition = registry.register(Recipe(declared_type=AuditPlugin))

        assert resolver.resolve(Plugin) is definition

    def test_runtime_checkable_protocol_found_by_scan(self, registry, resolver):
        """Test that structural protocol implementations are found by the scan."""
        definition = registry.register(Recipe(declared_type=Connection))

        assert resolver.resolve(Closeable) is definition

    def test_unregistered_type_raises(self, registry, resolver):
        """Test that an unmatched type raises ServiceNotFoundError."""
        registry.register(Recipe(declared_type=Counter))

        with pytest.raises(ServiceNotFoundError) as exc_info:
            resolver.resolve(UserRepository)

        assert exc_info.value.service_type is UserRepository
        assert exc_info.value.name is None

    def test_subclass_request_does_not_match_base_registration(self, registry, resolver):
        """Test that a base registration does not satisfy a subclass request."""
        registry.register(Recipe(declared_type=UserRepository))

        with pytest.raises(ServiceNotFoundError):
            resolver.resolve(PremiumUserRepository)

    def test_generic_alias_request_is_not_assignable(self, registry, resolver):
        """Test that unsupported type arguments fail cleanly."""
        registry.register(Recipe(declared_type=Counter))

        with pytest.raises(ServiceNotFoundError):
            resolver.resolve(List[int])


class TestResolveByName:
    """Test cases for resolution by name."""

    def test_named_lookup(self, registry, resolver):
        """Test that a named definition is returned."""
        definition = registry.register(Recipe(declared_type=PremiumUserRepository, name="premiumRepo"))

        assert resolver.resolve_named("premiumRepo", UserRepository) is definition

    def test_unknown_name_raises(self, resolver):
        """Test that an unknown name raises ServiceNotFoundError."""
        with pytest.raises(ServiceNotFoundError) as exc_info:
            resolver.resolve_named("missing", Counter)

        assert exc_info.value.name == "missing"
        assert exc_info.value.found_type is None

    def test_incompatible_type_raises(self, registry, resolver):
        """Test that a name hit with an incompatible type raises ServiceNotFoundError."""
        registry.register(Recipe(declared_type=UserRepository, name="repo"))

        with pytest.raises(ServiceNotFoundError) as exc_info:
            resolver.resolve_named("repo", Counter)

        assert exc_info.value.found_type is UserRepository
        assert exc_info.value.service_type is Counter

    def test_named_lookup_does_not_fall_back_to_type(self, registry, resolver):
        """Test that a bad name never falls back to a type match."""
        registry.register(Recipe(declared_type=Counter))

        with pytest.raises(ServiceNotFoundError):
            resolver.resolve_named("counter", Counter)


class TestAssignabilityMemo:
    """Test cases for memoized assignability checks."""

    def test_memo_records_pair_decisions(self, resolver):
        """Test that decisions are cached per (requested, candidate) pair."""
        assert resolver.is_assignable(UserRepository, PremiumUserRepository) is True
        assert resolver.is_assignable(Counter, PremiumUserRepository) is False

        token = get_cache_token()
        assert resolver._memo[(UserRepository, PremiumUserRepository, token)] is True
        assert resolver._memo[(Counter, PremiumUserRepository, token)] is False

    def test_memo_does_not_conflate_requests_for_same_candidate(self, resolver):
        """Test that one candidate can be assignable to one request and not another."""
        assert resolver.is_assignable(Greeter, EnglishGreeter) is True
        assert resolver.is_assignable(Counter, EnglishGreeter) is False
        assert resolver.is_assignable(Greeter, EnglishGreeter) is True

    def test_clear_memo_does_not_change_results(self, registry, resolver):
        """Test that clearing the memo only affects latency."""
        definition = registry.register(Recipe(declared_type=AuditPlugin))
        before = resolver.resolve(Plugin)

        resolver.clear_memo()

        assert resolver._memo == {}
        assert resolver.resolve(Plugin) is before is definition

    def test_memo_disabled(self, registry):
        """Test that memoization can be turned off."""
        resolver = ServiceResolver(registry, memoize=False)
        registry.register(Recipe(declared_type=AuditPlugin))

        resolver.resolve(Plugin)

        assert resolver._memo == {}

    def test_virtual_subclass_registered_after_lookup(self, registry, resolver):
        """Test that ABC.register after a failed lookup is honoured by the memoized resolver."""

        class Capability(ABC):
            pass

        class Implementation:
            pass

        registry.register(Recipe(declared_type=Implementation))
        with pytest.raises(ServiceNotFoundError):
            resolver.resolve(Capability)

        Capability.register(Implementation)

        assert resolver.resolve(Capability).declared_type is Implementation
        assert resolver.is_assignable(Capability, Implementation) is True
