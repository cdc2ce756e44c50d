import threading
from typing import Any, Callable, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from easydi.domain.enums import Lifetime


class ServiceIdentity(BaseModel):
    """Value object identifying a service: a type, optionally qualified by a name.

    Attributes:
        service_type: The type of the service.
        name: Optional qualifying name. Empty names are treated as absent.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    service_type: Type = Field(..., description="The type of the service.")
    name: Optional[str] = Field(default=None, description="Optional qualifying name.")

    @property
    def is_named(self) -> bool:
        return bool(self.name)

    def same_named_identity(self, other: "ServiceIdentity") -> bool:
        """Return True when both identities carry the same non-empty name."""
        return self.is_named and other.is_named and self.name == other.name


class Recipe(BaseModel):
    """Immutable description of how to produce one service instance.

    The instance comes from ``factory`` when set, otherwise from ``builder``,
    otherwise the container constructs ``declared_type`` itself.

    Attributes:
        declared_type: The type the recipe produces; also its primary registry key.
        factory: Zero-argument callable returning a new instance.
        builder: Callable receiving the resolving container and returning a new instance.
        lifetime: Whether the produced instance is shared or fresh per resolution.
        name: Optional registration name.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    declared_type: Type = Field(..., description="The type produced by this recipe.")
    factory: Optional[Callable[[], Any]] = Field(
        default=None,
        description="Zero-argument callable producing an instance.",
    )
    builder: Optional[Callable[[Any], Any]] = Field(
        default=None,
        description="The builder function receiving the container and returning an instance.",
    )
    lifetime: Lifetime = Field(default=Lifetime.SINGLETON, description="The lifetime of produced instances.")
    name: Optional[str] = Field(default=None, description="Optional registration name.")

    @property
    def identity(self) -> ServiceIdentity:
        return ServiceIdentity(service_type=self.declared_type, name=self.name or None)

    @property
    def is_singleton(self) -> bool:
        return self.lifetime == Lifetime.SINGLETON


class BeanDefinition(BaseModel):
    """A registered recipe together with its lifecycle cache entry.

    The recipe never changes after registration. Only the cache fields are
    written, and only by the lifetime manager while holding ``lock``.

    Attributes:
        recipe: The registered recipe.
        cached_instance: Published singleton instance.
        is_materialized: True once ``cached_instance`` holds a fully injected instance.
        resolution_count: Number of times this definition has been resolved.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    recipe: Recipe = Field(..., description="The registered recipe.")
    cached_instance: Optional[Any] = Field(default=None, description="Published singleton instance.")
    is_materialized: bool = Field(default=False, description="Whether the singleton instance is published.")
    resolution_count: int = Field(default=0, description="Number of times this definition has been resolved.")

    _lock: Any = PrivateAttr(default_factory=threading.RLock)

    @property
    def lock(self) -> Any:
        """Recipe-scoped re-entrant lock guarding singleton materialization."""
        return self._lock

    @property
    def declared_type(self) -> Type:
        return self.recipe.declared_type

    def reset(self) -> None:
        """Drop the cached instance, returning the entry to the empty state."""
        with self._lock:
            self.is_materialized = False
            self.cached_instance = None


class ComponentInfo(BaseModel):
    """Metadata attached to a class by the ``@component`` marker."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    lifetime: Optional[Lifetime] = None


class FieldDescriptor(BaseModel):
    """A field marked for injection.

    Attributes:
        owner: The class that declares the field.
        name: Attribute name on the instance.
        service_type: The type resolved and written into the field.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    owner: Type
    name: str
    service_type: Any


class ConstructorParameter(BaseModel):
    """One parameter of an injectable constructor."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    service_type: Any
    keyword_only: bool = False


class ConstructorDescriptor(BaseModel):
    """An ``@inject`` constructor and its parameters in declared order."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    parameters: List[ConstructorParameter] = Field(default_factory=list)

    @property
    def parameter_types(self) -> List[Any]:
        return [parameter.service_type for parameter in self.parameters]


class TypeDescriptor(BaseModel):
    """Everything the container needs to know about a type to build and inject it.

    Attributes:
        service_type: The described type.
        fields: Injectable fields, ancestors' fields first.
        constructor: The ``@inject`` constructor, if any.
        has_default_constructor: Whether the type can be called with no arguments.
        component: The ``@component`` marker metadata, if the type carries it.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    service_type: Type
    fields: List[FieldDescriptor] = Field(default_factory=list)
    constructor: Optional[ConstructorDescriptor] = None
    has_default_constructor: bool = False
    component: Optional[ComponentInfo] = None

    @property
    def component_name(self) -> Optional[str]:
        return self.component.name if self.component else None


class DiscoveredComponent(BaseModel):
    """A component type found by package scanning."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    service_type: Type
    name: str
    lifetime: Optional[Lifetime] = None
