"""
Domain layer - Core models, markers and contracts.

This layer contains the fundamental rules and models for dependency injection.
It has no dependencies on other layers.
"""

from .config import ContainerConfig
from .enums import Lifetime
from .exceptions import (
    CircularDependencyError,
    ComponentScanError,
    ConstructionError,
    DIException,
    InjectionError,
    NoSuitableConstructorError,
    ServiceNotFoundError,
)
from .interfaces import IComponentDiscovery, IContainer, ILifetimeManager, IResolver, ITypeIntrospector
from .markers import Inject, component, inject
from .models import (
    BeanDefinition,
    ComponentInfo,
    ConstructorDescriptor,
    ConstructorParameter,
    DiscoveredComponent,
    FieldDescriptor,
    Recipe,
    ServiceIdentity,
    TypeDescriptor,
)

__all__ = [
    # Config
    "ContainerConfig",
    # Enums
    "Lifetime",
    # Exceptions
    "DIException",
    "ServiceNotFoundError",
    "CircularDependencyError",
    "ConstructionError",
    "NoSuitableConstructorError",
    "InjectionError",
    "ComponentScanError",
    # Interfaces
    "IContainer",
    "IResolver",
    "ILifetimeManager",
    "ITypeIntrospector",
    "IComponentDiscovery",
    # Markers
    "Inject",
    "inject",
    "component",
    # Models
    "ServiceIdentity",
    "Recipe",
    "BeanDefinition",
    "ComponentInfo",
    "FieldDescriptor",
    "ConstructorParameter",
    "ConstructorDescriptor",
    "TypeDescriptor",
    "DiscoveredComponent",
]
