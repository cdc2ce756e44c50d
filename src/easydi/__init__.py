"""
easydi: Lightweight marker-based inversion-of-control container.

Public API exports for the easydi package.
"""

# Application exports
from easydi.application.container import DIContainer
from easydi.application.module import Module

# Domain exports
from easydi.domain.config import ContainerConfig
from easydi.domain.enums import Lifetime
from easydi.domain.exceptions import (
    CircularDependencyError,
    ComponentScanError,
    ConstructionError,
    DIException,
    InjectionError,
    NoSuitableConstructorError,
    ServiceNotFoundError,
)
from easydi.domain.markers import Inject, component, inject
from easydi.domain.models import Recipe, ServiceIdentity

__version__ = "0.1.0"

__all__ = [
    # Container
    "DIContainer",
    "Module",
    "ContainerConfig",
    # Models
    "Recipe",
    "ServiceIdentity",
    # Enums
    "Lifetime",
    # Markers
    "Inject",
    "inject",
    "component",
    # Exceptions
    "DIException",
    "ServiceNotFoundError",
    "CircularDependencyError",
    "ConstructionError",
    "NoSuitableConstructorError",
    "InjectionError",
    "ComponentScanError",
]
