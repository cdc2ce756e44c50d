"""
Application layer - Use cases and orchestration.

This layer contains the use cases that orchestrate domain objects.
It depends only on the Domain layer.
"""

from .circular_detector import CircularDependencyDetector
from .component_scanner import ComponentScanner, default_component_name
from .container import DIContainer
from .introspector import TypeIntrospector
from .lifetime_manager import LifetimeManager
from .materializer import InstanceMaterializer
from .module import Module
from .registry import DefinitionRegistry
from .resolver import ServiceResolver

__all__ = [
    "DIContainer",
    "Module",
    "DefinitionRegistry",
    "ServiceResolver",
    "InstanceMaterializer",
    "LifetimeManager",
    "CircularDependencyDetector",
    "TypeIntrospector",
    "ComponentScanner",
    "default_component_name",
]
