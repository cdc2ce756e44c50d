import inspect
import threading
from typing import Any, Dict, List, Optional, Type, get_type_hints

from easydi.domain import (
    ComponentInfo,
    ConstructorDescriptor,
    ConstructorParameter,
    FieldDescriptor,
    Inject,
    InjectionError,
    ITypeIntrospector,
    NoSuitableConstructorError,
    TypeDescriptor,
)
from easydi.domain.markers import COMPONENT_ATTRIBUTE, INJECT_ATTRIBUTE


class TypeIntrospector(ITypeIntrospector):
    """Builds type descriptors from markers, annotations and signatures.

    Uses Python's inspect module and type hints to find ``Inject`` fields,
    ``@inject`` constructors, no-argument constructors and ``@component``
    markers. Descriptors are pure functions of the type and are cached per type.
    """

    def __init__(self) -> None:
        self._cache: Dict[Type, TypeDescriptor] = {}
        self._lock = threading.Lock()

    def describe(self, service_type: Type) -> TypeDescriptor:
        """Return the (cached) descriptor for ``service_type``.

        Raises:
            NoSuitableConstructorError: If an ``@inject`` constructor has a
                required parameter without a type hint.
        """
        with self._lock:
            descriptor = self._cache.get(service_type)
        if descriptor is not None:
            return descriptor

        descriptor = TypeDescriptor(
            service_type=service_type,
            fields=self._find_fields(service_type),
            constructor=self._find_injectable_constructor(service_type),
            has_default_constructor=self._has_default_constructor(service_type),
            component=self._find_component(service_type),
        )
        with self._lock:
            return self._cache.setdefault(service_type, descriptor)

    def component(self, service_type: Type) -> Optional[ComponentInfo]:
        return self._find_component(service_type)

    def component_name(self, service_type: Type) -> Optional[str]:
        component = self._find_component(service_type)
        return component.name if component else None

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    @staticmethod
    def _find_component(service_type: Type) -> Optional[ComponentInfo]:
        # Read from the class dict so the marker is not inherited.
        return vars(service_type).get(COMPONENT_ATTRIBUTE)

    @staticmethod
    def _find_fields(service_type: Type) -> List[FieldDescriptor]:
        """Collect ``Inject`` fields from the type and all its ancestors, ancestors first."""
        fields: List[FieldDescriptor] = []
        for owner in reversed(service_type.__mro__):
            if owner is object:
                continue
            markers = {name: value for name, value in vars(owner).items() if isinstance(value, Inject)}
            if not markers:
                continue

            hints = _annotations_of(owner)
            for name, marker in markers.items():
                field_type = marker.service_type or hints.get(name)
                if field_type is None:
                    raise InjectionError(service_type, name, f"Field declared on {owner.__name__} has no type")
                fields.append(FieldDescriptor(owner=owner, name=name, service_type=field_type))
        return fields

    @staticmethod
    def _find_injectable_constructor(service_type: Type) -> Optional[ConstructorDescriptor]:
        init = service_type.__init__
        if not getattr(init, INJECT_ATTRIBUTE, False):
            return None

        signature = inspect.signature(init)
        try:
            type_hints = get_type_hints(init)
        except (NameError, TypeError) as e:
            raise NoSuitableConstructorError(service_type, f"Cannot evaluate constructor type hints: {e}") from e

        parameters: List[ConstructorParameter] = []
        for param_name, param in list(signature.parameters.items())[1:]:
            # Skip *args and **kwargs parameters
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue

            # Skip parameters with defaults (let them use default values)
            if param.default is not inspect.Parameter.empty:
                continue

            if param_name not in type_hints:
                raise NoSuitableConstructorError(
                    service_type,
                    f"Parameter '{param_name}' lacks type hint and has no default value",
                )

            parameters.append(
                ConstructorParameter(
                    name=param_name,
                    service_type=type_hints[param_name],
                    keyword_only=param.kind == inspect.Parameter.KEYWORD_ONLY,
                )
            )
        return ConstructorDescriptor(parameters=parameters)

    @staticmethod
    def _has_default_constructor(service_type: Type) -> bool:
        if inspect.isabstract(service_type):
            return False
        try:
            signature = inspect.signature(service_type)
        except (TypeError, ValueError):
            # Builtins without an introspectable signature.
            return True
        try:
            signature.bind()
        except TypeError:
            return False
        return True


def _annotations_of(owner: Type) -> Dict[str, Any]:
    try:
        return get_type_hints(owner)
    except (NameError, TypeError):
        return inspect.get_annotations(owner)
