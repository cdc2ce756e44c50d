from typing import List, Optional, Type


def _type_name(cls: object) -> str:
    return getattr(cls, "__name__", repr(cls))


class DIException(Exception):
    """Base exception for DI-related errors."""


class ServiceNotFoundError(DIException):
    """Raised when no recipe satisfies a requested service identity.

    This occurs when:
    - Nothing is registered for the requested type, directly or by capability.
    - The requested name is not registered.
    - The name is registered but its declared type is incompatible with the requested type.

    Attributes:
        service_type: The type that was requested.
        name: The requested name, if the lookup was by name.
        found_type: Declared type of the recipe found under ``name`` when it was incompatible.
        reason: Optional reason for the failure.
    """

    def __init__(
        self,
        service_type: Type,
        name: Optional[str] = None,
        found_type: Optional[Type] = None,
        reason: Optional[str] = None,
    ) -> None:
        self.service_type = service_type
        self.name = name
        self.found_type = found_type
        self.reason = reason
        if name is None:
            message = f"No service found for type: {_type_name(service_type)}"
        elif found_type is None:
            message = f"No service found for name: {name}"
        else:
            message = (
                f"Service found for name: {name} but its type {_type_name(found_type)} "
                f"is not compatible with required type: {_type_name(service_type)}"
            )
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class CircularDependencyError(DIException):
    """Raised when a circular dependency is detected.

    Attributes:
        dependency_chain: List of types involved in the circular dependency.
    """

    def __init__(self, dependency_chain: List[Type]) -> None:
        self.dependency_chain = dependency_chain
        message = f"Circular dependency detected: {' -> '.join([_type_name(cls) for cls in dependency_chain])}"
        super().__init__(message)


class ConstructionError(DIException):
    """Raised when an instance of a type cannot be constructed.

    Attributes:
        cls: The class type that could not be constructed.
        reason: Optional reason for the failure.
    """

    def __init__(self, cls: Type, reason: Optional[str] = None) -> None:
        self.cls = cls
        self.reason = reason
        message = f"Failed to create instance of {_type_name(cls)}"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class NoSuitableConstructorError(ConstructionError):
    """Raised when a type has neither an ``@inject`` constructor nor a no-argument constructor."""


class InjectionError(DIException):
    """Raised when a resolved dependency cannot be written into a field.

    Attributes:
        cls: The class owning the field.
        field_name: Name of the field that could not be written.
        reason: Optional reason for the failure.
    """

    def __init__(self, cls: Type, field_name: str, reason: Optional[str] = None) -> None:
        self.cls = cls
        self.field_name = field_name
        self.reason = reason
        message = f"Failed to inject field '{field_name}' of {_type_name(cls)}"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class ComponentScanError(DIException):
    """Raised when a package cannot be scanned for components.

    Attributes:
        package_name: Dotted name of the package being scanned.
        reason: Optional reason for the failure.
    """

    def __init__(self, package_name: str, reason: Optional[str] = None) -> None:
        self.package_name = package_name
        self.reason = reason
        message = f"Failed to scan package: {package_name}"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)
