"""Marker declarations read by the type introspector.

Markers only attach metadata to classes and functions; they never resolve anything.
"""

from typing import Any, Callable, Optional, Type, TypeVar, overload

from easydi.domain.enums import Lifetime
from easydi.domain.models import ComponentInfo

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])

INJECT_ATTRIBUTE = "__easydi_inject__"
COMPONENT_ATTRIBUTE = "__easydi_component__"


class Inject:
    """Marks a class attribute as a field to be injected after construction.

    The field type is taken from the explicit ``service_type`` argument or, when
    omitted, from the attribute annotation on the owning class.

    Example:
        >>> class UserService:
        ...     user_repository: UserRepository = Inject()
        ...     mailer = Inject(Mailer)
    """

    def __init__(self, service_type: Optional[Type] = None) -> None:
        self.service_type = service_type
        self.name: Optional[str] = None
        self.owner: Optional[Type] = None

    def __set_name__(self, owner: Type, name: str) -> None:
        self.owner = owner
        self.name = name

    def __get__(self, instance: Any, owner: Optional[Type] = None) -> Any:
        if instance is None:
            return self
        # Injected values live in the instance dict and shadow this descriptor.
        raise AttributeError(f"Field '{self.name}' of {type(instance).__name__} has not been injected")

    def __repr__(self) -> str:
        target = getattr(self.service_type, "__name__", None)
        return f"Inject({target})" if target else "Inject()"


def inject(func: F) -> F:
    """Mark a constructor for injection.

    Each parameter of the decorated ``__init__`` is resolved by its type hint.

    Example:
        >>> class NotificationService:
        ...     @inject
        ...     def __init__(self, user_service: UserService):
        ...         self.user_service = user_service
    """
    setattr(func, INJECT_ATTRIBUTE, True)
    return func


@overload
def component(cls: Type[T]) -> Type[T]: ...


@overload
def component(
    cls: None = None, *, name: Optional[str] = None, lifetime: Optional[Lifetime] = None
) -> Callable[[Type[T]], Type[T]]: ...


def component(cls=None, *, name=None, lifetime=None):
    """Mark a class as a component to be picked up by package scanning.

    Usable bare (``@component``) or with options (``@component(name="premiumRepo")``).
    The marker is not inherited: subclasses must be marked themselves.

    Args:
        cls: The class being decorated when used without arguments.
        name: Registration name; defaults to the class name with a lower-cased first letter.
        lifetime: Lifetime override; defaults to the container's configured component lifetime.
    """

    def decorate(target: Type[T]) -> Type[T]:
        setattr(target, COMPONENT_ATTRIBUTE, ComponentInfo(name=name or None, lifetime=lifetime))
        return target

    if cls is None:
        return decorate
    return decorate(cls)
