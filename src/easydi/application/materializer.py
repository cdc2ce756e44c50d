import logging
from typing import Any, Dict, List, Type, TypeVar

from easydi.application.circular_detector import CircularDependencyDetector
from easydi.domain import (
    ConstructionError,
    DIException,
    IContainer,
    InjectionError,
    ITypeIntrospector,
    NoSuitableConstructorError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InstanceMaterializer:
    """Constructs instances and injects their marked fields.

    Construction uses the ``@inject`` constructor when the type has one,
    resolving each parameter by type through the container, and otherwise the
    no-argument constructor. Field injection runs after construction and is
    guarded by the circular dependency detector.

    Attributes:
        _introspector: Source of type descriptors.
        _detector: Tracks instances currently receiving field injection.
    """

    def __init__(self, introspector: ITypeIntrospector, detector: CircularDependencyDetector) -> None:
        self._introspector = introspector
        self._detector = detector

    def create(self, service_type: Type[T], container: IContainer) -> T:
        """Construct an instance and inject its fields.

        Args:
            service_type: The type to instantiate.
            container: The container to resolve dependencies from.

        Returns:
            Instance with all dependencies injected.

        Raises:
            NoSuitableConstructorError: If the type cannot be constructed.
            ServiceNotFoundError: If a dependency cannot be resolved.
            CircularDependencyError: If injection re-enters an in-flight instance.
            InjectionError: If a field cannot be written.

        Example:
            >>> class UserService:
            ...     repository: UserRepository = Inject()
            >>>
            >>> service = materializer.create(UserService, container)
            >>> isinstance(service.repository, UserRepository)
            True
        """
        instance = self.construct(service_type, container)
        self.inject(instance, container)
        return instance

    def construct(self, service_type: Type[T], container: IContainer) -> T:
        """Invoke the injectable or no-argument constructor without injecting fields."""
        descriptor = self._introspector.describe(service_type)

        if descriptor.constructor is not None:
            args: List[Any] = []
            kwargs: Dict[str, Any] = {}
            # A failed parameter aborts before the constructor runs.
            for parameter in descriptor.constructor.parameters:
                dependency = container.resolve(parameter.service_type)
                if parameter.keyword_only:
                    kwargs[parameter.name] = dependency
                else:
                    args.append(dependency)
            return self._invoke(service_type, *args, **kwargs)

        if descriptor.has_default_constructor:
            return self._invoke(service_type)

        raise NoSuitableConstructorError(
            service_type,
            "No @inject constructor and no constructor callable without arguments",
        )

    def inject(self, instance: Any, container: IContainer) -> None:
        """Resolve and assign every ``Inject`` field of ``instance``.

        Fields declared on ancestors are injected before the descendant's own.
        Writes go through ``object.__setattr__`` so ``__setattr__`` overrides
        (frozen dataclasses and the like) do not block injection.

        Raises:
            CircularDependencyError: If injection into this instance is already in progress.
            InjectionError: If a field cannot be written.
        """
        if instance is None:
            return

        descriptor = self._introspector.describe(type(instance))
        with self._detector.injecting(instance):
            for field in descriptor.fields:
                dependency = container.resolve(field.service_type)
                try:
                    object.__setattr__(instance, field.name, dependency)
                except (AttributeError, TypeError) as e:
                    raise InjectionError(type(instance), field.name, str(e)) from e
                logger.debug("Injected %s.%s", field.owner.__name__, field.name)

    @staticmethod
    def _invoke(service_type: Type[T], *args: Any, **kwargs: Any) -> T:
        try:
            return service_type(*args, **kwargs)
        except DIException:
            raise
        except Exception as e:
            raise ConstructionError(service_type, f"Constructor raised {type(e).__name__}: {e}") from e
