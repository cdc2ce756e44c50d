from typing import Callable, Optional, Type, TypeVar

from fastapi import FastAPI, Request

from easydi.domain import IContainer

T = TypeVar("T")

APP_STATE_ATTRIBUTE = "di_container"


def create_fastapi_dependency(
    container: IContainer,
    service_type: Type[T],
    name: Optional[str] = None,
) -> Callable[[], T]:
    """Create a FastAPI Depends() callable that resolves from the DI container.

    The resolved instance lifetime follows the registration in the container
    (singleton or transient).

    Args:
        container: The DI container to resolve services from.
        service_type: The type to resolve when the dependency is called.
        name: Optional registration name; resolves by name when given.

    Returns:
        A callable that FastAPI can use with Depends().

    Example:
        >>> get_user_repo = create_fastapi_dependency(container, UserRepository)
        >>>
        >>> @app.get("/users")
        >>> async def list_users(repo: UserRepository = Depends(get_user_repo)):
        ...     return repo.get_users()
    """

    def dependency() -> T:
        """Resolve the service from the container."""
        if name:
            return container.resolve_named(name, service_type)
        return container.resolve(service_type)

    return dependency


def install_container(app: FastAPI, container: IContainer) -> None:
    """Attach a container to an application so endpoints can resolve from it.

    The container is stored on ``app.state.di_container``.

    Example:
        >>> app = FastAPI()
        >>> install_container(app, DIContainer.from_packages(["myapp.services"]))
    """
    setattr(app.state, APP_STATE_ATTRIBUTE, container)


def from_app_container(service_type: Type[T], name: Optional[str] = None) -> Callable[[Request], T]:
    """Create a FastAPI dependency that resolves from the container installed on the app.

    Requires ``install_container`` to have been called for the application.

    Args:
        service_type: The type to resolve.
        name: Optional registration name.

    Example:
        >>> @app.get("/notify")
        >>> async def notify(service: NotificationService = Depends(from_app_container(NotificationService))):
        ...     service.send_notification("Alice", "Hello")
    """

    def app_dependency(request: Request) -> T:
        """Resolve from the application's container."""
        container: Optional[IContainer] = getattr(request.app.state, APP_STATE_ATTRIBUTE, None)
        if container is None:
            raise RuntimeError("Application does not have a DI container. Did you forget to call install_container?")
        if name:
            return container.resolve_named(name, service_type)
        return container.resolve(service_type)

    return app_dependency
