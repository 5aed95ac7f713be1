from typing import Awaitable, Callable, Type, TypeVar

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from lattice_di.domain import IContainer, ServiceNotFoundError

T = TypeVar("T")


def _require_service(container: IContainer, service_type: Type[T]) -> T:
    if container.get_service_details(service_type) is None:
        raise ServiceNotFoundError(service_type)
    return container.get_service(service_type)


def create_fastapi_dependency(container: IContainer, service_type: Type[T]) -> Callable[[], T]:
    """Create a FastAPI Depends() callable that returns a service from the container.

    The callable always returns the container's current instance, so a reload
    is picked up by the next request.

    Args:
        container: An initialized container.
        service_type: The type to look up when the dependency is called.

    Returns:
        A callable that FastAPI can use with Depends().

    Raises:
        ServiceNotFoundError: When called and no service matches.

    Example:
        >>> container = build_container([Repository, UserService])
        >>> get_user_service = create_fastapi_dependency(container, UserService)
        >>>
        >>> @app.get("/users")
        >>> async def list_users(users: UserService = Depends(get_user_service)):
        ...     return users.list()
    """

    def dependency() -> T:
        """Look the service up in the container."""
        return _require_service(container, service_type)

    return dependency


def create_request_dependency(service_type: Type[T]) -> Callable[[Request], T]:
    """Create a FastAPI dependency that looks up the container attached to the request.

    Requires the ContainerMiddleware to be installed.

    Example:
        >>> app.add_middleware(ContainerMiddleware, container=container)
        >>>
        >>> get_repository = create_request_dependency(Repository)
        >>>
        >>> @app.get("/items")
        >>> async def list_items(repository: Repository = Depends(get_repository)):
        ...     return repository.all()
    """

    def request_dependency(request: Request) -> T:
        """Look the service up in the request's container."""
        if not hasattr(request.state, "di_container"):
            raise RuntimeError(
                "Request does not have a DI container. Did you forget to add ContainerMiddleware?"
            )
        container: IContainer = request.state.di_container
        return _require_service(container, service_type)

    return request_dependency


class ContainerMiddleware(BaseHTTPMiddleware):
    """Middleware that exposes the container on every request.

    The container is accessible via `request.state.di_container`.

    Attributes:
        container: The container to expose.

    Example:
        >>> app = FastAPI()
        >>> app.add_middleware(ContainerMiddleware, container=container)
        >>>
        >>> @app.get("/")
        >>> async def root(request: Request):
        ...     repository = request.state.di_container.get_service(Repository)
        ...     return {"count": repository.count()}
    """

    def __init__(self, app: FastAPI, container: IContainer):
        """Initialize the middleware.

        Args:
            app: The FastAPI/Starlette application.
            container: The container to expose.
        """
        super().__init__(app)
        self.container = container

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        """Attach the container to the request and execute the endpoint."""
        request.state.di_container = self.container
        return await call_next(request)
