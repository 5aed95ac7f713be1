"""Integration tests for FastAPI integration across layers."""

import pytest

pytest.importorskip("fastapi")

from fastapi import Depends, FastAPI

from lattice_di import build_container, service
from lattice_di.infrastructure.fastapi_integration import ContainerMiddleware, create_fastapi_dependency


@service
class DatabaseService:
    def get_data(self):
        return {"data": "test"}


@service
class UserService:
    def __init__(self, db: DatabaseService):
        self.db = db

    def get_users(self):
        return self.db.get_data()


class TestFastAPIIntegrationEndToEnd:
    """Test complete FastAPI integration scenarios."""

    def test_fastapi_app_with_built_container(self):
        app = FastAPI()
        container = build_container([UserService, DatabaseService])
        get_user_service = create_fastapi_dependency(container, UserService)

        @app.get("/users")
        def get_users(users: UserService = Depends(get_user_service)):
            return users.get_users()

        service_instance = get_user_service()
        assert service_instance is container.get_service(UserService)
        assert service_instance.get_users() == {"data": "test"}

    def test_dependency_follows_cascading_reload(self):
        container = build_container([UserService, DatabaseService])
        get_user_service = create_fastapi_dependency(container, UserService)
        before = get_user_service()

        container.reload(container.get_service(DatabaseService), cascade=True)

        after = get_user_service()
        assert after is not before
        assert after.db is container.get_service(DatabaseService)

    def test_middleware_can_be_installed(self):
        app = FastAPI()
        container = build_container([DatabaseService])

        app.add_middleware(ContainerMiddleware, container=container)

        assert any(m.cls is ContainerMiddleware for m in app.user_middleware)
