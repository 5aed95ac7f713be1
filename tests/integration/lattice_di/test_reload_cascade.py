"""Integration tests for reload and cascading reload."""

import pytest

from lattice_di import build_container, pre_destroy, producer, service

constructed = []
destroyed = []


class Token:
    pass


@service
class Settings:
    def __init__(self):
        constructed.append("Settings")

    @pre_destroy
    def close(self):
        destroyed.append("Settings")

    @producer
    def token(self) -> Token:
        constructed.append("Token")
        return Token()


@service
class Cache:
    def __init__(self, settings: Settings):
        constructed.append("Cache")
        self.settings = settings


@service
class Database:
    def __init__(self, settings: Settings):
        constructed.append("Database")
        self.settings = settings

    @pre_destroy
    def close(self):
        destroyed.append("Database")


@service
class Repository:
    def __init__(self, database: Database, token: Token):
        constructed.append("Repository")
        self.database = database
        self.token = token


@pytest.fixture
def container():
    container = build_container([Repository, Cache, Database, Settings])
    constructed.clear()
    destroyed.clear()
    return container


class TestDependentsDirection:
    """Test that dependents point from provider to later-built consumer."""

    def test_recorded_edges(self, container):
        settings = container.get_service_details(Settings)
        database = container.get_service_details(Database)
        token = container.get_service_details(Token)
        repository = container.get_service_details(Repository)

        assert [d.service_type for d in settings.dependents] == [Cache, Database]
        assert database.dependents == [repository]
        assert token.dependents == [repository]
        assert repository.dependents == []

    def test_consumers_do_not_point_back(self, container):
        cache = container.get_service_details(Cache)

        assert cache.dependents == []


class TestReload:
    """Test reload without and with cascade."""

    def test_reload_without_cascade_changes_only_target(self, container):
        old = {cls: container.get_service(cls) for cls in (Settings, Cache, Database, Repository)}

        container.reload(container.get_service_details(Settings))

        assert container.get_service(Settings) is not old[Settings]
        for cls in (Cache, Database, Repository):
            assert container.get_service(cls) is old[cls]
        assert constructed == ["Settings"]
        assert destroyed == ["Settings"]

    def test_cascade_follows_dependent_discovery_order(self, container):
        container.reload(container.get_service(Settings), True)

        assert constructed == ["Settings", "Cache", "Database", "Repository"]
        assert destroyed == ["Settings", "Database"]

    def test_cascade_rewires_to_new_instances(self, container):
        old_repository = container.get_service(Repository)

        container.reload(container.get_service(Database), cascade=True)

        repository = container.get_service(Repository)
        assert repository is not old_repository
        assert repository.database is container.get_service(Database)
        assert repository.token is container.get_service(Token)

    def test_cascade_never_reaches_providers(self, container):
        """Test that reloading a consumer leaves what it consumed untouched."""
        settings = container.get_service(Settings)

        container.reload(container.get_service(Repository), cascade=True)

        assert container.get_service(Settings) is settings
        assert constructed == ["Repository"]

    def test_producer_is_not_reloaded_with_owner(self, container):
        token = container.get_service(Token)

        container.reload(container.get_service(Settings), cascade=True)

        assert container.get_service(Token) is token

    def test_reload_producer_cascades_to_its_consumers(self, container):
        old_token = container.get_service(Token)

        new_token = container.reload(old_token, cascade=True)

        assert new_token is not old_token
        assert container.get_service(Repository).token is new_token
        assert constructed == ["Token", "Repository"]

    def test_close_runs_destroy_hooks_in_reverse(self, container):
        container.close()

        assert destroyed == ["Database", "Settings"]
        assert container.get_services() == []
