"""Unit tests for InstantiationService."""

import pytest

from lattice_di.application.instantiation_service import InstantiationService
from lattice_di.domain import (
    ConstructionError,
    DestroyHookError,
    IInstantiationService,
    InitHookError,
    ProducerConstructionError,
    ProducerDescriptor,
    ServiceDescriptor,
    UnsatisfiedDependencyError,
)


class Database:
    pass


class Repository:
    def __init__(self, db: Database):
        self.db = db


class Widget:
    pass


class TestCreateInstance:
    """Test cases for create_instance."""

    def test_implements_interface(self):
        assert isinstance(InstantiationService(), IInstantiationService)

    def test_creates_instance_without_dependencies(self):
        descriptor = ServiceDescriptor(service_type=Database, constructor=Database)

        InstantiationService().create_instance(descriptor)

        assert isinstance(descriptor.instance, Database)
        assert descriptor.is_built

    def test_passes_arguments_in_order(self):
        """Test that the constructor receives arguments positionally, in order."""
        received = []

        def constructor(first, second):
            received.extend([first, second])
            return Widget()

        descriptor = ServiceDescriptor(service_type=Widget, constructor=constructor, dependencies=[Database, Database])

        InstantiationService().create_instance(descriptor, "a", "b")

        assert received == ["a", "b"]

    def test_argument_count_mismatch_raises(self):
        """Test that the number of arguments must match the dependencies."""
        descriptor = ServiceDescriptor(service_type=Repository, constructor=Repository, dependencies=[Database])

        with pytest.raises(ConstructionError) as exc_info:
            InstantiationService().create_instance(descriptor)

        assert exc_info.value.service_type is Repository
        assert "expected 1, got 0" in str(exc_info.value)
        assert descriptor.instance is None

    def test_constructor_failure_is_wrapped(self):
        """Test that constructor errors are reported as construction failures naming the type."""

        def failing():
            raise RuntimeError("connection refused")

        descriptor = ServiceDescriptor(service_type=Database, constructor=failing)

        with pytest.raises(ConstructionError) as exc_info:
            InstantiationService().create_instance(descriptor)

        assert exc_info.value.service_type is Database
        assert "connection refused" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert not descriptor.is_built

    def test_di_exceptions_from_constructor_propagate_unwrapped(self):
        def failing():
            raise UnsatisfiedDependencyError(Database, Repository)

        descriptor = ServiceDescriptor(service_type=Repository, constructor=failing)

        with pytest.raises(UnsatisfiedDependencyError):
            InstantiationService().create_instance(descriptor)

    def test_missing_constructor_raises(self):
        descriptor = ServiceDescriptor(service_type=Database)

        with pytest.raises(ConstructionError, match="no constructor"):
            InstantiationService().create_instance(descriptor)

    def test_runs_init_hook_after_construction(self):
        calls = []

        def init_hook(instance):
            calls.append(instance)

        descriptor = ServiceDescriptor(service_type=Database, constructor=Database, init_hook=init_hook)

        InstantiationService().create_instance(descriptor)

        assert calls == [descriptor.instance]

    def test_init_hook_failure_is_reported_distinctly(self):
        """Test that a failing init hook leaves the instance built and raises InitHookError."""

        def setup(instance):
            raise ValueError("bad settings")

        descriptor = ServiceDescriptor(service_type=Database, constructor=Database, init_hook=setup)

        with pytest.raises(InitHookError) as exc_info:
            InstantiationService().create_instance(descriptor)

        assert exc_info.value.service_type is Database
        assert exc_info.value.hook == "setup"
        assert "bad settings" in str(exc_info.value)
        assert descriptor.is_built


class TestCreateProducerInstance:
    """Test cases for create_producer_instance."""

    def test_invokes_method_on_owner_instance(self):
        owner = ServiceDescriptor(service_type=Database, constructor=Database)
        owner.set_instance(Database())
        seen = []

        def make(instance):
            seen.append(instance)
            return Widget()

        descriptor = ProducerDescriptor(service_type=Widget, method=make, owner=owner)

        InstantiationService().create_producer_instance(descriptor)

        assert seen == [owner.instance]
        assert isinstance(descriptor.instance, Widget)

    def test_requires_built_owner(self):
        owner = ServiceDescriptor(service_type=Database, constructor=Database)
        descriptor = ProducerDescriptor(service_type=Widget, method=lambda instance: Widget(), owner=owner)

        with pytest.raises(ProducerConstructionError, match="not built"):
            InstantiationService().create_producer_instance(descriptor)

    def test_method_failure_is_wrapped(self):
        owner = ServiceDescriptor(service_type=Database, constructor=Database)
        owner.set_instance(Database())

        def make(instance):
            raise KeyError("widget")

        descriptor = ProducerDescriptor(service_type=Widget, method=make, owner=owner)

        with pytest.raises(ProducerConstructionError) as exc_info:
            InstantiationService().create_producer_instance(descriptor)

        assert exc_info.value.service_type is Widget
        assert not descriptor.is_built


class TestDestroyInstance:
    """Test cases for destroy_instance."""

    def test_runs_hook_then_clears(self):
        calls = []
        descriptor = ServiceDescriptor(service_type=Database, constructor=Database, destroy_hook=calls.append)
        instance = Database()
        descriptor.set_instance(instance)

        InstantiationService().destroy_instance(descriptor)

        assert calls == [instance]
        assert descriptor.instance is None
        assert not descriptor.is_built

    def test_without_hook_clears(self):
        descriptor = ServiceDescriptor(service_type=Database, constructor=Database)
        descriptor.set_instance(Database())

        InstantiationService().destroy_instance(descriptor)

        assert descriptor.instance is None

    def test_hook_failure_still_clears_instance(self):
        def teardown(instance):
            raise OSError("socket closed")

        descriptor = ServiceDescriptor(service_type=Database, constructor=Database, destroy_hook=teardown)
        descriptor.set_instance(Database())

        with pytest.raises(DestroyHookError) as exc_info:
            InstantiationService().destroy_instance(descriptor)

        assert exc_info.value.hook == "teardown"
        assert descriptor.instance is None
        assert not descriptor.is_built

    def test_hook_not_called_when_unbuilt(self):
        calls = []
        descriptor = ServiceDescriptor(service_type=Database, constructor=Database, destroy_hook=calls.append)

        InstantiationService().destroy_instance(descriptor)

        assert calls == []
