"""Unit tests for package discovery and the launcher."""

import importlib
import sys
import textwrap

import pytest

from lattice_di.domain import UnsatisfiedDependencyError
from lattice_di.infrastructure.discovery import run, scan_package

SERVICES_MODULE = """
from lattice_di import post_construct, service
from {package}.models import Model


@service
class Repository:
    def __init__(self, model: Model):
        self.model = model
        self.connected = False

    @post_construct
    def connect(self):
        self.connected = True
"""

MODELS_MODULE = """
from lattice_di import service


@service
class Model:
    pass


class NotAService:
    pass
"""

APP_MODULE = """
from lattice_di import service, startup
from {package}.services import Repository


@service
class App:
    def __init__(self, repository: Repository):
        self.repository = repository
        self.started = False

    @startup
    def start(self):
        self.started = True
"""


@pytest.fixture
def make_package(tmp_path, monkeypatch):
    """Write a small application package to disk and make it importable."""
    monkeypatch.syspath_prepend(str(tmp_path))
    created = []

    def factory(name):
        root = tmp_path / name
        (root / "sub").mkdir(parents=True)
        (root / "__init__.py").write_text("")
        (root / "models.py").write_text(textwrap.dedent(MODELS_MODULE))
        (root / "services.py").write_text(textwrap.dedent(SERVICES_MODULE.format(package=name)))
        (root / "sub" / "__init__.py").write_text("")
        (root / "sub" / "app.py").write_text(textwrap.dedent(APP_MODULE.format(package=name)))
        created.append(name)
        importlib.invalidate_caches()
        return name

    yield factory

    for module_name in list(sys.modules):
        if any(module_name == name or module_name.startswith(f"{name}.") for name in created):
            del sys.modules[module_name]


class TestScanPackage:
    """Test cases for scan_package."""

    def test_collects_classes_defined_in_package_tree(self, make_package):
        package = make_package("scan_app_tree")

        names = {cls.__name__ for cls in scan_package(package)}

        assert names == {"Model", "NotAService", "Repository", "App"}

    def test_each_class_appears_once(self, make_package):
        """Test that re-exported classes are not collected twice."""
        package = make_package("scan_app_unique")

        classes = scan_package(package)

        assert len(classes) == len({id(cls) for cls in classes})

    def test_accepts_module_object(self, make_package):
        package = make_package("scan_app_module")
        module = importlib.import_module(f"{package}.models")

        names = [cls.__name__ for cls in scan_package(module)]

        assert sorted(names) == ["Model", "NotAService"]

    def test_unknown_package_raises(self):
        with pytest.raises(ImportError):
            scan_package("definitely_not_a_package_name")


class TestRun:
    """Test cases for the launcher."""

    def test_run_scans_builds_and_starts(self, make_package):
        package = make_package("run_app_scan")
        app_cls = importlib.import_module(f"{package}.sub.app").App

        container = run(app_cls, package=package)

        app = container.get_service(app_cls)
        assert app.started
        assert app.repository.connected
        assert container.get_services_details()[0].service_type.__name__ == "Model"

    def test_run_defaults_to_startup_class_package(self, make_package):
        """Test that only the startup class's own package is scanned by default."""
        package = make_package("run_app_default")
        app_cls = importlib.import_module(f"{package}.sub.app").App

        with pytest.raises(UnsatisfiedDependencyError) as exc_info:
            run(app_cls)

        assert exc_info.value.dependency_type.__name__ == "Repository"
        assert exc_info.value.requester is app_cls

    def test_run_with_explicit_classes(self, make_package):
        package = make_package("run_app_classes")
        classes = scan_package(package)
        app_cls = next(cls for cls in classes if cls.__name__ == "App")

        container = run(app_cls, classes=classes)

        assert container.get_service(app_cls).started
