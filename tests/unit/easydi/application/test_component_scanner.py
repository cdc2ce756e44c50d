"""Unit tests for ComponentScanner."""

import importlib
import sys
import textwrap
import uuid

import pytest

from easydi.application.component_scanner import ComponentScanner, default_component_name
from easydi.application.introspector import TypeIntrospector
from easydi.domain import ComponentScanError, IComponentDiscovery, Lifetime


@pytest.fixture
def make_package(tmp_path, monkeypatch):
    """Write a throwaway package to disk and return its unique dotted name."""
    monkeypatch.syspath_prepend(str(tmp_path))
    created = []

    def factory(files):
        package_name = f"scan_pkg_{uuid.uuid4().hex}"
        root = tmp_path / package_name
        for relative_path, source in files.items():
            path = root / relative_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(source))
        created.append(package_name)
        importlib.invalidate_caches()
        return package_name

    yield factory

    for package_name in created:
        for module_name in [name for name in sys.modules if name.split(".")[0] == package_name]:
            del sys.modules[module_name]


SERVICES = {
    "__init__.py": "",
    "repositories.py": """
        from easydi import Lifetime, component

        @component
        class UserRepository:
            pass

        @component(name="premiumRepo")
        class PremiumUserRepository(UserRepository):
            pass

        @component(lifetime=Lifetime.TRANSIENT)
        class Counter:
            pass

        class NotAComponent:
            pass
    """,
    "nested/__init__.py": "",
    "nested/services.py": """
        from easydi import component
        from ..repositories import UserRepository

        @component
        class UserService:
            pass
    """,
}


class TestDefaultComponentName:
    """Test cases for default component naming."""

    def test_lower_cases_first_letter(self):
        """Test that the first letter of the class name is lower-cased."""

        class UserService:
            pass

        assert default_component_name(UserService) == "userService"

    def test_single_letter_name(self):
        """Test a one-letter class name."""

        class A:
            pass

        assert default_component_name(A) == "a"


class TestDiscover:
    """Test cases for package discovery."""

    def test_scanner_implements_interface(self):
        """Test that ComponentScanner implements IComponentDiscovery."""
        assert isinstance(ComponentScanner(TypeIntrospector()), IComponentDiscovery)

    def test_discovers_marked_classes_recursively(self, make_package):
        """Test that components in the package and its subpackages are found."""
        package_name = make_package(SERVICES)

        components = ComponentScanner(TypeIntrospector()).discover(package_name)

        by_name = {component.name: component for component in components}
        assert set(by_name) == {"userRepository", "premiumRepo", "counter", "userService"}
        assert by_name["userService"].service_type.__module__ == f"{package_name}.nested.services"

    def test_imported_components_are_not_counted_twice(self, make_package):
        """Test that a component re-imported by another module is reported once."""
        package_name = make_package(SERVICES)

        components = ComponentScanner(TypeIntrospector()).discover(package_name)

        assert [component.name for component in components].count("userRepository") == 1

    def test_declared_lifetime_is_reported(self, make_package):
        """Test that the marker lifetime is carried through."""
        package_name = make_package(SERVICES)

        components = ComponentScanner(TypeIntrospector()).discover(package_name)

        lifetimes = {component.name: component.lifetime for component in components}
        assert lifetimes["counter"] is Lifetime.TRANSIENT
        assert lifetimes["userRepository"] is None

    def test_single_module(self, make_package):
        """Test that a plain module can be scanned."""
        package_name = make_package(SERVICES)

        components = ComponentScanner(TypeIntrospector()).discover(f"{package_name}.nested.services")

        assert [component.name for component in components] == ["userService"]

    def test_results_are_cached(self, make_package):
        """Test that a second discovery reuses the first result."""
        package_name = make_package(SERVICES)
        scanner = ComponentScanner(TypeIntrospector())

        first = scanner.discover(package_name)
        scanner._cache[package_name].clear()

        assert scanner.discover(package_name) == []
        scanner.clear_cache()
        assert scanner.discover(package_name) == first

    def test_missing_package_raises(self):
        """Test that an unknown package raises ComponentScanError."""
        with pytest.raises(ComponentScanError) as exc_info:
            ComponentScanner(TypeIntrospector()).discover("definitely_not_a_real_package_name")

        assert exc_info.value.package_name == "definitely_not_a_real_package_name"

    def test_broken_submodule_raises(self, make_package):
        """Test that an import failure inside the package raises ComponentScanError."""
        package_name = make_package({"__init__.py": "", "broken.py": "import definitely_missing_module\n"})

        with pytest.raises(ComponentScanError):
            ComponentScanner(TypeIntrospector()).discover(package_name)

    def test_failing_module_body_raises(self, make_package):
        """Test that any exception raised while importing a module becomes ComponentScanError."""
        package_name = make_package({"__init__.py": "", "settings.py": "raise RuntimeError('missing env var')\n"})

        with pytest.raises(ComponentScanError, match="missing env var") as exc_info:
            ComponentScanner(TypeIntrospector()).discover(package_name)

        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_failing_package_init_raises(self, make_package):
        """Test that an exception in the package itself becomes ComponentScanError."""
        package_name = make_package({"__init__.py": "raise ValueError('bad init')\n"})

        with pytest.raises(ComponentScanError) as exc_info:
            ComponentScanner(TypeIntrospector()).discover(package_name)

        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_unmarked_classes_are_not_described(self, make_package):
        """Test that helper classes the introspector cannot describe do not break the scan."""
        package_name = make_package(
            {
                "__init__.py": "",
                "services.py": """
                    from easydi import Inject, component, inject

                    @component
                    class Good:
                        pass

                    class UntypedHelper:
                        thing = Inject()

                    class UnresolvableHelper:
                        @inject
                        def __init__(self, missing: "DoesNotExist"):
                            self.missing = missing
                """,
            }
        )

        components = ComponentScanner(TypeIntrospector()).discover(package_name)

        assert [component.name for component in components] == ["good"]
