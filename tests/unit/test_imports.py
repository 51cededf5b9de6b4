"""
Import validation tests.

These tests ensure all modules can be imported successfully, catching
issues like missing dependencies or circular imports BEFORE deployment.

Run with: pytest tests/unit/test_imports.py -v
"""

import importlib
from pathlib import Path

import pytest

SRC_PATH = Path(__file__).parent.parent.parent / "src"


class TestHandlerImports:
    """Verify all handler modules can be imported without errors."""

    @pytest.mark.parametrize("module_name", [
        "handlers.main",
        "handlers.health_check",
        "handlers.bookings",
        "handlers.customers",
        "handlers.payments",
        "handlers.commissions",
        "handlers.notifications",
        "handlers.analytics",
    ])
    def test_handler_import(self, module_name: str):
        """Each handler module should import without errors."""
        try:
            importlib.import_module(module_name)
        except ImportError as e:
            pytest.fail(f"Failed to import {module_name}: {e}")

    def test_entrypoint_exists(self):
        module = importlib.import_module("handlers.main")
        assert callable(module.lambda_handler)


class TestServiceImports:
    """Verify all service modules can be imported."""

    @pytest.mark.parametrize("module_name", [
        "services.customer_aggregator",
        "services.package_classifier",
        "services.booking_service",
        "services.customer_service",
        "services.payment_service",
        "services.commission_service",
        "services.notification_service",
        "services.analytics_service",
    ])
    def test_service_import(self, module_name: str):
        """Each service module should import without errors."""
        try:
            importlib.import_module(module_name)
        except ImportError as e:
            pytest.fail(f"Failed to import {module_name}: {e}")


class TestModelImports:
    """Verify the models package re-exports import cleanly."""

    def test_models_package(self):
        models = importlib.import_module("models")
        assert models.Page is not None
        assert models.PackageSubtype.UMRA.value == "umra"


class TestNoSrcPrefix:
    """Ensure no modules use 'from src.' imports (breaks in Lambda)."""

    @pytest.mark.parametrize(
        "package", ["handlers", "services", "models", "repositories", "utils", "config"]
    )
    def test_no_src_prefix(self, package: str):
        for py_file in (SRC_PATH / package).glob("*.py"):
            content = py_file.read_text(encoding="utf-8")
            assert "from src." not in content, f"{py_file.name} contains 'from src.' import"
            assert "import src." not in content, f"{py_file.name} contains 'import src.' import"
