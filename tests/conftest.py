"""
Pytest configuration and shared fixtures for the theme mapping tests.
"""
import os
import sys
from unittest.mock import MagicMock

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), "src"))

# Settings require Supabase credentials; tests never talk to a real project
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-key")


# ============================================================================
# Fixtures: Test Data Factories
# ============================================================================

@pytest.fixture
def sample_products():
    """Unmapped products covering each classification tier."""
    from theme_mapping.models import Product
    return [
        Product(id=10, name="Banarasi Silk Saree", category="Apparel", subcategory="Saree"),
        Product(id=11, name="Embroidered Cotton Kurta", category="Apparel", subcategory="Topwear"),
        Product(id=12, name="Blue Plain Top", category="Apparel", subcategory="Topwear"),
        Product(id=13, name="Matte Lipstick", category="Personal Care", subcategory="Makeup"),
        Product(id=14, name="Mystery Box", category=None, subcategory=None),
    ]


@pytest.fixture
def in_memory_store(sample_products):
    """In-memory product store seeded with sample_products."""
    from theme_mapping.store import InMemoryProductStore
    return InMemoryProductStore(sample_products)


@pytest.fixture
def batch_runner(in_memory_store):
    from theme_mapping.batch_runner import ThemeBatchRunner
    return ThemeBatchRunner(in_memory_store)


# ============================================================================
# Fixtures: Mock Services
# ============================================================================

@pytest.fixture
def mock_supabase_client():
    """Mock Supabase client; PostgREST builder calls chain back to the same query."""
    mock_client = MagicMock()

    query = MagicMock()
    for method in ("select", "is_", "gt", "order", "limit"):
        getattr(query, method).return_value = query
    query.execute.return_value.data = []
    query.execute.return_value.count = 0
    mock_client.table.return_value = query

    mock_client.rpc.return_value.execute.return_value.data = 0

    return mock_client


# ============================================================================
# Fixtures: FastAPI Test Client
# ============================================================================

@pytest.fixture
def app(in_memory_store):
    """FastAPI application wired to the in-memory store."""
    from api.app import create_app
    from api.routes.themes import get_product_store

    application = create_app()
    application.dependency_overrides[get_product_store] = lambda: in_memory_store
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def test_client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as client:
        yield client


# ============================================================================
# Markers auto-use
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
