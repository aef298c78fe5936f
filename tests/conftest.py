"""Pytest configuration and fixtures"""
import os
import json
import pytest

# Set test environment variables
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("CART_STORAGE_KEY", "@GoMarketplace:products")

from cartstore.domain.schemas import ProductRef
from cartstore.repos.cart_repo import MemoryCartPersistence
from cartstore.utils.settings import CART_STORAGE_KEY


@pytest.fixture
def mug():
    """Sample product"""
    return ProductRef(id="p1", title="Mug", image_url="u", unit_price=10)


@pytest.fixture
def plate():
    """Second sample product"""
    return ProductRef(id="p2", title="Plate", image_url="u2", unit_price=5)


@pytest.fixture
def memory_persistence():
    """Empty in-memory persistence"""
    return MemoryCartPersistence()


@pytest.fixture
def stored_snapshot():
    """Raw snapshot as written by a previous process"""
    return json.dumps([
        {"id": "p1", "title": "Mug", "imageUrl": "u", "unitPrice": 10.0, "quantity": 2},
        {"id": "p2", "title": "Plate", "imageUrl": "u2", "unitPrice": 5.0, "quantity": 1},
    ])


@pytest.fixture
def seeded_persistence(stored_snapshot):
    """In-memory persistence holding a previous snapshot"""
    return MemoryCartPersistence({CART_STORAGE_KEY: stored_snapshot})
