"""
Shared test fixtures.

Mock Supabase client plus sample catalog data.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

import pytest
from unittest.mock import patch
from typing import Generator

# ===================
# MOCK SUPABASE CLIENT
# ===================

class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data: list = None, count: int = None):
        self.data = data or []
        self.count = count if count is not None else len(self.data)


class MockSupabaseQuery:
    """Mock Supabase query builder with chainable methods."""

    def __init__(self, data: list = None, count: int = None, log: list = None):
        self._data = data or []
        self._count = count
        self._is_single = False
        self._log = log if log is not None else []

    def _record(self, method, *args):
        self._log.append((method, args))
        return self

    def select(self, *args, **kwargs):
        return self

    def insert(self, data):
        # Simulate insert - store assigns the id
        if isinstance(data, dict):
            data = [data]
        inserted = []
        for item in data:
            row = dict(item)
            row.setdefault("id", "test-uuid-123")
            inserted.append(row)
        self._data = inserted
        return self._record("insert", data)

    def update(self, data):
        # Simulate update - merge with existing data
        updated_data = [{**item, **data} for item in self._data]
        self._data = updated_data if updated_data else [data]
        return self._record("update", data)

    def delete(self):
        return self._record("delete")

    def eq(self, column, value):
        return self._record("eq", column, value)

    def neq(self, column, value):
        return self._record("neq", column, value)

    def gte(self, column, value):
        return self._record("gte", column, value)

    def lte(self, column, value):
        return self._record("lte", column, value)

    def ilike(self, column, pattern):
        return self._record("ilike", column, pattern)

    def in_(self, column, values):
        return self._record("in_", column, values)

    def or_(self, filters):
        return self._record("or_", filters)

    def single(self):
        self._is_single = True
        return self

    def order(self, column, **kwargs):
        return self._record("order", column)

    def range(self, start, end):
        return self._record("range", start, end)

    def limit(self, count):
        return self

    def execute(self) -> MockSupabaseResponse:
        if self._is_single:
            data = self._data[0] if self._data else None
            return MockSupabaseResponse(
                data=data,
                count=1 if data else 0
            )
        return MockSupabaseResponse(
            data=self._data,
            count=self._count if self._count is not None else len(self._data)
        )


class MockSupabaseTable:
    """Mock Supabase table with configurable responses."""

    def __init__(self, data: list = None, count: int = None, log: list = None):
        self._data = data or []
        self._count = count
        self._log = log

    def _query(self) -> MockSupabaseQuery:
        return MockSupabaseQuery(self._data.copy(), self._count, self._log)

    def select(self, *args, **kwargs):
        return self._query()

    def insert(self, data):
        return self._query().insert(data)

    def update(self, data):
        # For update, pass the existing data so it can be merged
        return self._query().update(data)

    def delete(self):
        return self._query().delete()


class MockSupabaseClient:
    """
    Mock Supabase client.

    Every chained call is appended to ``calls`` as (method, args) so tests
    can assert which filters were applied.
    """

    def __init__(self):
        self._tables = {}
        self.calls: list = []

    def set_table_data(self, table_name: str, data: list, count: int = None):
        """Configure mock data for a table."""
        self._tables[table_name] = {"data": data, "count": count}

    def table(self, name: str) -> MockSupabaseTable:
        """Get mock table."""
        config = self._tables.get(name, {"data": [], "count": None})
        return MockSupabaseTable(config["data"], config["count"], self.calls)


# ===================
# FIXTURES
# ===================

@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("products", [
                {"id": "1", "part_number": "SM-TEST", ...}
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def mock_db(mock_supabase) -> Generator:
    """
    Patch the database client with mock.

    Usage:
        def test_something(mock_db, mock_supabase):
            mock_supabase.set_table_data("products", [...])
            # Now ProductService() reads and writes through the mock
    """
    with patch("services.product_service.get_supabase_client", return_value=mock_supabase):
        with patch("services.product_service.get_admin_client", return_value=None):
            yield mock_supabase


@pytest.fixture
def sample_product_data() -> dict:
    """A stored product row."""
    return {
        "id": "test-uuid-123",
        "name": "Samsung Galaxy S23 AMOLED Display",
        "model": "Galaxy S23",
        "category": "AMOLED",
        "color": "Black",
        "description": "Original replacement AMOLED display.",
        "price": 199.99,
        "image": None,
        "part_number": "SM-S911B-AMOLED-BLK"
    }


@pytest.fixture
def sample_products_list() -> list:
    """Stored product rows for list/filter tests."""
    return [
        {
            "id": "uuid-1",
            "name": "Samsung Galaxy S23 AMOLED Display",
            "model": "Galaxy S23",
            "category": "AMOLED",
            "color": "Black",
            "description": None,
            "price": 199.99,
            "image": None,
            "part_number": "SM-S911B-AMOLED-BLK"
        },
        {
            "id": "uuid-2",
            "name": "Samsung Galaxy S22 LCD Screen",
            "model": "Galaxy S22",
            "category": "LCD",
            "color": "White",
            "description": None,
            "price": 149.99,
            "image": None,
            "part_number": "SM-S901B-LCD-WHT"
        },
        {
            "id": "uuid-3",
            "name": "Samsung Galaxy A54 TFT Display",
            "model": "Galaxy A54",
            "category": "TFT",
            "color": "Black",
            "description": None,
            "price": 59.0,
            "image": None,
            "part_number": "SM-A546B-TFT-BLK"
        }
    ]


@pytest.fixture
def valid_record() -> dict:
    """A candidate record that passes validation."""
    return {
        "name": "Samsung Galaxy S24 AMOLED Display",
        "model": "Galaxy S24",
        "category": "AMOLED",
        "color": "Black",
        "description": "Replacement AMOLED display.",
        "price": 219.99,
        "image": "https://cdn.example.com/s24.png",
        "partNumber": "SM-S921B-AMOLED-BLK"
    }


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client():
    """
    Create FastAPI test client.

    Usage:
        def test_endpoint(test_client):
            response = test_client.get("/api/products")
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)
