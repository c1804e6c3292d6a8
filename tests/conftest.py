"""
Pytest configuration and shared fixtures.

This module provides common fixtures for testing:
- Graph store and resolver
- User service
- Graph builders
- Service mocking
- API clients
"""

import os
import sys
import json
import tempfile
from pathlib import Path
from typing import Callable, Dict, Generator, Iterable, Tuple
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables before imports
os.environ["FRIENDSHIP_GRAPH_FILE"] = str(Path(tempfile.gettempdir()) / "friendship_test_graph.json")
os.environ["LOG_LEVEL"] = "DEBUG"

from friendship.graph import GraphStore, FriendDegreeResolver, FriendEdge, User, create_user
from friendship.services import ServiceContext, UserService


# =============================================================================
# Configuration
# =============================================================================

@pytest.fixture(scope="session")
def test_config():
    """Test configuration values."""
    return {
        "test_user_name": "Test User",
        "test_email": "test.user@example.com",
        "other_email": "other.user@example.com",
    }


# =============================================================================
# Store Fixtures
# =============================================================================

@pytest.fixture
def temp_graph_file() -> Generator[Path, None, None]:
    """Create a temporary file for graph storage."""
    with tempfile.NamedTemporaryFile(
        mode='w', suffix='.json', delete=False
    ) as f:
        json.dump({"users": [], "friends": []}, f)
        temp_path = Path(f.name)

    yield temp_path

    # Cleanup
    if temp_path.exists():
        temp_path.unlink()


@pytest.fixture
def temp_data_dir() -> Generator[Path, None, None]:
    """Create a temporary data directory."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def graph_store(temp_graph_file) -> GraphStore:
    """Create a GraphStore backed by a temporary file."""
    return GraphStore(file_path=temp_graph_file)


@pytest.fixture
def memory_store() -> GraphStore:
    """Create an in-memory GraphStore."""
    return GraphStore()


@pytest.fixture
def resolver(memory_store) -> FriendDegreeResolver:
    """Resolver over the in-memory store."""
    return FriendDegreeResolver(memory_store)


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def service_context(graph_store) -> ServiceContext:
    """ServiceContext over the temporary file store."""
    return ServiceContext.create(store=graph_store)


@pytest.fixture
def user_service(service_context) -> UserService:
    """UserService over the temporary file store."""
    return UserService(service_context)


@pytest.fixture
def sample_user(user_service, test_config) -> User:
    """Create a sample user in the store."""
    return user_service.create(
        name=test_config["test_user_name"],
        email=test_config["test_email"]
    )


# =============================================================================
# Graph Builders
# =============================================================================

GraphBuilder = Callable[[Iterable[str], Iterable[Tuple[str, str]]], Dict[str, str]]


@pytest.fixture
def build_graph(memory_store) -> GraphBuilder:
    """
    Populate the in-memory store from names and directed edges.

    Each edge is ``(friend_of, friend)``: the second name is a friend of the
    first. Returns a mapping of name to generated user id.
    """
    def _build(names: Iterable[str], edges: Iterable[Tuple[str, str]] = ()) -> Dict[str, str]:
        ids = {}
        for name in names:
            user = create_user(name=name, email=f"{name.lower()}@example.com")
            memory_store.add_user(user)
            ids[name] = user.id

        memory_store.add_edges(
            FriendEdge(friend_id=ids[friend], friend_of_id=ids[friend_of])
            for friend_of, friend in edges
        )
        return ids

    return _build


# =============================================================================
# Mock Services
# =============================================================================

@pytest.fixture
def mock_services():
    """Create mock services container."""
    services = MagicMock()

    services.users = MagicMock()
    services.users.find = MagicMock(return_value=[])
    services.users.find_one = MagicMock()
    services.users.get_friends_by_degree = MagicMock(return_value=[])

    services.context = MagicMock()
    services.context.store.stats = MagicMock(return_value={
        "total_users": 0,
        "total_edges": 0,
        "persistent": False
    })

    services.config = MagicMock()

    return services


# =============================================================================
# API Client Fixtures
# =============================================================================

@pytest.fixture
def api_app():
    """Create FastAPI app for testing."""
    from api.main import app
    return app


@pytest.fixture
def api_client(api_app) -> TestClient:
    """Create synchronous test client for API."""
    return TestClient(api_app)


@pytest.fixture
def api_services():
    """Real services over an in-memory store."""
    from api.deps import build_services
    return build_services(ServiceContext.create(store=GraphStore()))


@pytest.fixture
def users_client(api_client, api_services) -> Generator[TestClient, None, None]:
    """Test client wired to the in-memory services."""
    with patch("api.deps.get_services", return_value=api_services):
        yield api_client


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "api: mark test as API endpoint test"
    )
