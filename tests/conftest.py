"""Shared test fixtures.

Provides a ``test_client`` for FastAPI, a small theme catalog, fluent
Supabase mocks and an authenticated caller for use across test modules.
"""

import os
from collections.abc import Generator
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")

USER_ID = "3f2c9a1e-5b7d-4c2a-9e8f-1a2b3c4d5e6f"


def chainable_table_mock() -> MagicMock:
    """Return a mock that supports fluent chaining."""
    m = MagicMock()
    for method in (
        "select", "insert", "upsert", "update", "eq", "limit", "order",
    ):
        getattr(m, method).return_value = m
    return m


def make_theme(name: str, keywords: list[str], category: str = "wellness"):
    from app.models.theme import Theme

    return Theme(
        name=name,
        title=name.replace("-", " ").title(),
        summary=f"Reflections about {name.replace('-', ' ')}.",
        keywords=keywords,
        emoji="*",
        category=category,
    )


@pytest.fixture()
def sample_themes() -> list:
    """Catalog ordered by name, as the theme store returns it."""
    return [
        make_theme("anxiety-worry", ["anxiety", "anxious", "worry", "worried", "nervous", "panic"], "emotional"),
        make_theme("career-purpose", ["work", "job", "career", "purpose", "goals"], "growth"),
        make_theme("habits-routine", ["habit", "routine", "daily", "schedule", "morning"]),
        make_theme("relationships-connection", ["family", "friends", "partner", "lonely", "love"], "social"),
        make_theme("sleep-rest", ["sleep", "insomnia", "rest", "tired", "night"]),
        make_theme("stress-energy", ["stress", "stressed", "tired", "exhausted", "overwhelmed", "energy"]),
    ]


@pytest.fixture()
def static_catalog(sample_themes: list):
    """A ThemeCatalog backed by ``sample_themes`` instead of Supabase."""
    from app.services.catalog import ThemeCatalog

    return ThemeCatalog(loader=lambda: list(sample_themes))


@pytest.fixture()
def profiles_table() -> MagicMock:
    """``user_profiles`` table mock with no stored state."""
    table = chainable_table_mock()
    table.execute.return_value = MagicMock(data=[])
    return table


@pytest.fixture()
def user_client(profiles_table: MagicMock) -> MagicMock:
    """Supabase client acting as the authenticated caller."""
    client = MagicMock()
    client.table.return_value = profiles_table
    client.auth.get_user.return_value = MagicMock(user=MagicMock(id=USER_ID))
    return client


@pytest.fixture()
def authenticated_user(user_client: MagicMock):
    from app.services.auth import AuthenticatedUser

    return AuthenticatedUser(user_id=USER_ID, client=user_client)


@pytest.fixture()
def mock_supabase_module() -> Generator[MagicMock, None, None]:
    """Patch the Supabase client at module level in the health router."""
    mock_client = MagicMock()
    mock_table = chainable_table_mock()
    mock_table.execute.return_value = MagicMock()  # non-None result
    mock_client.table.return_value = mock_table

    with patch("app.routers.health.get_supabase", return_value=mock_client):
        yield mock_client


@pytest.fixture()
def mock_supabase_disconnected() -> Generator[MagicMock, None, None]:
    """Patch ``get_supabase`` to simulate a disconnected database."""
    with patch(
        "app.routers.health.get_supabase",
        side_effect=Exception("Connection refused"),
    ):
        yield MagicMock()


@pytest.fixture()
def test_client() -> Generator[TestClient, None, None]:
    """Provide a FastAPI TestClient."""
    from app.main import app

    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
