"""Pytest configuration and fixtures."""

from collections.abc import AsyncIterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app, build_meeting_service
from src.models.summary import SummaryRecord
from src.personas.registry import PersonaRegistry
from src.services.llm_client import LLMClient


@pytest.fixture
def registry() -> PersonaRegistry:
    """Built-in persona catalog."""
    return PersonaRegistry()


@pytest.fixture
def mock_llm_client() -> MagicMock:
    """Mock LLM client that echoes the persona's system prompt prefix."""
    client = MagicMock(spec=LLMClient)
    client.is_configured = True

    async def mock_generate(prompt, system=None, temperature=0.7, max_tokens=1024):
        return f"Reply in the voice of: {(system or '')[:30]}"

    client.generate = AsyncMock(side_effect=mock_generate)
    client.extract = AsyncMock(
        return_value=SummaryRecord(
            topic="Launch plan",
            key_points=["Ship the beta in Q3"],
            action_items=[],
            conclusion="Proceed with the beta.",
        )
    )
    return client


@pytest.fixture
async def client(
    mock_llm_client: MagicMock, registry: PersonaRegistry
) -> AsyncIterator[AsyncClient]:
    """Create async test client for FastAPI app with a mocked LLM."""
    app.state.llm_client = mock_llm_client
    app.state.persona_registry = registry
    app.state.meeting_service = build_meeting_service(
        mock_llm_client, registry, reply_delay_seconds=0.0
    )

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    # Clean up app state
    del app.state.llm_client
    del app.state.persona_registry
    del app.state.meeting_service
