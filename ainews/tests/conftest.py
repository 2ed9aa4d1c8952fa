"""
Pytest fixtures for ainews tests.
"""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from ainews.config import state
from ainews.database import ArticleCandidate, Category, Database, Industry
from ainews.providers.base import (
    LLMProvider,
    LLMResponse,
    Message,
    ModelTier,
    ProviderCapabilities,
    ResponseSchema,
)
from ainews.rate_limit import limiter
from ainews.server import app

STATE_FIELDS = (
    "db", "provider", "classifier", "summarizer",
    "extractor", "aggregator", "refresh_in_progress",
)


class MockProvider(LLMProvider):
    """Mock LLM provider that returns pre-configured responses."""

    TIER_MODELS = {
        ModelTier.FAST: "mock-fast",
        ModelTier.STANDARD: "mock-standard",
        ModelTier.ADVANCED: "mock-advanced",
    }

    def __init__(self):
        self.calls: list[dict] = []
        self.responses: list[LLMResponse | Exception] = []

    @property
    def name(self) -> str:
        return "mock"

    @property
    def capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(supports_structured_output=True)

    def queue_response(self, text: str = "", parsed=None):
        """Queue a response to be returned on the next complete() call."""
        self.responses.append(LLMResponse(text=text, model="mock-fast", parsed=parsed))

    def queue_error(self, error: Exception):
        """Make the next complete() call raise."""
        self.responses.append(error)

    def complete(
        self,
        messages: list[Message],
        response_schema: ResponseSchema | None = None,
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.0,
    ) -> LLMResponse:
        self.calls.append({
            "messages": messages,
            "response_schema": response_schema,
            "model": model,
        })
        if not self.responses:
            return LLMResponse(text="", model=model or "mock-fast")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_candidate(**overrides) -> ArticleCandidate:
    """Build an article candidate with sensible defaults."""
    fields = {
        "source_id": "https://example.com/article-1",
        "title": "Test Article",
        "url": "https://example.com/article-1",
        "source": "Example News",
        "published_at": datetime.now(timezone.utc),
        "description": "A short description of the article.",
        "content": "<p>The full content of the article.</p>",
        "category": Category.OTHER,
        "relevance_score": 50,
        "industries": [],
    }
    fields.update(overrides)
    return ArticleCandidate(**fields)


@pytest.fixture
def candidate_factory():
    """Factory for article candidates."""
    return make_candidate


@pytest.fixture
def mock_provider():
    return MockProvider()


@pytest.fixture
def temp_db_path():
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        yield Path(f.name)
    # Cleanup
    if os.path.exists(f.name):
        os.unlink(f.name)


@pytest.fixture
def test_db(temp_db_path):
    """Create a test database instance."""
    db = Database(temp_db_path)
    yield db


@pytest.fixture
def client(test_db):
    """Create a test client with an isolated database and no LLM."""
    # Store original state
    original = {name: getattr(state, name) for name in STATE_FIELDS}

    state.db = test_db
    state.provider = None
    state.classifier = None
    state.summarizer = None  # Disable for tests (requires API key)
    state.extractor = None
    state.aggregator = None
    state.refresh_in_progress = False
    limiter.reset()

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    # Restore original state
    for name, value in original.items():
        setattr(state, name, value)


@pytest.fixture
def client_with_data(client, test_db):
    """Test client with sample articles pre-populated."""
    now = datetime.now(timezone.utc)

    model_id = test_db.insert_article(make_candidate(
        source_id="guid-model",
        url="https://example.com/new-model",
        title="Lab releases new reasoning model",
        description="A new model tops reasoning benchmarks.",
        category=Category.BREAKTHROUGH,
        relevance_score=90,
        industries=[Industry.TECHNOLOGY],
        published_at=now - timedelta(hours=1),
    ))
    funding_id = test_db.insert_article(make_candidate(
        source_id="guid-funding",
        url="https://example.com/funding",
        title="Startup raises $50M for AI diagnostics",
        description="Series B round for medical imaging AI.",
        category=Category.FUNDING,
        relevance_score=70,
        industries=[Industry.MEDICAL, Industry.FINANCE],
        published_at=now - timedelta(hours=2),
    ))
    policy_id = test_db.insert_article(make_candidate(
        source_id="guid-policy",
        url="https://example.com/policy",
        title="Regulators publish AI rules",
        description="New compliance rules for model providers.",
        category=Category.POLICY,
        relevance_score=95,
        industries=[],
        published_at=now - timedelta(days=10),
    ))

    yield client, {
        "article_ids": [model_id, funding_id, policy_id],
        "model_id": model_id,
        "funding_id": funding_id,
        "policy_id": policy_id,
    }
