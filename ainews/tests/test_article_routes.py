"""
Tests for article routes.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from ainews.aggregator import AggregationResult
from ainews.config import config, state
from ainews.exceptions import StorageUnavailableError
from ainews.summarizer import Summarizer


class TestListArticles:
    """Tests for GET /articles endpoint."""

    def test_list_articles_empty(self, client):
        """Should return empty page when no articles."""
        response = client.get("/articles")
        assert response.status_code == 200
        assert response.json() == {"articles": [], "total": 0}

    def test_default_time_range_is_24h(self, client_with_data):
        """Articles older than a day are hidden by default."""
        client, data = client_with_data
        body = client.get("/articles").json()
        assert body["total"] == 2
        assert {a["id"] for a in body["articles"]} == {data["model_id"], data["funding_id"]}

    def test_time_range_all(self, client_with_data):
        client, data = client_with_data
        body = client.get("/articles?time_range=all").json()
        assert body["total"] == 3
        # Ranked by relevance score first
        assert body["articles"][0]["id"] == data["policy_id"]

    def test_invalid_time_range(self, client):
        response = client.get("/articles?time_range=1y")
        assert response.status_code == 422

    def test_has_required_fields(self, client_with_data):
        client, data = client_with_data
        article = client.get("/articles").json()["articles"][0]
        for field in (
            "id", "source_id", "title", "url", "source", "category",
            "relevance_score", "industries", "published_at", "summary",
        ):
            assert field in article

    def test_filter_by_category(self, client_with_data):
        client, data = client_with_data
        body = client.get("/articles?category=funding").json()
        assert [a["id"] for a in body["articles"]] == [data["funding_id"]]

    def test_filter_by_industry(self, client_with_data):
        client, data = client_with_data
        body = client.get("/articles?industry=medical").json()
        assert [a["id"] for a in body["articles"]] == [data["funding_id"]]
        assert body["articles"][0]["industries"] == ["medical", "finance"]

    def test_search(self, client_with_data):
        client, data = client_with_data
        body = client.get("/articles?search=reasoning").json()
        assert [a["id"] for a in body["articles"]] == [data["model_id"]]

    def test_limit_bounds(self, client):
        assert client.get("/articles?limit=0").status_code == 422
        assert client.get("/articles?limit=101").status_code == 422

    def test_limit_and_total(self, client_with_data):
        client, data = client_with_data
        body = client.get("/articles?limit=1&time_range=all").json()
        assert len(body["articles"]) == 1
        assert body["total"] == 3


class TestGetArticle:
    """Tests for GET /articles/{article_id} endpoint."""

    def test_get_article_not_found(self, client):
        response = client.get("/articles/99999")
        assert response.status_code == 404
        assert response.json()["detail"] == "Article not found"

    def test_get_article(self, client_with_data):
        client, data = client_with_data
        response = client.get(f"/articles/{data['model_id']}")
        assert response.status_code == 200
        assert response.json()["title"] == "Lab releases new reasoning model"


class TestSummary:
    """Tests for POST /articles/{article_id}/summary endpoint."""

    def test_unknown_article(self, client):
        assert client.post("/articles/99999/summary").status_code == 404

    def test_no_provider(self, client_with_data):
        client, data = client_with_data
        response = client.post(f"/articles/{data['model_id']}/summary")
        assert response.status_code == 503

    def test_generates_and_stores(self, client_with_data, mock_provider):
        client, data = client_with_data
        mock_provider.queue_response(text="  A lab released a model. It reasons well.  ")
        state.summarizer = Summarizer(mock_provider)

        response = client.post(f"/articles/{data['model_id']}/summary")

        assert response.status_code == 200
        assert response.json() == {"summary": "A lab released a model. It reasons well."}
        assert state.db.get_article(data["model_id"]).summary == "A lab released a model. It reasons well."

        system, user = mock_provider.calls[0]["messages"]
        assert system.content == Summarizer.SYSTEM_PROMPT
        assert "Lab releases new reasoning model" in user.content

    def test_existing_summary_skips_llm(self, client_with_data, mock_provider):
        client, data = client_with_data
        state.db.set_summary_if_absent(data["model_id"], "Stored summary.")
        state.summarizer = Summarizer(mock_provider)

        response = client.post(f"/articles/{data['model_id']}/summary")

        assert response.json() == {"summary": "Stored summary."}
        assert mock_provider.calls == []

    def test_llm_failure(self, client_with_data, mock_provider):
        client, data = client_with_data
        mock_provider.queue_error(RuntimeError("overloaded"))
        state.summarizer = Summarizer(mock_provider)

        response = client.post(f"/articles/{data['model_id']}/summary")

        assert response.status_code == 502
        assert state.db.get_article(data["model_id"]).summary is None


class TestAggregate:
    """Tests for POST /articles/aggregate endpoint."""

    @pytest.fixture
    def admin_key(self, monkeypatch):
        monkeypatch.setattr(config, "ADMIN_API_KEY", "admin-secret")
        return "admin-secret"

    def test_disabled_without_admin_key(self, client, monkeypatch):
        monkeypatch.setattr(config, "ADMIN_API_KEY", "")
        response = client.post("/articles/aggregate", headers={"X-Admin-Key": "anything"})
        assert response.status_code == 503

    def test_wrong_key_forbidden(self, client, admin_key):
        response = client.post("/articles/aggregate", headers={"X-Admin-Key": "wrong"})
        assert response.status_code == 403

    def test_missing_key_forbidden(self, client, admin_key):
        assert client.post("/articles/aggregate").status_code == 403

    def test_runs_aggregation(self, client, admin_key):
        state.aggregator = MagicMock()
        state.aggregator.aggregate_news = AsyncMock(return_value=AggregationResult(12, 5, 1))

        response = client.post("/articles/aggregate", headers={"X-Admin-Key": admin_key})

        assert response.status_code == 200
        assert response.json() == {"total": 12, "new": 5, "errors": 1}
        assert state.refresh_in_progress is False

    def test_overlapping_run_conflicts(self, client, admin_key):
        state.aggregator = MagicMock()
        state.aggregator.aggregate_news = AsyncMock()
        state.refresh_in_progress = True

        response = client.post("/articles/aggregate", headers={"X-Admin-Key": admin_key})

        assert response.status_code == 409
        state.aggregator.aggregate_news.assert_not_called()

    def test_storage_unavailable(self, client, admin_key):
        state.aggregator = MagicMock()
        state.aggregator.aggregate_news = AsyncMock(side_effect=StorageUnavailableError("gone"))

        response = client.post("/articles/aggregate", headers={"X-Admin-Key": admin_key})

        assert response.status_code == 503
        assert "gone" in response.json()["detail"]
        assert state.refresh_in_progress is False


class TestApiKey:
    """Tests for optional X-API-Key protection."""

    def test_open_when_not_configured(self, client, monkeypatch):
        monkeypatch.setattr(config, "AUTH_API_KEY", "")
        assert client.get("/articles").status_code == 200

    def test_required_when_configured(self, client, monkeypatch):
        monkeypatch.setattr(config, "AUTH_API_KEY", "user-secret")
        assert client.get("/articles").status_code == 401
        assert client.get("/articles", headers={"X-API-Key": "nope"}).status_code == 401
        assert client.get("/articles", headers={"X-API-Key": "user-secret"}).status_code == 200

    def test_status_is_public(self, client, monkeypatch):
        monkeypatch.setattr(config, "AUTH_API_KEY", "user-secret")
        assert client.get("/status").status_code == 200
