"""
Tests for bookmark, reading list and read history routes.
"""

USER = {"X-User-Id": "42"}
OTHER_USER = {"X-User-Id": "7"}


class TestBookmarks:
    """Tests for /bookmarks endpoints."""

    def test_requires_user_header(self, client):
        assert client.get("/bookmarks").status_code == 401

    def test_invalid_user_header(self, client):
        assert client.get("/bookmarks", headers={"X-User-Id": "abc"}).status_code == 422

    def test_add_list_remove(self, client_with_data):
        client, data = client_with_data
        article_id = data["model_id"]

        assert client.post(f"/bookmarks/{article_id}", headers=USER).status_code == 200
        assert client.get(f"/bookmarks/{article_id}", headers=USER).json() == {"value": True}

        items = client.get("/bookmarks", headers=USER).json()
        assert len(items) == 1
        assert items[0]["article"]["id"] == article_id
        assert "added_at" in items[0]

        response = client.delete(f"/bookmarks/{article_id}", headers=USER)
        assert response.json() == {"success": True}
        assert client.get(f"/bookmarks/{article_id}", headers=USER).json() == {"value": False}

    def test_add_twice_is_noop(self, client_with_data):
        client, data = client_with_data
        client.post(f"/bookmarks/{data['model_id']}", headers=USER)
        client.post(f"/bookmarks/{data['model_id']}", headers=USER)
        assert len(client.get("/bookmarks", headers=USER).json()) == 1

    def test_bookmarks_are_per_user(self, client_with_data):
        client, data = client_with_data
        client.post(f"/bookmarks/{data['model_id']}", headers=USER)
        assert client.get("/bookmarks", headers=OTHER_USER).json() == []

    def test_unknown_article(self, client):
        assert client.post("/bookmarks/99999", headers=USER).status_code == 404


class TestReadingList:
    """Tests for /reading-list endpoints."""

    def test_newest_first(self, client_with_data):
        client, data = client_with_data
        client.post(f"/reading-list/{data['model_id']}", headers=USER)
        client.post(f"/reading-list/{data['funding_id']}", headers=USER)

        ids = [item["article"]["id"] for item in client.get("/reading-list", headers=USER).json()]
        assert ids == [data["funding_id"], data["model_id"]]

    def test_remove_missing_entry(self, client_with_data):
        client, data = client_with_data
        response = client.delete(f"/reading-list/{data['model_id']}", headers=USER)
        assert response.json() == {"success": False}


class TestReadHistory:
    """Tests for /read-history endpoints."""

    def test_mark_read(self, client_with_data):
        client, data = client_with_data
        assert client.get(f"/read-history/{data['policy_id']}", headers=USER).json() == {"value": False}

        client.post(f"/read-history/{data['policy_id']}", headers=USER)
        client.post(f"/read-history/{data['policy_id']}", headers=USER)

        assert client.get(f"/read-history/{data['policy_id']}", headers=USER).json() == {"value": True}
        assert len(client.get("/read-history", headers=USER).json()) == 1

    def test_no_delete_route(self, client_with_data):
        client, data = client_with_data
        response = client.delete(f"/read-history/{data['policy_id']}", headers=USER)
        assert response.status_code == 405
