"""
Tests for the comment endpoints.
"""
import uuid


class TestCommentEndpoints:
    def test_create_and_list(self, client, stored_post):
        response = client.post(
            "/api/v1/comments",
            json={"postId": stored_post["id"], "author": "bob", "content": "First!"},
        )

        assert response.status_code == 201
        created = response.json()["data"]
        assert created["postId"] == stored_post["id"]
        assert "createdAt" in created

        listing = client.get("/api/v1/comments", params={"postId": stored_post["id"]})
        assert [c["id"] for c in listing.json()["data"]] == [created["id"]]

    def test_comment_on_missing_post(self, client):
        response = client.post(
            "/api/v1/comments",
            json={"postId": str(uuid.uuid4()), "author": "bob", "content": "hello"},
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "POST_NOT_FOUND"

    def test_empty_content_rejected(self, client, stored_post):
        response = client.post(
            "/api/v1/comments",
            json={"postId": stored_post["id"], "author": "bob", "content": ""},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_delete(self, client, stored_post):
        created = client.post(
            "/api/v1/comments",
            json={"postId": stored_post["id"], "author": "bob", "content": "x"},
        ).json()["data"]

        assert client.delete(f"/api/v1/comments/{created['id']}").status_code == 204

        response = client.delete(f"/api/v1/comments/{created['id']}")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "COMMENT_NOT_FOUND"

    def test_delete_malformed_id(self, client):
        response = client.delete("/api/v1/comments/123")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_COMMENT_ID"
