# tests/v1/test_posts.py
"""Tests for post, like, favorite and comment-thread endpoints."""

from __future__ import annotations

from fastapi import status

from tests.conftest import auth_headers, make_comment


def test_create_post_returns_camel_case_envelope(client, auth_token, category) -> None:
    response = client.post(
        "/api/v1/posts",
        json={"categoryId": category.id, "title": "Exam tips", "content": "Sleep well."},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()

    assert body["success"] is True
    assert body["message"] == "Post created"
    post = body["data"]
    assert post["categoryName"] == "General"
    assert post["author"]["username"] == "alice"
    assert post["likeCount"] == 0
    assert "like_count" not in post

    listing = client.get("/api/v1/categories").json()["data"]
    assert listing[0]["postCount"] == 1


def test_create_post_requires_authentication(client, category) -> None:
    response = client.post(
        "/api/v1/posts",
        json={"categoryId": category.id, "title": "Hi", "content": "There"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {
        "success": False,
        "error": {"code": "UNAUTHORIZED", "message": "Authentication required"},
    }


def test_invalid_token_is_unauthorized(client, test_post) -> None:
    response = client.get(f"/api/v1/posts/{test_post.id}", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_missing_fields_are_request_validation_errors(client, auth_token) -> None:
    response = client.post("/api/v1/posts", json={"title": "No category"}, headers=auth_token)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert any("categoryId" in item["loc"] for item in error["details"])


def test_blank_title_is_validation_error(client, auth_token, category) -> None:
    response = client.post(
        "/api/v1/posts",
        json={"categoryId": category.id, "title": "   ", "content": "Body"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_post_detail_counts_views(client, test_post) -> None:
    client.get(f"/api/v1/posts/{test_post.id}")
    response = client.get(f"/api/v1/posts/{test_post.id}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["viewCount"] == 2


def test_anonymous_post_is_masked_even_for_its_author(client, auth_token, anonymous_post) -> None:
    data = client.get(f"/api/v1/posts/{anonymous_post.id}", headers=auth_token).json()["data"]
    assert data["isAnonymous"] is True
    assert data["author"] == {"id": None, "username": "Anonymous", "avatarUrl": None}


def test_like_and_unlike_post(client, other_auth_token, test_post) -> None:
    url = f"/api/v1/posts/{test_post.id}/like"

    liked = client.post(url, headers=other_auth_token)
    assert liked.status_code == status.HTTP_200_OK
    assert liked.json()["data"] == {"isLiked": True, "likeCount": 1}

    duplicate = client.post(url, headers=other_auth_token)
    assert duplicate.status_code == status.HTTP_409_CONFLICT
    assert duplicate.json()["error"]["code"] == "ALREADY_ACTIVE"

    detail = client.get(f"/api/v1/posts/{test_post.id}", headers=other_auth_token).json()["data"]
    assert detail["isLiked"] is True
    assert detail["likeCount"] == 1

    unliked = client.delete(url, headers=other_auth_token)
    assert unliked.json()["data"] == {"isLiked": False, "likeCount": 0}

    again = client.delete(url, headers=other_auth_token)
    assert again.status_code == status.HTTP_409_CONFLICT
    assert again.json()["error"]["code"] == "NOT_ACTIVE"


def test_favorite_missing_post_is_not_found(client, auth_token) -> None:
    response = client.post("/api/v1/posts/9999/favorite", headers=auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_only_author_edits_and_deletes(client, auth_token, other_auth_token, test_post, category) -> None:
    forbidden = client.put(f"/api/v1/posts/{test_post.id}", json={"title": "Mine now"}, headers=other_auth_token)
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN

    edited = client.put(f"/api/v1/posts/{test_post.id}", json={"title": "Edited"}, headers=auth_token)
    assert edited.json()["data"]["title"] == "Edited"

    deleted = client.delete(f"/api/v1/posts/{test_post.id}", headers=auth_token)
    assert deleted.status_code == status.HTTP_200_OK
    assert client.get(f"/api/v1/posts/{test_post.id}").status_code == status.HTTP_404_NOT_FOUND
    assert client.get("/api/v1/categories").json()["data"][0]["postCount"] == 0


def test_list_posts_filters_by_category(client, test_post, anonymous_post, category) -> None:
    response = client.get("/api/v1/posts", params={"categoryId": category.id})
    body = response.json()["data"]
    assert [item["id"] for item in body["items"]] == [test_post.id]
    assert body["pagination"] == {"page": 1, "limit": 20, "total": 1, "totalPages": 1}


def test_comment_thread(client, auth_token, other_auth_token, test_post, db_session, other_user) -> None:
    top = client.post(
        f"/api/v1/posts/{test_post.id}/comments", json={"content": "First!"}, headers=other_auth_token
    ).json()["data"]
    reply = client.post(
        f"/api/v1/posts/{test_post.id}/comments",
        json={"content": "Welcome", "parentId": top["id"]},
        headers=auth_token,
    )
    assert reply.status_code == status.HTTP_201_CREATED
    assert reply.json()["data"]["parentId"] == top["id"]

    thread = client.get(f"/api/v1/posts/{test_post.id}/comments").json()["data"]
    assert [item["content"] for item in thread["items"]] == ["First!", "Welcome"]
    assert thread["items"][0]["replyCount"] == 1

    detail = client.get(f"/api/v1/posts/{test_post.id}").json()["data"]
    assert detail["commentCount"] == 2


def test_comment_like_and_delete(client, auth_token, test_post, db_session, other_user) -> None:
    comment = make_comment(db_session, other_user, test_post)

    like = client.post(f"/api/v1/comments/{comment.id}/like", headers=auth_token)
    assert like.json()["data"] == {"isLiked": True, "likeCount": 1}

    not_mine = client.delete(f"/api/v1/comments/{comment.id}", headers=auth_token)
    assert not_mine.status_code == status.HTTP_403_FORBIDDEN

    mine = client.delete(f"/api/v1/comments/{comment.id}", headers=auth_headers(other_user))
    assert mine.status_code == status.HTTP_200_OK
    assert client.get(f"/api/v1/posts/{test_post.id}").json()["data"]["commentCount"] == 0
