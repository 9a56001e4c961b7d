# tests/v1/test_admin.py
"""Tests for the admin back-office endpoints."""

from __future__ import annotations

from fastapi import status

from tests.conftest import make_comment


def test_admin_listing_hides_super_admins(client, admin_token, super_admin_token, super_admin, test_user) -> None:
    listed = client.get("/api/v1/admin/users", headers=admin_token).json()["data"]
    assert super_admin.id not in {user["id"] for user in listed["items"]}

    by_role = client.get("/api/v1/admin/users", params={"role": "super_admin"}, headers=admin_token).json()["data"]
    assert by_role["items"] == []
    assert by_role["pagination"]["total"] == 0

    lookup = client.get(f"/api/v1/admin/users/{super_admin.id}", headers=admin_token)
    assert lookup.status_code == status.HTTP_404_NOT_FOUND

    as_root = client.get(f"/api/v1/admin/users/{super_admin.id}", headers=super_admin_token)
    assert as_root.json()["data"]["role"] == "super_admin"


def test_ban_super_admin_as_admin_is_not_found(client, admin_token, super_admin) -> None:
    response = client.post(f"/api/v1/admin/users/{super_admin.id}/ban", headers=admin_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_ban_and_unban_user(client, admin_token, auth_token, test_user) -> None:
    banned = client.post(
        f"/api/v1/admin/users/{test_user.id}/ban", json={"reason": "spam"}, headers=admin_token
    )
    assert banned.status_code == status.HTTP_200_OK
    assert banned.json()["data"]["isActive"] is False

    # The banned account is locked out immediately.
    assert client.get("/api/v1/notifications", headers=auth_token).status_code == status.HTTP_403_FORBIDDEN

    client.post(f"/api/v1/admin/users/{test_user.id}/unban", headers=admin_token)
    assert client.get("/api/v1/notifications", headers=auth_token).status_code == status.HTTP_200_OK

    logs = client.get("/api/v1/admin/logs", params={"targetType": "user"}, headers=admin_token).json()["data"]
    assert [entry["action"] for entry in logs["items"]] == ["unban_user", "ban_user"]


def test_role_change_requires_super_admin(client, admin_token, super_admin_token, test_user) -> None:
    denied = client.put(f"/api/v1/admin/users/{test_user.id}", json={"role": "admin"}, headers=admin_token)
    assert denied.status_code == status.HTTP_403_FORBIDDEN

    granted = client.put(f"/api/v1/admin/users/{test_user.id}", json={"role": "admin"}, headers=super_admin_token)
    assert granted.json()["data"]["role"] == "admin"


def test_soft_delete_restore_and_hard_delete_post(client, admin_token, db_session, other_user, test_post) -> None:
    make_comment(db_session, other_user, test_post)

    deleted = client.delete(f"/api/v1/admin/posts/{test_post.id}", headers=admin_token)
    assert deleted.json()["data"]["isDeleted"] is True
    assert client.get("/api/v1/categories").json()["data"][0]["postCount"] == 0

    listed = client.get("/api/v1/admin/posts", params={"isDeleted": "true"}, headers=admin_token).json()["data"]
    assert [post["id"] for post in listed["items"]] == [test_post.id]

    restored = client.post(f"/api/v1/admin/posts/{test_post.id}/restore", headers=admin_token)
    assert restored.json()["data"]["isDeleted"] is False
    assert client.get("/api/v1/categories").json()["data"][0]["postCount"] == 1

    purged = client.delete(f"/api/v1/admin/posts/{test_post.id}/permanent", headers=admin_token)
    assert purged.json()["data"] == {"posts": 1, "comments": 1, "likes": 0, "favorites": 0}
    assert client.get("/api/v1/categories").json()["data"][0]["postCount"] == 0

    again = client.delete(f"/api/v1/admin/posts/{test_post.id}/permanent", headers=admin_token)
    assert again.status_code == status.HTTP_404_NOT_FOUND


def test_hard_delete_comment(client, admin_token, db_session, test_user, other_user, test_post) -> None:
    top = make_comment(db_session, other_user, test_post)
    make_comment(db_session, test_user, test_post, parent=top)

    response = client.delete(f"/api/v1/admin/comments/{top.id}/permanent", headers=admin_token)
    assert response.json()["data"]["comments"] == 2
    assert client.get(f"/api/v1/posts/{test_post.id}").json()["data"]["commentCount"] == 0


def test_lock_blocks_new_comments(client, admin_token, other_auth_token, test_post) -> None:
    locked = client.post(f"/api/v1/admin/posts/{test_post.id}/lock", headers=admin_token)
    assert locked.json()["data"]["isLocked"] is True

    response = client.post(
        f"/api/v1/posts/{test_post.id}/comments", json={"content": "Hello?"}, headers=other_auth_token
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_category_management(client, admin_token, category) -> None:
    created = client.post(
        "/api/v1/admin/categories", json={"name": "Confessions", "isAnonymous": True}, headers=admin_token
    )
    assert created.status_code == status.HTTP_201_CREATED
    new_id = created.json()["data"]["id"]

    duplicate = client.post("/api/v1/admin/categories", json={"name": "General"}, headers=admin_token)
    assert duplicate.status_code == status.HTTP_409_CONFLICT
    assert duplicate.json()["error"]["code"] == "ALREADY_EXISTS"

    reordered = client.put(
        "/api/v1/admin/categories/reorder", json={"categoryIds": [new_id, category.id]}, headers=admin_token
    ).json()["data"]
    assert [c["id"] for c in reordered] == [new_id, category.id]

    assert client.delete(f"/api/v1/admin/categories/{new_id}", headers=admin_token).status_code == 200


def test_stats_overview(client, admin_token, test_post, test_comment) -> None:
    response = client.get("/api/v1/admin/stats/overview", headers=admin_token)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert data["totalPosts"] == 1
    assert data["totalComments"] == 1
    assert data["totalUsers"] == 3


def test_stats_breakdowns(client, admin_token, super_admin, test_post) -> None:
    users = client.get("/api/v1/admin/stats/users", params={"period": "7d"}, headers=admin_token).json()["data"]
    assert users["period"] == "7d"
    # alice and the admin; the super admin is not counted
    assert users["total"] == 2
    assert users["trends"][0]["count"] == 2

    posts = client.get("/api/v1/admin/stats/posts", headers=admin_token).json()["data"]
    assert posts["period"] == "30d"
    assert posts["total"] == 1

    categories = client.get("/api/v1/admin/stats/categories", headers=admin_token).json()["data"]
    assert categories["total"] == 1
    assert categories["categories"][0]["name"] == "General"
    assert categories["categories"][0]["postCount"] == 1

    bad_period = client.get("/api/v1/admin/stats/users", params={"period": "1y"}, headers=admin_token)
    assert bad_period.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_admin_resource_listing(client, admin_token, auth_token, test_user) -> None:
    created = client.post(
        "/api/v1/resources",
        json={"title": "Private notes", "fileUrl": "/uploads/p.pdf", "fileName": "p.pdf", "isPublic": False},
        headers=auth_token,
    )
    resource_id = created.json()["data"]["id"]

    listed = client.get(
        "/api/v1/admin/resources", params={"ownerId": test_user.id, "status": "active"}, headers=admin_token
    ).json()["data"]
    assert [item["id"] for item in listed["items"]] == [resource_id]
    assert listed["items"][0]["isDeleted"] is False

    deleted = client.get("/api/v1/admin/resources", params={"status": "deleted"}, headers=admin_token).json()["data"]
    assert deleted["pagination"]["total"] == 0
    assert client.get("/api/v1/admin/resources", headers=auth_token).status_code == status.HTTP_403_FORBIDDEN
