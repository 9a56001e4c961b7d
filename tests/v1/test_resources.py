# tests/v1/test_resources.py
"""Tests for learning-resource endpoints."""

from __future__ import annotations

from fastapi import status


def _share(client, headers, title: str, *, is_public: bool = True) -> dict:
    response = client.post(
        "/api/v1/resources",
        json={
            "title": title,
            "fileUrl": f"/uploads/{title}.pdf",
            "fileName": f"{title}.pdf",
            "fileSize": 1024,
            "isPublic": is_public,
        },
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()["data"]


def test_private_resource_is_not_found_for_others(client, auth_token, other_auth_token) -> None:
    private = _share(client, auth_token, "notes", is_public=False)

    assert client.get(f"/api/v1/resources/{private['id']}", headers=auth_token).status_code == status.HTTP_200_OK
    for headers in (other_auth_token, {}):
        response = client.get(f"/api/v1/resources/{private['id']}", headers=headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"]["code"] == "NOT_FOUND"


def test_listing_totals_match_visibility(client, auth_token, other_auth_token, test_user) -> None:
    _share(client, auth_token, "public")
    _share(client, auth_token, "private", is_public=False)

    guest = client.get("/api/v1/resources").json()["data"]
    assert guest["pagination"]["total"] == 1

    owner = client.get("/api/v1/resources", params={"onlyMine": "true"}, headers=auth_token).json()["data"]
    assert owner["pagination"]["total"] == 2

    other = client.get("/api/v1/resources", params={"ownerId": test_user.id}, headers=other_auth_token).json()["data"]
    assert [item["title"] for item in other["items"]] == ["public"]


def test_download_counts(client, auth_token) -> None:
    resource = _share(client, auth_token, "slides")
    first = client.post(f"/api/v1/resources/{resource['id']}/download")
    second = client.post(f"/api/v1/resources/{resource['id']}/download")

    assert first.json()["data"]["downloadCount"] == 1
    assert second.json()["data"] == {
        "fileUrl": "/uploads/slides.pdf",
        "fileName": "slides.pdf",
        "downloadCount": 2,
    }


def test_only_owner_deletes(client, auth_token, other_auth_token) -> None:
    resource = _share(client, auth_token, "exam")
    assert client.delete(f"/api/v1/resources/{resource['id']}", headers=other_auth_token).status_code == 403
    assert client.delete(f"/api/v1/resources/{resource['id']}", headers=auth_token).status_code == 200
    assert client.get(f"/api/v1/resources/{resource['id']}").status_code == 404
