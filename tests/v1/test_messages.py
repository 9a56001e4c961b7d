# tests/v1/test_messages.py
"""Tests for private message endpoints."""

from __future__ import annotations

from fastapi import status

from tests.conftest import auth_headers, make_user


def test_send_and_read_conversation(client, auth_token, other_auth_token, test_user, other_user) -> None:
    sent = client.post(
        "/api/v1/messages",
        json={"receiverId": other_user.id, "content": "Lunch?"},
        headers=auth_token,
    )
    assert sent.status_code == status.HTTP_201_CREATED
    message = sent.json()["data"]
    assert message["senderId"] == test_user.id
    assert message["isRead"] is False

    unread = client.get("/api/v1/messages/unread-count", headers=other_auth_token).json()["data"]
    assert unread == {"count": 1}

    [conversation] = client.get("/api/v1/messages/conversations", headers=other_auth_token).json()["data"]
    assert conversation["counterparty"]["id"] == test_user.id
    assert conversation["lastMessage"]["content"] == "Lunch?"
    assert conversation["unreadCount"] == 1

    read = client.put(f"/api/v1/messages/{message['id']}/read", headers=other_auth_token)
    assert read.json()["data"]["isRead"] is True
    assert client.get("/api/v1/messages/unread-count", headers=other_auth_token).json()["data"]["count"] == 0


def test_sender_cannot_mark_read(client, auth_token, other_user) -> None:
    message = client.post(
        "/api/v1/messages", json={"receiverId": other_user.id, "content": "Hi"}, headers=auth_token
    ).json()["data"]
    response = client.put(f"/api/v1/messages/{message['id']}/read", headers=auth_token)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_conversation_detail_is_newest_first(client, auth_token, other_auth_token, test_user, other_user) -> None:
    client.post("/api/v1/messages", json={"receiverId": other_user.id, "content": "one"}, headers=auth_token)
    client.post("/api/v1/messages", json={"receiverId": test_user.id, "content": "two"}, headers=other_auth_token)

    detail = client.get(f"/api/v1/messages/conversations/{other_user.id}", headers=auth_token).json()["data"]
    assert detail["counterparty"]["username"] == "bob"
    assert [m["content"] for m in detail["messages"]["items"]] == ["two", "one"]


def test_message_to_banned_user_is_forbidden(client, auth_token, db_session) -> None:
    banned = make_user(db_session, is_active=False)
    response = client.post(
        "/api/v1/messages", json={"receiverId": banned.id, "content": "hello?"}, headers=auth_token
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_empty_message_is_rejected(client, db_session, other_user) -> None:
    sender = make_user(db_session)
    response = client.post(
        "/api/v1/messages", json={"receiverId": other_user.id, "content": "  "}, headers=auth_headers(sender)
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
