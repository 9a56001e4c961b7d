# tests/services/test_visibility.py
"""Anonymous masking and admin-hierarchy opacity."""

from __future__ import annotations

import pytest

from campus_forum.core.errors import NotFoundError
from campus_forum.models import AdminAction, AdminTargetType, Follow, Message, UserRole
from campus_forum.services import admin_content, comments, follows, messages, posts
from campus_forum.services.admin_content import AdminCommentQuery, AdminPostQuery
from campus_forum.services.audit import AuditLog, list_admin_logs
from campus_forum.services.toggles import Relation, activate, deactivate
from campus_forum.services.visibility import (
    AdminLogQuery,
    UserListQuery,
    UserStatusFilter,
    build_user_query,
    get_visible_user,
    mask_author,
)
from tests.conftest import make_comment, make_post, make_user, viewer_of


@pytest.mark.parametrize("who", ["author", "other", "guest"])
def test_anonymous_post_is_masked_for_everyone(db_session, test_user, other_user, anonymous_post, who) -> None:
    viewer = {"author": viewer_of(test_user), "other": viewer_of(other_user), "guest": None}[who]

    view = posts.get_post_detail(db_session, viewer, anonymous_post.id)

    assert view.author.id is None
    assert view.author.username == "Anonymous"
    assert view.author.avatar_url is None
    # Stored authorship is untouched.
    assert view.post.author_id == test_user.id


def test_comments_in_anonymous_category_are_masked(db_session, test_user, other_user, anonymous_post) -> None:
    make_comment(db_session, other_user, anonymous_post)

    page = comments.list_comments(db_session, viewer_of(other_user), anonymous_post.id)

    assert [view.author.id for view in page.items] == [None]


def test_regular_category_shows_author(db_session, test_user, category) -> None:
    view = mask_author(test_user, category)
    assert view.id == test_user.id
    assert view.username == test_user.username


def test_listing_by_author_skips_anonymous_posts(db_session, test_user, test_post, anonymous_post) -> None:
    page = posts.list_posts(db_session, None, author_id=test_user.id)
    assert [view.post.id for view in page.items] == [test_post.id]
    assert page.total == 1


def test_admin_cannot_see_super_admins(db_session, admin_user, super_admin, test_user) -> None:
    admin = viewer_of(admin_user)

    listed = build_user_query(db_session, UserListQuery(), admin).all()
    assert super_admin.id not in {user.id for user in listed}

    by_role = build_user_query(db_session, UserListQuery(role=UserRole.SUPER_ADMIN), admin).all()
    assert by_role == []

    with pytest.raises(NotFoundError):
        get_visible_user(db_session, admin, super_admin.id)


def test_super_admin_sees_everyone(db_session, admin_user, super_admin, test_user) -> None:
    listed = build_user_query(db_session, UserListQuery(), viewer_of(super_admin)).all()
    assert {admin_user.id, super_admin.id, test_user.id} <= {user.id for user in listed}


def test_user_query_filters(db_session, admin_user, test_user, other_user) -> None:
    other_user.is_active = False
    db_session.commit()
    admin = viewer_of(admin_user)

    banned = build_user_query(db_session, UserListQuery(status=UserStatusFilter.BANNED), admin).all()
    assert [user.id for user in banned] == [other_user.id]

    matches = build_user_query(db_session, UserListQuery(keyword="ali"), admin).all()
    assert [user.id for user in matches] == [test_user.id]


def test_admin_log_hides_super_admin_entries(db_session, admin_user, super_admin) -> None:
    AuditLog.record(db_session, super_admin.id, AdminAction.BAN_USER, AdminTargetType.USER, 1, "by root")
    AuditLog.record(db_session, admin_user.id, AdminAction.PIN_POST, AdminTargetType.POST, 2, "by admin")

    seen_by_admin = list_admin_logs(db_session, viewer_of(admin_user), AdminLogQuery())
    assert [entry.description for entry in seen_by_admin.items] == ["by admin"]
    assert seen_by_admin.total == 1

    seen_by_root = list_admin_logs(db_session, viewer_of(super_admin), AdminLogQuery())
    assert seen_by_root.total == 2


def test_guest_and_user_lookups_are_not_hidden(db_session, super_admin) -> None:
    assert get_visible_user(db_session, None, super_admin.id).id == super_admin.id
    user = make_user(db_session)
    assert get_visible_user(db_session, viewer_of(user), super_admin.id).id == super_admin.id


def test_follow_lists_hide_super_admins_from_admins(db_session, admin_user, super_admin, test_user) -> None:
    rows = [
        Follow(follower_id=test_user.id, following_id=super_admin.id),
        Follow(follower_id=super_admin.id, following_id=test_user.id),
    ]
    db_session.add_all(rows)
    db_session.commit()
    admin = viewer_of(admin_user)

    with pytest.raises(NotFoundError):
        follows.list_followers(db_session, admin, super_admin.id)
    with pytest.raises(NotFoundError):
        follows.list_following(db_session, admin, super_admin.id)

    following = follows.list_following(db_session, admin, test_user.id)
    assert following.items == []
    assert following.total == 0
    assert follows.list_followers(db_session, admin, test_user.id).total == 0

    profile = follows.get_profile(db_session, admin, test_user.id)
    assert (profile.follower_count, profile.following_count) == (0, 0)

    # Regular users still see the full graph.
    regular = follows.get_profile(db_session, viewer_of(make_user(db_session)), test_user.id)
    assert (regular.follower_count, regular.following_count) == (1, 1)


def test_admin_cannot_follow_super_admin(db_session, admin_user, super_admin) -> None:
    admin = viewer_of(admin_user)
    with pytest.raises(NotFoundError):
        activate(db_session, admin, Relation.FOLLOW, super_admin.id)
    with pytest.raises(NotFoundError):
        deactivate(db_session, admin, Relation.FOLLOW, super_admin.id)
    assert db_session.query(Follow).count() == 0


def test_admin_cannot_message_super_admin(db_session, admin_user, super_admin) -> None:
    admin = viewer_of(admin_user)
    with pytest.raises(NotFoundError):
        messages.send_message(db_session, admin, receiver_id=super_admin.id, content="hello")
    with pytest.raises(NotFoundError):
        messages.get_conversation(db_session, admin, super_admin.id)
    assert db_session.query(Message).count() == 0


def test_conversation_list_hides_super_admin_peers(db_session, admin_user, super_admin, test_user) -> None:
    db_session.add_all([
        Message(sender_id=super_admin.id, receiver_id=admin_user.id, content="from root"),
        Message(sender_id=test_user.id, receiver_id=admin_user.id, content="from alice"),
    ])
    db_session.commit()
    admin = viewer_of(admin_user)

    conversations = messages.list_conversations(db_session, admin)
    assert [c.counterparty.id for c in conversations] == [test_user.id]
    assert messages.unread_message_count(db_session, admin) == 1

    # The super admin still sees the conversation from their side.
    root_view = messages.list_conversations(db_session, viewer_of(super_admin))
    assert [c.counterparty.id for c in root_view] == [admin_user.id]


def test_admin_content_author_filter_ignores_hidden_authors(
    db_session, admin_user, super_admin, category
) -> None:
    post = make_post(db_session, super_admin, category, title="Root notice")
    make_comment(db_session, super_admin, post)
    admin = viewer_of(admin_user)

    assert admin_content.list_posts(db_session, admin, AdminPostQuery(author_id=super_admin.id)).total == 0
    assert admin_content.list_comments(db_session, admin, AdminCommentQuery(author_id=super_admin.id)).total == 0

    root = viewer_of(super_admin)
    assert admin_content.list_posts(db_session, root, AdminPostQuery(author_id=super_admin.id)).total == 1
    assert admin_content.list_comments(db_session, root, AdminCommentQuery(author_id=super_admin.id)).total == 1
