# tests/services/test_toggles.py
"""Like/favorite/follow guard behaviour and counter coupling."""

from __future__ import annotations

import pytest

from campus_forum.core.errors import (
    AlreadyActiveError,
    ForbiddenError,
    NotActiveError,
    NotFoundError,
    ValidationError,
)
from campus_forum.models import Favorite, Follow, Like, LikeTargetType, Notification, NotificationType
from campus_forum.services import toggles
from campus_forum.services.toggles import Relation, activate, deactivate, is_active
from tests.conftest import make_comment, make_user, viewer_of


def _likes_on(db_session, post_id: int) -> int:
    return (
        db_session.query(Like)
        .filter(Like.target_type == LikeTargetType.POST.value, Like.target_id == post_id)
        .count()
    )


def test_like_then_duplicate_like_is_already_active(db_session, other_user, test_post) -> None:
    viewer = viewer_of(other_user)

    result = activate(db_session, viewer, Relation.LIKE_POST, test_post.id)
    assert result.active is True
    assert result.count == 1

    with pytest.raises(AlreadyActiveError):
        activate(db_session, viewer, Relation.LIKE_POST, test_post.id)

    db_session.refresh(test_post)
    assert test_post.like_count == 1
    assert _likes_on(db_session, test_post.id) == 1


def test_unlike_twice_is_not_active(db_session, other_user, test_post) -> None:
    viewer = viewer_of(other_user)
    activate(db_session, viewer, Relation.LIKE_POST, test_post.id)

    result = deactivate(db_session, viewer, Relation.LIKE_POST, test_post.id)
    assert result.active is False
    assert result.count == 0

    with pytest.raises(NotActiveError):
        deactivate(db_session, viewer, Relation.LIKE_POST, test_post.id)

    db_session.refresh(test_post)
    assert test_post.like_count == 0


def test_counter_matches_fact_rows_after_many_toggles(db_session, test_user, test_post) -> None:
    users = [make_user(db_session) for _ in range(4)]
    for user in users:
        activate(db_session, viewer_of(user), Relation.LIKE_POST, test_post.id)
    deactivate(db_session, viewer_of(users[1]), Relation.LIKE_POST, test_post.id)
    activate(db_session, viewer_of(users[1]), Relation.LIKE_POST, test_post.id)
    deactivate(db_session, viewer_of(users[3]), Relation.LIKE_POST, test_post.id)

    db_session.refresh(test_post)
    assert test_post.like_count == _likes_on(db_session, test_post.id) == 3


def test_concurrent_duplicate_like_hits_unique_constraint(db_session, other_user, test_post, monkeypatch) -> None:
    """A request that raced past the existence check loses on the unique index."""
    viewer = viewer_of(other_user)
    activate(db_session, viewer, Relation.LIKE_POST, test_post.id)

    monkeypatch.setattr(toggles, "_find_fact", lambda *args, **kwargs: None)
    with pytest.raises(AlreadyActiveError):
        activate(db_session, viewer, Relation.LIKE_POST, test_post.id)

    db_session.refresh(test_post)
    assert test_post.like_count == 1
    assert _likes_on(db_session, test_post.id) == 1


def test_like_deleted_post_is_not_found(db_session, other_user, test_post) -> None:
    test_post.is_deleted = True
    db_session.commit()

    with pytest.raises(NotFoundError):
        activate(db_session, viewer_of(other_user), Relation.LIKE_POST, test_post.id)


def test_like_missing_comment_is_not_found(db_session, other_user) -> None:
    with pytest.raises(NotFoundError):
        activate(db_session, viewer_of(other_user), Relation.LIKE_COMMENT, 9999)


def test_comment_like_moves_comment_counter(db_session, test_user, test_comment) -> None:
    viewer = viewer_of(test_user)
    assert activate(db_session, viewer, Relation.LIKE_COMMENT, test_comment.id).count == 1
    assert is_active(db_session, viewer, Relation.LIKE_COMMENT, test_comment.id)
    assert deactivate(db_session, viewer, Relation.LIKE_COMMENT, test_comment.id).count == 0


def test_post_like_and_comment_like_are_separate_facts(db_session, test_user, other_user, test_post) -> None:
    comment = make_comment(db_session, other_user, test_post)
    viewer = viewer_of(test_user)

    activate(db_session, viewer, Relation.LIKE_POST, test_post.id)
    activate(db_session, viewer, Relation.LIKE_COMMENT, comment.id)

    assert db_session.query(Like).filter(Like.user_id == test_user.id).count() == 2


def test_favorite_toggle(db_session, other_user, test_post) -> None:
    viewer = viewer_of(other_user)
    assert activate(db_session, viewer, Relation.FAVORITE_POST, test_post.id).count == 1
    with pytest.raises(AlreadyActiveError):
        activate(db_session, viewer, Relation.FAVORITE_POST, test_post.id)
    assert deactivate(db_session, viewer, Relation.FAVORITE_POST, test_post.id).count == 0
    assert db_session.query(Favorite).count() == 0


def test_self_follow_is_rejected_without_writes(db_session, test_user) -> None:
    with pytest.raises(ValidationError):
        activate(db_session, viewer_of(test_user), Relation.FOLLOW, test_user.id)
    with pytest.raises(ValidationError):
        deactivate(db_session, viewer_of(test_user), Relation.FOLLOW, test_user.id)
    assert db_session.query(Follow).count() == 0


def test_follow_creates_notification(db_session, test_user, other_user) -> None:
    result = activate(db_session, viewer_of(test_user), Relation.FOLLOW, other_user.id)
    assert result.active is True
    assert result.count is None

    notification = db_session.query(Notification).filter(Notification.user_id == other_user.id).one()
    assert notification.type == NotificationType.FOLLOW.value
    assert notification.related_id == test_user.id


def test_follow_twice_and_unfollow_when_not_following(db_session, test_user, other_user) -> None:
    viewer = viewer_of(test_user)
    with pytest.raises(NotActiveError):
        deactivate(db_session, viewer, Relation.FOLLOW, other_user.id)

    activate(db_session, viewer, Relation.FOLLOW, other_user.id)
    with pytest.raises(AlreadyActiveError):
        activate(db_session, viewer, Relation.FOLLOW, other_user.id)
    assert db_session.query(Follow).count() == 1


def test_follow_banned_user_is_forbidden_but_unfollow_allowed(db_session, test_user, other_user) -> None:
    viewer = viewer_of(test_user)
    activate(db_session, viewer, Relation.FOLLOW, other_user.id)

    other_user.is_active = False
    db_session.commit()

    deactivate(db_session, viewer, Relation.FOLLOW, other_user.id)
    with pytest.raises(ForbiddenError):
        activate(db_session, viewer, Relation.FOLLOW, other_user.id)


def test_follow_missing_user_is_not_found(db_session, test_user) -> None:
    with pytest.raises(NotFoundError):
        activate(db_session, viewer_of(test_user), Relation.FOLLOW, 424242)
