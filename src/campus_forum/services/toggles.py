# src/campus_forum/services/toggles.py
"""Idempotent on/off relations: likes, favorites and follows.

Each relation is a fact row that either exists (active) or does not. The
guard checks the target, checks the current state, writes or deletes the
fact row and moves the paired counter, all in one transaction. The unique
constraint on the fact table is the backstop when two identical requests
race past the existence check; the loser gets the same ALREADY_ACTIVE error
as a sequential duplicate.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from campus_forum.core.errors import (
    AlreadyActiveError,
    ForbiddenError,
    NotActiveError,
    NotFoundError,
    ValidationError,
)
from campus_forum.db.session import atomic
from campus_forum.models import (
    Comment,
    Favorite,
    Follow,
    Like,
    LikeTargetType,
    NotificationType,
    Post,
    User,
)
from campus_forum.services.counters import (
    COMMENT_LIKE_COUNT,
    POST_FAVORITE_COUNT,
    POST_LIKE_COUNT,
    CounterField,
    apply_delta,
)
from campus_forum.services.notifications import notify
from campus_forum.services.visibility import ViewerContext, get_visible_user

logger = logging.getLogger(__name__)


class Relation(str, Enum):
    """Toggleable relations between a user and a target."""

    LIKE_POST = "like_post"
    LIKE_COMMENT = "like_comment"
    FAVORITE_POST = "favorite_post"
    FOLLOW = "follow"


@dataclass(frozen=True)
class ToggleResult:
    """Outcome of a toggle; ``count`` is the counter value after the change."""

    active: bool
    count: int | None = None


@dataclass(frozen=True)
class _RelationRule:
    resolve_target: Callable[[Session, ViewerContext, int, bool], Any]
    fact_query: Callable[[Session, int], Query]
    target_column: Any
    build_fact: Callable[[int, int], Any]
    counter: CounterField | None
    already_active_message: str
    not_active_message: str
    on_activate: Callable[[Session, ViewerContext, Any], None] | None = None


def _live_post(db: Session, viewer: ViewerContext, post_id: int, activating: bool) -> Post:
    post = db.get(Post, post_id)
    if post is None or post.is_deleted:
        raise NotFoundError("Post not found")
    return post


def _live_comment(db: Session, viewer: ViewerContext, comment_id: int, activating: bool) -> Comment:
    comment = db.get(Comment, comment_id)
    if comment is None or comment.is_deleted:
        raise NotFoundError("Comment not found")
    return comment


def _followable_user(db: Session, viewer: ViewerContext, user_id: int, activating: bool) -> User:
    if user_id == viewer.user_id:
        raise ValidationError("You cannot follow yourself")
    user = get_visible_user(db, viewer, user_id)
    # Unfollowing a banned account stays allowed.
    if activating and not user.is_active:
        raise ForbiddenError("This account has been deactivated")
    return user


def _notify_followed(db: Session, viewer: ViewerContext, target: User) -> None:
    follower = db.get(User, viewer.user_id)
    name = follower.username if follower is not None else "Someone"
    notify(
        db,
        user_id=target.id,
        type_=NotificationType.FOLLOW,
        title="New follower",
        content=f"{name} started following you",
        link=f"/users/{viewer.user_id}",
        related_id=viewer.user_id,
    )


_RULES: dict[Relation, _RelationRule] = {
    Relation.LIKE_POST: _RelationRule(
        resolve_target=_live_post,
        fact_query=lambda db, user_id: db.query(Like).filter(
            Like.user_id == user_id, Like.target_type == LikeTargetType.POST.value
        ),
        target_column=Like.target_id,
        build_fact=lambda user_id, post_id: Like(
            user_id=user_id, target_type=LikeTargetType.POST.value, target_id=post_id
        ),
        counter=POST_LIKE_COUNT,
        already_active_message="You already liked this post",
        not_active_message="You have not liked this post",
    ),
    Relation.LIKE_COMMENT: _RelationRule(
        resolve_target=_live_comment,
        fact_query=lambda db, user_id: db.query(Like).filter(
            Like.user_id == user_id, Like.target_type == LikeTargetType.COMMENT.value
        ),
        target_column=Like.target_id,
        build_fact=lambda user_id, comment_id: Like(
            user_id=user_id, target_type=LikeTargetType.COMMENT.value, target_id=comment_id
        ),
        counter=COMMENT_LIKE_COUNT,
        already_active_message="You already liked this comment",
        not_active_message="You have not liked this comment",
    ),
    Relation.FAVORITE_POST: _RelationRule(
        resolve_target=_live_post,
        fact_query=lambda db, user_id: db.query(Favorite).filter(Favorite.user_id == user_id),
        target_column=Favorite.post_id,
        build_fact=lambda user_id, post_id: Favorite(user_id=user_id, post_id=post_id),
        counter=POST_FAVORITE_COUNT,
        already_active_message="You already favorited this post",
        not_active_message="You have not favorited this post",
    ),
    Relation.FOLLOW: _RelationRule(
        resolve_target=_followable_user,
        fact_query=lambda db, user_id: db.query(Follow).filter(Follow.follower_id == user_id),
        target_column=Follow.following_id,
        build_fact=lambda user_id, target_id: Follow(follower_id=user_id, following_id=target_id),
        counter=None,
        already_active_message="You already follow this user",
        not_active_message="You do not follow this user",
        on_activate=_notify_followed,
    ),
}


def _find_fact(db: Session, rule: _RelationRule, user_id: int, target_id: int) -> Any | None:
    return rule.fact_query(db, user_id).filter(rule.target_column == target_id).first()


def activate(db: Session, viewer: ViewerContext, relation: Relation, target_id: int) -> ToggleResult:
    """Turn ``relation`` on between the viewer and ``target_id``.

    Raises:
        NotFoundError: If the target is missing or soft-deleted.
        ValidationError: On self-follow.
        ForbiddenError: When following a deactivated account.
        AlreadyActiveError: If the relation is already on, including when a
            concurrent identical request wins the insert.
    """
    rule = _RULES[relation]
    with atomic(db):
        target = rule.resolve_target(db, viewer, target_id, True)
        if _find_fact(db, rule, viewer.user_id, target_id) is not None:
            raise AlreadyActiveError(rule.already_active_message)

        db.add(rule.build_fact(viewer.user_id, target_id))
        try:
            db.flush()
        except IntegrityError as exc:
            logger.info("Duplicate %s insert for user %s on %s", relation.value, viewer.user_id, target_id)
            raise AlreadyActiveError(rule.already_active_message) from exc

        count = None
        if rule.counter is not None:
            count = apply_delta(db, rule.counter, target_id, +1)
        if rule.on_activate is not None:
            rule.on_activate(db, viewer, target)

    return ToggleResult(active=True, count=count)


def deactivate(db: Session, viewer: ViewerContext, relation: Relation, target_id: int) -> ToggleResult:
    """Turn ``relation`` off between the viewer and ``target_id``.

    Raises:
        NotFoundError: If the target is missing or soft-deleted.
        ValidationError: On self-unfollow.
        NotActiveError: If the relation is not on.
    """
    rule = _RULES[relation]
    with atomic(db):
        rule.resolve_target(db, viewer, target_id, False)
        fact = _find_fact(db, rule, viewer.user_id, target_id)
        if fact is None:
            raise NotActiveError(rule.not_active_message)

        db.delete(fact)
        db.flush()

        count = None
        if rule.counter is not None:
            count = apply_delta(db, rule.counter, target_id, -1)

    return ToggleResult(active=False, count=count)


def is_active(db: Session, viewer: ViewerContext | None, relation: Relation, target_id: int) -> bool:
    """Return True when ``relation`` is on for the viewer; guests get False."""
    if viewer is None:
        return False
    return _find_fact(db, _RULES[relation], viewer.user_id, target_id) is not None


def active_targets(
    db: Session,
    viewer: ViewerContext | None,
    relation: Relation,
    target_ids: Iterable[int],
) -> set[int]:
    """Return the subset of ``target_ids`` for which ``relation`` is on."""
    ids = list(target_ids)
    if viewer is None or not ids:
        return set()
    rule = _RULES[relation]
    rows = (
        rule.fact_query(db, viewer.user_id)
        .filter(rule.target_column.in_(ids))
        .with_entities(rule.target_column)
        .all()
    )
    return {row[0] for row in rows}
