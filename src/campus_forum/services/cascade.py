# src/campus_forum/services/cascade.py
"""Deletion and restore propagation for posts and comments.

Lifecycle per entity::

    active -> soft-deleted -> restored (active)
                           -> hard-deleted (gone)
    active -> hard-deleted (gone)

Soft delete and restore move the parent counters by one. Hard delete removes
the row together with every dependent fact and only moves a counter for rows
that were still live, so a soft-delete followed by a hard-delete never takes
a count down twice. Dependents are removed explicitly here; nothing relies on
database-level ``ON DELETE CASCADE``.

The ``mark_*``/``unmark_*`` helpers run inside the caller's transaction. The
``hard_delete_*`` functions own their transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from campus_forum.core.errors import NotFoundError
from campus_forum.db.session import atomic
from campus_forum.db.time import utcnow
from campus_forum.models import Comment, Favorite, Like, LikeTargetType, Post
from campus_forum.services.counters import (
    CATEGORY_POST_COUNT,
    COMMENT_REPLY_COUNT,
    POST_COMMENT_COUNT,
    apply_delta,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CascadeResult:
    """Row counts removed by a hard delete."""

    posts: int = 0
    comments: int = 0
    likes: int = 0
    favorites: int = 0


# ---------------------------------------------------------------------------
# Soft delete / restore (caller owns the transaction)
# ---------------------------------------------------------------------------


def mark_post_deleted(db: Session, post: Post) -> None:
    """Soft-delete ``post`` and take it out of its category's count."""
    post.is_deleted = True
    post.deleted_at = utcnow()
    db.flush()
    apply_delta(db, CATEGORY_POST_COUNT, post.category_id, -1)


def unmark_post_deleted(db: Session, post: Post) -> None:
    """Restore a soft-deleted ``post`` and count it again."""
    post.is_deleted = False
    post.deleted_at = None
    db.flush()
    apply_delta(db, CATEGORY_POST_COUNT, post.category_id, +1)


def mark_comment_deleted(db: Session, comment: Comment) -> None:
    """Soft-delete ``comment`` and take it out of the post and parent counts."""
    comment.is_deleted = True
    comment.deleted_at = utcnow()
    db.flush()
    apply_delta(db, POST_COMMENT_COUNT, comment.post_id, -1)
    if comment.parent_id is not None:
        apply_delta(db, COMMENT_REPLY_COUNT, comment.parent_id, -1)


def unmark_comment_deleted(db: Session, comment: Comment) -> None:
    """Restore a soft-deleted ``comment`` and count it again."""
    comment.is_deleted = False
    comment.deleted_at = None
    db.flush()
    apply_delta(db, POST_COMMENT_COUNT, comment.post_id, +1)
    if comment.parent_id is not None:
        apply_delta(db, COMMENT_REPLY_COUNT, comment.parent_id, +1)


# ---------------------------------------------------------------------------
# Hard delete (owns the transaction)
# ---------------------------------------------------------------------------


def _comment_subtree(db: Session, root: Comment) -> list[Comment]:
    """Return ``root`` and all of its descendants, parents before children."""
    subtree = [root]
    frontier = [root.id]
    while frontier:
        children = db.query(Comment).filter(Comment.parent_id.in_(frontier)).all()
        subtree.extend(children)
        frontier = [child.id for child in children]
    return subtree


def _delete_comment_likes(db: Session, comment_ids: list[int]) -> int:
    if not comment_ids:
        return 0
    return (
        db.query(Like)
        .filter(
            Like.target_type == LikeTargetType.COMMENT.value,
            Like.target_id.in_(comment_ids),
        )
        .delete(synchronize_session="fetch")
    )


def _delete_comments(db: Session, comment_ids: list[int]) -> int:
    if not comment_ids:
        return 0
    # Replies and their parents go in one statement so the self-reference is
    # satisfied at statement end.
    return db.query(Comment).filter(Comment.id.in_(comment_ids)).delete(synchronize_session="fetch")


def hard_delete_comment(db: Session, comment_id: int) -> CascadeResult:
    """Permanently remove a comment, its replies and their likes.

    ``post.comment_count`` drops by one for every removed comment that was
    still live, and the parent's ``reply_count`` drops by one only when the
    targeted comment itself was live.

    Raises:
        NotFoundError: If the comment does not exist (or is already gone).
    """
    with atomic(db):
        comment = db.get(Comment, comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")

        post_id = comment.post_id
        parent_id = comment.parent_id
        was_live = not comment.is_deleted

        subtree = _comment_subtree(db, comment)
        ids = [node.id for node in subtree]
        live_removed = sum(1 for node in subtree if not node.is_deleted)

        likes = _delete_comment_likes(db, ids)
        removed = _delete_comments(db, ids)

        for _ in range(live_removed):
            apply_delta(db, POST_COMMENT_COUNT, post_id, -1)
        if parent_id is not None and was_live:
            apply_delta(db, COMMENT_REPLY_COUNT, parent_id, -1)

    logger.info(
        "Hard-deleted comment %s on post %s (%d comments, %d likes)",
        comment_id,
        post_id,
        removed,
        likes,
    )
    return CascadeResult(comments=removed, likes=likes)


def hard_delete_post(db: Session, post_id: int) -> CascadeResult:
    """Permanently remove a post and everything that references it.

    Removes the post's comments, likes on the post, likes on its comments and
    favorites. ``category.post_count`` drops by one only if the post had not
    already been soft-deleted.

    Raises:
        NotFoundError: If the post does not exist (or is already gone).
    """
    with atomic(db):
        post = db.get(Post, post_id)
        if post is None:
            raise NotFoundError("Post not found")

        category_id = post.category_id
        was_live = not post.is_deleted

        comment_ids = [row[0] for row in db.query(Comment.id).filter(Comment.post_id == post_id).all()]
        likes = _delete_comment_likes(db, comment_ids)
        likes += (
            db.query(Like)
            .filter(Like.target_type == LikeTargetType.POST.value, Like.target_id == post_id)
            .delete(synchronize_session="fetch")
        )
        favorites = db.query(Favorite).filter(Favorite.post_id == post_id).delete(synchronize_session="fetch")
        comments = _delete_comments(db, comment_ids)

        db.delete(post)
        db.flush()

        if was_live:
            apply_delta(db, CATEGORY_POST_COUNT, category_id, -1)

    logger.info(
        "Hard-deleted post %s (%d comments, %d likes, %d favorites)",
        post_id,
        comments,
        likes,
        favorites,
    )
    return CascadeResult(posts=1, comments=comments, likes=likes, favorites=favorites)
