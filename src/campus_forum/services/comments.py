# src/campus_forum/services/comments.py
"""Comment threads on posts."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.orm import Session

from campus_forum.core.errors import ForbiddenError, NotFoundError, ValidationError
from campus_forum.core.settings import settings
from campus_forum.db.session import atomic
from campus_forum.models import Category, Comment, NotificationType, Post, User
from campus_forum.services.cascade import mark_comment_deleted
from campus_forum.services.counters import COMMENT_REPLY_COUNT, POST_COMMENT_COUNT, apply_delta
from campus_forum.services.notifications import notify
from campus_forum.services.pagination import Page, paginate
from campus_forum.services.posts import get_live_post
from campus_forum.services.toggles import Relation, active_targets
from campus_forum.services.visibility import AuthorView, ViewerContext, mask_author

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommentView:
    comment: Comment
    author: AuthorView
    is_liked: bool = False


def _clean_content(content: str) -> str:
    content = (content or "").strip()
    if not content:
        raise ValidationError("Comment content cannot be empty")
    if len(content) > settings.max_comment_length:
        raise ValidationError(f"Comment cannot exceed {settings.max_comment_length} characters")
    return content


def _get_live_comment(db: Session, comment_id: int) -> Comment:
    comment = db.get(Comment, comment_id)
    if comment is None or comment.is_deleted:
        raise NotFoundError("Comment not found")
    return comment


def build_comment_views(
    db: Session,
    viewer: ViewerContext | None,
    post: Post,
    comments: Sequence[Comment],
) -> list[CommentView]:
    """Attach masked authors and like flags; comments share ``post``'s category."""
    if not comments:
        return []
    category = db.get(Category, post.category_id)
    author_ids = {comment.author_id for comment in comments}
    authors = {user.id: user for user in db.query(User).filter(User.id.in_(list(author_ids))).all()}
    liked = active_targets(db, viewer, Relation.LIKE_COMMENT, [c.id for c in comments])
    return [
        CommentView(
            comment=comment,
            author=mask_author(authors.get(comment.author_id), category, viewer),
            is_liked=comment.id in liked,
        )
        for comment in comments
    ]


def _notify_new_comment(db: Session, viewer: ViewerContext, post: Post, comment: Comment, parent: Comment | None) -> None:
    category = db.get(Category, post.category_id)
    commenter = mask_author(db.get(User, viewer.user_id), category, viewer)
    link = f"/posts/{post.id}#comment-{comment.id}"
    if parent is not None and parent.author_id != viewer.user_id:
        notify(
            db,
            user_id=parent.author_id,
            type_=NotificationType.REPLY,
            title="New reply to your comment",
            content=f"{commenter.username} replied: {comment.content[:100]}",
            link=link,
            related_id=comment.id,
        )
    if post.author_id != viewer.user_id and (parent is None or parent.author_id != post.author_id):
        notify(
            db,
            user_id=post.author_id,
            type_=NotificationType.COMMENT,
            title="New comment on your post",
            content=f"{commenter.username} commented: {comment.content[:100]}",
            link=link,
            related_id=comment.id,
        )


def create_comment(
    db: Session,
    viewer: ViewerContext,
    post_id: int,
    *,
    content: str,
    parent_id: int | None = None,
) -> CommentView:
    """Add a comment (or a reply when ``parent_id`` is given) to a post.

    Raises:
        ValidationError: Empty or oversized content, or a parent on another post.
        NotFoundError: Missing/deleted post or parent comment.
        ForbiddenError: The post is locked.
    """
    content = _clean_content(content)
    post = get_live_post(db, post_id)
    if post.is_locked:
        raise ForbiddenError("This post is locked")

    parent = None
    if parent_id is not None:
        parent = db.get(Comment, parent_id)
        if parent is None or parent.is_deleted:
            raise NotFoundError("Parent comment not found")
        if parent.post_id != post.id:
            raise ValidationError("Parent comment belongs to another post")

    with atomic(db):
        comment = Comment(post_id=post.id, author_id=viewer.user_id, parent_id=parent_id, content=content)
        db.add(comment)
        db.flush()
        apply_delta(db, POST_COMMENT_COUNT, post.id, +1)
        if parent is not None:
            apply_delta(db, COMMENT_REPLY_COUNT, parent.id, +1)
        _notify_new_comment(db, viewer, post, comment, parent)

    logger.info("User %s commented %s on post %s", viewer.user_id, comment.id, post.id)
    return build_comment_views(db, viewer, post, [comment])[0]


def list_comments(
    db: Session,
    viewer: ViewerContext | None,
    post_id: int,
    *,
    page: int | None = None,
    limit: int | None = None,
) -> Page[CommentView]:
    """List the live comments of a live post in posting order."""
    post = get_live_post(db, post_id)
    query = (
        db.query(Comment)
        .filter(Comment.post_id == post.id, Comment.is_deleted.is_(False))
        .order_by(Comment.created_at.asc(), Comment.id.asc())
    )
    result = paginate(query, page, limit)
    return Page(
        items=build_comment_views(db, viewer, post, result.items),
        total=result.total,
        page=result.page,
        limit=result.limit,
    )


def update_comment(db: Session, viewer: ViewerContext, comment_id: int, *, content: str) -> CommentView:
    """Edit the viewer's own comment."""
    comment = _get_live_comment(db, comment_id)
    if comment.author_id != viewer.user_id:
        raise ForbiddenError("You can only edit your own comments")
    content = _clean_content(content)

    with atomic(db):
        comment.content = content

    post = db.get(Post, comment.post_id)
    return build_comment_views(db, viewer, post, [comment])[0]


def delete_comment(db: Session, viewer: ViewerContext, comment_id: int) -> None:
    """Soft-delete the viewer's own comment.

    Raises:
        NotFoundError: Missing or already deleted comment.
        ForbiddenError: The comment belongs to someone else.
    """
    comment = _get_live_comment(db, comment_id)
    if comment.author_id != viewer.user_id:
        raise ForbiddenError("You can only delete your own comments")

    with atomic(db):
        mark_comment_deleted(db, comment)
    logger.info("User %s deleted comment %s", viewer.user_id, comment_id)
