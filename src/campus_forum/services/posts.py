# src/campus_forum/services/posts.py
"""Post creation, reading and owner-side deletion."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.orm import Session

from campus_forum.core.errors import ForbiddenError, NotFoundError, ValidationError
from campus_forum.core.settings import settings
from campus_forum.db.session import atomic
from campus_forum.models import Category, Post, User
from campus_forum.services.cascade import mark_post_deleted
from campus_forum.services.counters import CATEGORY_POST_COUNT, POST_VIEW_COUNT, apply_delta
from campus_forum.services.pagination import Page, paginate
from campus_forum.services.toggles import Relation, active_targets, is_active
from campus_forum.services.visibility import AuthorView, ViewerContext, mask_author

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostView:
    """A post as shown to one viewer."""

    post: Post
    category: Category
    author: AuthorView
    is_liked: bool = False
    is_favorited: bool = False


def _clean_title(title: str) -> str:
    title = (title or "").strip()
    if not title:
        raise ValidationError("Title cannot be empty")
    if len(title) > settings.max_post_title_length:
        raise ValidationError(f"Title cannot exceed {settings.max_post_title_length} characters")
    return title


def _clean_content(content: str) -> str:
    content = (content or "").strip()
    if not content:
        raise ValidationError("Content cannot be empty")
    if len(content) > settings.max_post_length:
        raise ValidationError(f"Content cannot exceed {settings.max_post_length} characters")
    return content


def list_categories(db: Session) -> list[Category]:
    """All categories in display order."""
    return db.query(Category).order_by(Category.sort_order.asc(), Category.id.asc()).all()


def get_live_post(db: Session, post_id: int) -> Post:
    """Return a non-deleted post or raise NOT_FOUND."""
    post = db.get(Post, post_id)
    if post is None or post.is_deleted:
        raise NotFoundError("Post not found")
    return post


def build_post_views(db: Session, viewer: ViewerContext | None, posts: Sequence[Post]) -> list[PostView]:
    """Attach masked authors and the viewer's like/favorite flags to ``posts``."""
    if not posts:
        return []
    author_ids = {post.author_id for post in posts}
    category_ids = {post.category_id for post in posts}
    authors = {user.id: user for user in db.query(User).filter(User.id.in_(list(author_ids))).all()}
    categories = {cat.id: cat for cat in db.query(Category).filter(Category.id.in_(list(category_ids))).all()}
    post_ids = [post.id for post in posts]
    liked = active_targets(db, viewer, Relation.LIKE_POST, post_ids)
    favorited = active_targets(db, viewer, Relation.FAVORITE_POST, post_ids)

    views = []
    for post in posts:
        category = categories[post.category_id]
        views.append(
            PostView(
                post=post,
                category=category,
                author=mask_author(authors.get(post.author_id), category, viewer),
                is_liked=post.id in liked,
                is_favorited=post.id in favorited,
            )
        )
    return views


def create_post(
    db: Session,
    viewer: ViewerContext,
    *,
    category_id: int,
    title: str,
    content: str,
) -> PostView:
    """Publish a post and count it in its category."""
    title = _clean_title(title)
    content = _clean_content(content)
    category = db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found")

    with atomic(db):
        post = Post(author_id=viewer.user_id, category_id=category_id, title=title, content=content)
        db.add(post)
        db.flush()
        apply_delta(db, CATEGORY_POST_COUNT, category_id, +1)

    logger.info("User %s created post %s in category %s", viewer.user_id, post.id, category_id)
    return build_post_views(db, viewer, [post])[0]


def get_post_detail(db: Session, viewer: ViewerContext | None, post_id: int) -> PostView:
    """Return a post for display and count the view."""
    post = get_live_post(db, post_id)
    with atomic(db):
        apply_delta(db, POST_VIEW_COUNT, post.id, +1)

    category = db.get(Category, post.category_id)
    return PostView(
        post=post,
        category=category,
        author=mask_author(db.get(User, post.author_id), category, viewer),
        is_liked=is_active(db, viewer, Relation.LIKE_POST, post.id),
        is_favorited=is_active(db, viewer, Relation.FAVORITE_POST, post.id),
    )


def list_posts(
    db: Session,
    viewer: ViewerContext | None,
    *,
    category_id: int | None = None,
    author_id: int | None = None,
    page: int | None = None,
    limit: int | None = None,
) -> Page[PostView]:
    """List live posts, pinned first, newest first."""
    query = db.query(Post).filter(Post.is_deleted.is_(False))
    if category_id is not None:
        query = query.filter(Post.category_id == category_id)
    if author_id is not None:
        # Filtering by author would unmask anonymous posts.
        query = query.join(Category, Category.id == Post.category_id).filter(
            Post.author_id == author_id,
            Category.is_anonymous.is_(False),
        )
    query = query.order_by(Post.is_pinned.desc(), Post.created_at.desc(), Post.id.desc())
    result = paginate(query, page, limit)
    return Page(
        items=build_post_views(db, viewer, result.items),
        total=result.total,
        page=result.page,
        limit=result.limit,
    )


def update_post(
    db: Session,
    viewer: ViewerContext,
    post_id: int,
    *,
    title: str | None = None,
    content: str | None = None,
) -> PostView:
    """Edit the viewer's own post."""
    post = get_live_post(db, post_id)
    if post.author_id != viewer.user_id:
        raise ForbiddenError("You can only edit your own posts")
    new_title = _clean_title(title) if title is not None else None
    new_content = _clean_content(content) if content is not None else None

    with atomic(db):
        if new_title is not None:
            post.title = new_title
        if new_content is not None:
            post.content = new_content

    return build_post_views(db, viewer, [post])[0]


def delete_post(db: Session, viewer: ViewerContext, post_id: int) -> None:
    """Soft-delete the viewer's own post."""
    post = get_live_post(db, post_id)
    if post.author_id != viewer.user_id:
        raise ForbiddenError("You can only delete your own posts")

    with atomic(db):
        mark_post_deleted(db, post)
    logger.info("User %s deleted post %s", viewer.user_id, post_id)
