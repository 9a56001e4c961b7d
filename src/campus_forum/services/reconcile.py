# src/campus_forum/services/reconcile.py
"""Out-of-band counter reconciliation.

Recomputes every denormalized counter from its fact table and reports (and
optionally repairs) rows whose cached value has drifted. This is the repair
path for the drift reported on the ``campus_forum.consistency`` logger; it
is never run inline with user requests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from campus_forum.db.session import atomic
from campus_forum.models import Comment, Favorite, Like, LikeTargetType, Post
from campus_forum.services.counters import (
    CATEGORY_POST_COUNT,
    COMMENT_LIKE_COUNT,
    COMMENT_REPLY_COUNT,
    POST_COMMENT_COUNT,
    POST_FAVORITE_COUNT,
    POST_LIKE_COUNT,
    CounterField,
    consistency_logger,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CounterDrift:
    """A cached counter that disagrees with its fact table."""

    counter: CounterField
    entity_id: int
    stored: int
    actual: int


def _grouped(query: Query) -> dict[int, int]:
    return {key: int(count) for key, count in query.all() if key is not None}


def _actual_counts(db: Session) -> dict[CounterField, dict[int, int]]:
    return {
        POST_LIKE_COUNT: _grouped(
            db.query(Like.target_id, func.count(Like.id))
            .filter(Like.target_type == LikeTargetType.POST.value)
            .group_by(Like.target_id)
        ),
        POST_FAVORITE_COUNT: _grouped(
            db.query(Favorite.post_id, func.count(Favorite.id)).group_by(Favorite.post_id)
        ),
        POST_COMMENT_COUNT: _grouped(
            db.query(Comment.post_id, func.count(Comment.id))
            .filter(Comment.is_deleted.is_(False))
            .group_by(Comment.post_id)
        ),
        COMMENT_LIKE_COUNT: _grouped(
            db.query(Like.target_id, func.count(Like.id))
            .filter(Like.target_type == LikeTargetType.COMMENT.value)
            .group_by(Like.target_id)
        ),
        COMMENT_REPLY_COUNT: _grouped(
            db.query(Comment.parent_id, func.count(Comment.id))
            .filter(Comment.is_deleted.is_(False), Comment.parent_id.is_not(None))
            .group_by(Comment.parent_id)
        ),
        CATEGORY_POST_COUNT: _grouped(
            db.query(Post.category_id, func.count(Post.id))
            .filter(Post.is_deleted.is_(False))
            .group_by(Post.category_id)
        ),
    }


def find_drift(db: Session) -> list[CounterDrift]:
    """Return every counter whose stored value differs from the fact count."""
    drifts: list[CounterDrift] = []
    for counter, actual_by_id in _actual_counts(db).items():
        stored_rows = db.query(counter.model.id, counter.column).all()
        for entity_id, stored in stored_rows:
            actual = actual_by_id.get(entity_id, 0)
            if int(stored) != actual:
                drifts.append(CounterDrift(counter, entity_id, int(stored), actual))
    return drifts


def reconcile_counters(db: Session, *, fix: bool = False) -> list[CounterDrift]:
    """Detect counter drift and, when ``fix`` is set, overwrite with the fact counts.

    Returns:
        The drift found before any repair.
    """
    drifts = find_drift(db)
    for drift in drifts:
        consistency_logger.warning(
            "Counter %s on id=%s drifted: stored=%d actual=%d",
            drift.counter,
            drift.entity_id,
            drift.stored,
            drift.actual,
        )

    if fix and drifts:
        with atomic(db):
            for drift in drifts:
                model = drift.counter.model
                db.query(model).filter(model.id == drift.entity_id).update(
                    {drift.counter.column: drift.actual},
                    synchronize_session="fetch",
                )
        logger.info("Repaired %d drifted counters", len(drifts))
    return drifts
