# src/campus_forum/services/counters.py
"""Denormalized counter updates.

Every counter change is a single ``UPDATE ... SET col = col + :delta``
issued inside the caller's transaction, right next to the fact-table write
that triggered it. The database performs the arithmetic, so concurrent
increments from different users never overwrite each other.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from campus_forum.core.errors import CounterWriteError
from campus_forum.models import Category, Comment, Post, Resource

logger = logging.getLogger(__name__)

# Operator channel for counter drift; alerting hooks subscribe to this name.
consistency_logger = logging.getLogger("campus_forum.consistency")


@dataclass(frozen=True)
class CounterField:
    """A counter column on an entity keyed by ``id``."""

    model: Any
    name: str

    @property
    def column(self) -> Any:
        return getattr(self.model, self.name)

    def __str__(self) -> str:
        return f"{self.model.__tablename__}.{self.name}"


POST_LIKE_COUNT = CounterField(Post, "like_count")
POST_FAVORITE_COUNT = CounterField(Post, "favorite_count")
POST_COMMENT_COUNT = CounterField(Post, "comment_count")
POST_VIEW_COUNT = CounterField(Post, "view_count")
COMMENT_LIKE_COUNT = CounterField(Comment, "like_count")
COMMENT_REPLY_COUNT = CounterField(Comment, "reply_count")
CATEGORY_POST_COUNT = CounterField(Category, "post_count")
RESOURCE_DOWNLOAD_COUNT = CounterField(Resource, "download_count")


def apply_delta(db: Session, counter: CounterField, owner_id: int, delta: int) -> int:
    """Add ``delta`` (+1 or -1) to ``counter`` on row ``owner_id``.

    Args:
        db: Session whose transaction also holds the triggering fact write.
        counter: Counter column to move.
        owner_id: Primary key of the row that owns the counter.
        delta: Either ``1`` or ``-1``.

    Returns:
        The counter value after the update, as seen inside this transaction.

    Raises:
        ValueError: If ``delta`` is not +1 or -1.
        CounterWriteError: If no row was updated. The caller's transaction
            must be rolled back so the fact write is discarded as well.
    """
    if delta not in (1, -1):
        raise ValueError(f"counter delta must be +1 or -1, got {delta!r}")

    column = counter.column
    updated = (
        db.query(counter.model)
        .filter(counter.model.id == owner_id)
        .update({column: column + delta}, synchronize_session="fetch")
    )
    if updated != 1:
        consistency_logger.critical(
            "Counter %s on id=%s not applied (delta=%+d, rows=%d)",
            counter,
            owner_id,
            delta,
            updated,
        )
        raise CounterWriteError(
            details={"counter": str(counter), "ownerId": owner_id, "delta": delta},
        )

    value = read_counter(db, counter, owner_id)
    if value < 0:
        # The fact table wins; the reconciliation pass will repair the cache.
        consistency_logger.error("Counter %s on id=%s went negative (%d)", counter, owner_id, value)
    logger.debug("Counter %s on id=%s moved by %+d to %d", counter, owner_id, delta, value)
    return value


def read_counter(db: Session, counter: CounterField, owner_id: int) -> int:
    """Return the stored value of ``counter`` for ``owner_id``."""
    return int(db.query(counter.column).filter(counter.model.id == owner_id).scalar() or 0)
