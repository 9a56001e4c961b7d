# src/campus_forum/services/audit.py
"""Fire-and-forget writer for the admin audit trail."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campus_forum.models import AdminAction, AdminLog, AdminTargetType
from campus_forum.services.pagination import Page, paginate
from campus_forum.services.visibility import AdminLogQuery, ViewerContext, build_admin_log_query

logger = logging.getLogger(__name__)


class AuditLog:
    """Records admin actions after the audited change has been committed."""

    @staticmethod
    def record(
        db: Session,
        admin_id: int,
        action: AdminAction,
        target_type: AdminTargetType,
        target_id: int | None,
        description: str | None = None,
    ) -> None:
        """Write one audit entry in its own transaction.

        Failures are logged and swallowed: the primary operation has already
        committed and must not be reported as failed because of the log.

        Args:
            db: Session whose previous transaction has already been committed.
            admin_id: Acting admin.
            action: What was done.
            target_type: Kind of entity acted on.
            target_id: Id of the entity acted on.
            description: Free-form human-readable summary.
        """
        try:
            db.add(
                AdminLog(
                    admin_id=admin_id,
                    action=action.value,
                    target_type=target_type.value,
                    target_id=target_id,
                    description=description,
                )
            )
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.warning(
                "Failed to record admin action %s on %s %s by admin %s",
                action.value,
                target_type.value,
                target_id,
                admin_id,
                exc_info=True,
            )


def list_admin_logs(db: Session, viewer: ViewerContext, filters: AdminLogQuery) -> Page[AdminLog]:
    """List audit entries; admins do not see entries written by super admins."""
    return paginate(build_admin_log_query(db, filters, viewer), filters.page, filters.limit)
