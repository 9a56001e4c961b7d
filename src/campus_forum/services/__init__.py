# src/campus_forum/services/__init__.py
"""Business logic services for the Campus Forum application."""

from .audit import AuditLog
from .toggles import Relation, ToggleResult, activate, deactivate
from .visibility import ViewerContext

__all__ = [
    "AuditLog",
    "Relation", "ToggleResult", "activate", "deactivate",
    "ViewerContext",
]
