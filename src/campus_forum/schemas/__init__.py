"""
Pydantic schemas for API request/response models.

Field names are snake_case in Python and camelCase on the wire.
"""

from .common import ApiResponse, ErrorResponse, PageOut, Pagination
from .interaction import FavoriteState, FollowState, LikeState

__all__ = [
    "ApiResponse", "ErrorResponse", "PageOut", "Pagination",
    "FavoriteState", "FollowState", "LikeState",
]
