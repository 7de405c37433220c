"""
Pydantic schemas for browse requests, responses and entity records.
"""

from catalog.schemas.common import ErrorResponse, Page, PaginationInfo
from catalog.schemas.query import (
    BrowseQuery,
    CategoricalQuery,
    FlagQuery,
    PaginationQuery,
    RangeQuery,
    SortQuery,
)
from catalog.schemas.records import (
    CameraRecord,
    DynamicRangeRecord,
    LightRecord,
    SpectrometerRecord,
    UserRecord,
)

__all__ = [
    # Common
    "ErrorResponse",
    "Page",
    "PaginationInfo",
    # Query
    "BrowseQuery",
    "CategoricalQuery",
    "FlagQuery",
    "PaginationQuery",
    "RangeQuery",
    "SortQuery",
    # Records
    "CameraRecord",
    "DynamicRangeRecord",
    "LightRecord",
    "SpectrometerRecord",
    "UserRecord",
]
