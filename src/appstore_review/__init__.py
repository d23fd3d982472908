"""
appstore-connect-review

A typed Python client for the review submission resources of the Apple
App Store Connect API.
"""

from .client import AppStoreConnectAPI
from .review import ReviewManager, create_review_manager
from .review_submissions import (
    ListSubmissionsForAppQuery,
    ReadReviewSubmissionQuery,
    ReviewSubmission,
    ReviewSubmissionResponse,
    ReviewSubmissionResponseIncluded,
    ReviewSubmissionsResponse,
    ReviewSubmissionsService,
)
from .review_submission_items import (
    ListReviewSubmissionItemsQuery,
    ReviewSubmissionItem,
    ReviewSubmissionItemResponse,
    ReviewSubmissionItemResponseIncluded,
    ReviewSubmissionItemsResponse,
)
from .exceptions import (
    AppStoreConnectError,
    AuthenticationError,
    ConflictError,
    RateLimitError,
    ServerError,
    ValidationError,
    NotFoundError,
    PermissionError,
)
from . import utils

__version__ = "0.1.0"

__all__ = [
    "AppStoreConnectAPI",
    "ReviewManager",
    "create_review_manager",
    "ReviewSubmissionsService",
    "ReviewSubmission",
    "ReviewSubmissionResponse",
    "ReviewSubmissionsResponse",
    "ReviewSubmissionResponseIncluded",
    "ListSubmissionsForAppQuery",
    "ReadReviewSubmissionQuery",
    "ReviewSubmissionItem",
    "ReviewSubmissionItemResponse",
    "ReviewSubmissionItemsResponse",
    "ReviewSubmissionItemResponseIncluded",
    "ListReviewSubmissionItemsQuery",
    "AppStoreConnectError",
    "AuthenticationError",
    "ConflictError",
    "RateLimitError",
    "ServerError",
    "ValidationError",
    "NotFoundError",
    "PermissionError",
    "utils",
]
