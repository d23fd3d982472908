"""
Utility functions for appstore-connect-review.

This module provides helper functions for validating identifiers and
enumerated values before they are sent to the API, and for formatting
query parameters.
"""

from typing import Any, Iterable

from .exceptions import ValidationError

PLATFORMS = ["IOS", "MAC_OS", "TV_OS", "VISION_OS"]

SUBMISSION_STATES = [
    "READY_FOR_REVIEW",
    "WAITING_FOR_REVIEW",
    "IN_REVIEW",
    "UNRESOLVED_ISSUES",
    "CANCELING",
    "COMPLETING",
    "COMPLETE",
]


def validate_app_id(app_id: str) -> str:
    """
    Validate an App Store app ID.

    Args:
        app_id: The app ID to validate

    Returns:
        The validated app ID as a string

    Raises:
        ValidationError: If the app ID is invalid
    """
    if not app_id:
        raise ValidationError("App ID cannot be empty")

    app_id_str = str(app_id).strip()

    # App IDs are numeric and typically 9-10 digits
    if not app_id_str.isdigit():
        raise ValidationError(f"App ID must be numeric, got: {app_id_str}")

    if len(app_id_str) < 9 or len(app_id_str) > 10:
        raise ValidationError(
            f"App ID should be 9-10 digits, got {len(app_id_str)} digits: {app_id_str}"
        )

    return app_id_str


def validate_resource_id(resource_id: str, name: str = "Resource ID") -> str:
    """
    Validate an opaque resource ID (review submissions, versions, items).

    Raises:
        ValidationError: If the ID is empty or contains a path separator
    """
    if resource_id is None:
        raise ValidationError(f"{name} cannot be empty")

    resource_id_str = str(resource_id).strip()
    if not resource_id_str:
        raise ValidationError(f"{name} cannot be empty")

    if "/" in resource_id_str:
        raise ValidationError(f"{name} must not contain '/', got: {resource_id_str}")

    return resource_id_str


def validate_platform(platform: str) -> str:
    """
    Validate a platform value.

    Args:
        platform: The platform to validate (e.g. 'IOS', 'mac_os')

    Returns:
        The validated, upper-cased platform string

    Raises:
        ValidationError: If the platform is invalid
    """
    if not platform:
        raise ValidationError("Platform cannot be empty")

    platform = str(platform).upper().strip()

    if platform not in PLATFORMS:
        raise ValidationError(
            f"Invalid platform. Must be one of: {PLATFORMS}, got: {platform}"
        )

    return platform


def validate_submission_state(state: str) -> str:
    """
    Validate a review submission state.

    Raises:
        ValidationError: If the state is invalid
    """
    if not state:
        raise ValidationError("Submission state cannot be empty")

    state = str(state).upper().strip()

    if state not in SUBMISSION_STATES:
        raise ValidationError(
            f"Invalid submission state. Must be one of: {SUBMISSION_STATES}, got: {state}"
        )

    return state


def join_query_values(values: Iterable[Any]) -> str:
    """
    Join a list of query values the way the API expects them.

    Args:
        values: Values for a single query parameter

    Returns:
        Comma separated string, skipping empty values
    """
    return ",".join(str(value) for value in values if value not in (None, ""))
