"""
Review workflow utilities for appstore-connect-review.

This module provides high-level functions for sending App Store versions
to App Review and keeping track of an app's submissions, built on top of
the review submissions service.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .client import AppStoreConnectAPI
from .exceptions import AppStoreConnectError
from .review_submissions import ListSubmissionsForAppQuery, ReviewSubmission
from .utils import validate_app_id, validate_platform, validate_resource_id

# Submissions App Review still has to act on
PENDING_STATES = ["WAITING_FOR_REVIEW", "IN_REVIEW", "UNRESOLVED_ISSUES"]


def _as_utc(value: datetime) -> datetime:
    # Dates without an offset are taken as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ReviewManager:
    """
    High-level review manager for App Store Connect apps.

    This class provides convenient methods for the common review workflow
    with built-in validation and per-submission error reporting.
    """

    def __init__(self, api: AppStoreConnectAPI):
        """Initialize with an API client."""
        self.api = api

    @property
    def service(self):
        return self.api.review_submissions

    def find_open_submission(
        self, app_id: str, platform: str = "IOS"
    ) -> Optional[ReviewSubmission]:
        """
        Find a submission that is still being assembled for an app and platform.

        Args:
            app_id: The app ID
            platform: Platform of the submission

        Returns:
            The first READY_FOR_REVIEW submission, or None
        """
        query = ListSubmissionsForAppQuery(
            filter_platform=[validate_platform(platform)],
            filter_state=["READY_FOR_REVIEW"],
        )
        for submission in self.service.iter_review_submissions_for_app(app_id, query):
            return submission
        return None

    def submit_app_store_version(
        self, app_id: str, version_id: str, platform: str = "IOS"
    ) -> ReviewSubmission:
        """
        Send an App Store version to App Review.

        Reuses the app's open submission for the platform when there is one,
        otherwise creates a new submission. The version is added as an item
        and the submission is then submitted.

        Args:
            app_id: The app ID
            version_id: The App Store version to submit
            platform: Platform of the version

        Returns:
            The submitted review submission
        """
        app_id = validate_app_id(app_id)
        version_id = validate_resource_id(version_id, "App Store version ID")
        platform = validate_platform(platform)

        submission = self.find_open_submission(app_id, platform)
        if submission is None:
            submission = self.service.create_review_submission(platform, app_id).data
            logging.info(f"Created review submission {submission.id} for app {app_id}")
        else:
            logging.info(f"Reusing review submission {submission.id} for app {app_id}")

        self.service.create_review_submission_item(
            submission.id, app_store_version_id=version_id
        )
        return self.service.submit_review_submission(submission.id).data

    def cancel_pending_submissions(
        self, app_id: str, platform: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Cancel every submission of an app that is waiting for or in review.

        Args:
            app_id: The app ID
            platform: Only cancel submissions for this platform

        Returns:
            Dictionary with the canceled submission IDs and per-submission errors
        """
        app_id = validate_app_id(app_id)
        query = ListSubmissionsForAppQuery(filter_state=list(PENDING_STATES))
        if platform:
            query.filter_platform = [validate_platform(platform)]

        results: Dict[str, Any] = {"canceled": [], "errors": {}}

        # Canceling moves a submission out of the filtered listing, so read
        # every page before changing anything.
        submissions = list(self.service.iter_review_submissions_for_app(app_id, query))

        for submission in submissions:
            try:
                self.service.cancel_review_submission(submission.id)
                results["canceled"].append(submission.id)
            except AppStoreConnectError as e:
                logging.error(
                    f"Failed to cancel review submission {submission.id}: {e}"
                )
                results["errors"][submission.id] = str(e)

        return results

    def get_submission_summary(self, app_id: str) -> Dict[str, Any]:
        """
        Summarize the review submissions of an app.

        Args:
            app_id: The app ID

        Returns:
            Dictionary with the submission count per state and the most
            recently submitted submission
        """
        app_id = validate_app_id(app_id)

        summary: Dict[str, Any] = {
            "app_id": app_id,
            "total": 0,
            "by_state": {},
            "latest": None,
        }
        latest: Optional[ReviewSubmission] = None
        latest_date: Optional[datetime] = None

        for submission in self.service.iter_review_submissions_for_app(app_id):
            summary["total"] += 1
            state = submission.state or "UNKNOWN"
            summary["by_state"][state] = summary["by_state"].get(state, 0) + 1

            attributes = submission.attributes
            submitted = attributes.submitted_date if attributes else None
            if submitted is None:
                continue
            submitted = _as_utc(submitted)
            if latest_date is None or submitted > latest_date:
                latest, latest_date = submission, submitted

        if latest is not None:
            summary["latest"] = {
                "id": latest.id,
                "state": latest.state,
                "platform": latest.platform,
                "submitted_date": latest.attributes.submitted_date.isoformat(),
            }

        return summary


def create_review_manager(
    key_id: str, issuer_id: str, private_key_path: str
) -> ReviewManager:
    """
    Convenience function to create a ReviewManager with API client.

    Args:
        key_id: App Store Connect API key ID
        issuer_id: App Store Connect API issuer ID
        private_key_path: Path to private key file

    Returns:
        Configured ReviewManager instance
    """
    api = AppStoreConnectAPI(
        key_id=key_id,
        issuer_id=issuer_id,
        private_key_path=private_key_path,
    )

    return ReviewManager(api)
