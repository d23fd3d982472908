"""
Review submission models and the review submissions service.

A review submission groups the items (App Store versions, in-app events,
custom product pages, product page tests) sent together to App Review.
The service wraps the ``reviewSubmissions`` and ``reviewSubmissionItems``
endpoints.
"""

import logging
from datetime import datetime
from typing import TYPE_CHECKING, ClassVar, Dict, Iterator, List, Optional, Type

from pydantic import BaseModel, Field

from .exceptions import ValidationError
from .models import (
    APIModel,
    DocumentLinks,
    IncludedResource,
    PagedDocumentLinks,
    PagedRelationship,
    PagingInformation,
    Query,
    Relationship,
    RelationshipDeclaration,
    Resource,
    request_body,
)
from .resources import App, AppStoreVersion
from .review_submission_items import (
    ListReviewSubmissionItemsQuery,
    ReviewSubmissionItem,
    ReviewSubmissionItemCreateRequest,
    ReviewSubmissionItemCreateRequestRelationships,
    ReviewSubmissionItemResponse,
    ReviewSubmissionItemsResponse,
    ReviewSubmissionItemUpdateRequest,
)
from .utils import validate_platform, validate_resource_id, validate_submission_state

if TYPE_CHECKING:
    from .client import AppStoreConnectAPI

logger = logging.getLogger(__name__)


class ReviewSubmissionAttributes(APIModel):
    """https://developer.apple.com/documentation/appstoreconnectapi/reviewsubmission/attributes"""

    platform: Optional[str] = None
    state: Optional[str] = None
    submitted_date: Optional[datetime] = None


class ReviewSubmissionRelationships(APIModel):
    """https://developer.apple.com/documentation/appstoreconnectapi/reviewsubmission/relationships"""

    app: Optional[Relationship] = None
    app_store_version_for_review: Optional[Relationship] = None
    items: Optional[PagedRelationship] = None
    last_updated_by_actor: Optional[Relationship] = None
    submitted_by_actor: Optional[Relationship] = None


class ReviewSubmission(Resource):
    """
    A submission of one or more items to App Review.

    https://developer.apple.com/documentation/appstoreconnectapi/reviewsubmission
    """

    attributes: Optional[ReviewSubmissionAttributes] = None
    relationships: Optional[ReviewSubmissionRelationships] = None

    @property
    def state(self) -> Optional[str]:
        return self.attributes.state if self.attributes else None

    @property
    def platform(self) -> Optional[str]:
        return self.attributes.platform if self.attributes else None


class ReviewSubmissionResponseIncluded(IncludedResource):
    """Related resource embedded in a review submission response."""

    variants: ClassVar[Dict[str, Type[BaseModel]]] = {
        "apps": App,
        "appStoreVersions": AppStoreVersion,
        "reviewSubmissionItems": ReviewSubmissionItem,
    }

    def app(self) -> Optional[App]:
        """Return the App stored within, if one is present."""
        return self._variant("apps")

    def app_store_version(self) -> Optional[AppStoreVersion]:
        """Return the AppStoreVersion stored within, if one is present."""
        return self._variant("appStoreVersions")

    def review_submission_item(self) -> Optional[ReviewSubmissionItem]:
        """Return the ReviewSubmissionItem stored within, if one is present."""
        return self._variant("reviewSubmissionItems")


class ReviewSubmissionResponse(APIModel):
    """https://developer.apple.com/documentation/appstoreconnectapi/reviewsubmissionresponse"""

    data: ReviewSubmission
    included: Optional[List[ReviewSubmissionResponseIncluded]] = None
    links: Optional[DocumentLinks] = None


class ReviewSubmissionsResponse(APIModel):
    """https://developer.apple.com/documentation/appstoreconnectapi/reviewsubmissionsresponse"""

    data: List[ReviewSubmission] = Field(default_factory=list)
    included: Optional[List[ReviewSubmissionResponseIncluded]] = None
    links: Optional[PagedDocumentLinks] = None
    meta: Optional[PagingInformation] = None


class ListSubmissionsForAppQuery(Query):
    """
    Query options for listing an app's review submissions.

    https://developer.apple.com/documentation/appstoreconnectapi/list_review_submissions_for_an_app
    """

    fields_review_submission_items: Optional[List[str]] = Field(
        default=None, alias="fields[reviewSubmissionItems]"
    )
    fields_review_submissions: Optional[List[str]] = Field(
        default=None, alias="fields[reviewSubmissions]"
    )
    filter_app: Optional[List[str]] = Field(default=None, alias="filter[app]")
    filter_platform: Optional[List[str]] = Field(default=None, alias="filter[platform]")
    filter_state: Optional[List[str]] = Field(default=None, alias="filter[state]")
    include: Optional[List[str]] = None
    limit: Optional[int] = None
    limit_items: Optional[int] = Field(default=None, alias="limit[items]")


class ReadReviewSubmissionQuery(Query):
    """
    Query options for reading a single review submission.

    https://developer.apple.com/documentation/appstoreconnectapi/read_review_submission_information
    """

    fields_review_submission_items: Optional[List[str]] = Field(
        default=None, alias="fields[reviewSubmissionItems]"
    )
    fields_review_submissions: Optional[List[str]] = Field(
        default=None, alias="fields[reviewSubmissions]"
    )
    include: Optional[List[str]] = None
    limit_items: Optional[int] = Field(default=None, alias="limit[items]")


# ===== REQUEST BUILDERS =====


class ReviewSubmissionCreateRequestAttributes(APIModel):
    platform: str


class ReviewSubmissionCreateRequestRelationships(APIModel):
    app: RelationshipDeclaration


class ReviewSubmissionCreateRequest(APIModel):
    """https://developer.apple.com/documentation/appstoreconnectapi/reviewsubmissioncreaterequest/data"""

    type: str = "reviewSubmissions"
    attributes: ReviewSubmissionCreateRequestAttributes
    relationships: ReviewSubmissionCreateRequestRelationships

    @classmethod
    def build(cls, platform: str, app_id: str) -> "ReviewSubmissionCreateRequest":
        return cls(
            attributes=ReviewSubmissionCreateRequestAttributes(platform=platform),
            relationships=ReviewSubmissionCreateRequestRelationships(
                app=RelationshipDeclaration.to("apps", app_id)
            ),
        )


class ReviewSubmissionUpdateRequestAttributes(APIModel):
    canceled: Optional[bool] = None
    submitted: Optional[bool] = None


class ReviewSubmissionUpdateRequest(APIModel):
    """https://developer.apple.com/documentation/appstoreconnectapi/reviewsubmissionupdaterequest/data"""

    type: str = "reviewSubmissions"
    id: str
    attributes: Optional[ReviewSubmissionUpdateRequestAttributes] = None

    @classmethod
    def build(
        cls,
        submission_id: str,
        canceled: Optional[bool] = None,
        submitted: Optional[bool] = None,
    ) -> "ReviewSubmissionUpdateRequest":
        """Build an update request, leaving ``attributes`` out when both flags are None."""
        attributes = None
        if canceled is not None or submitted is not None:
            attributes = ReviewSubmissionUpdateRequestAttributes(
                canceled=canceled, submitted=submitted
            )
        return cls(id=submission_id, attributes=attributes)


# Relationship name and resource type for each kind of item target.
ITEM_TARGETS = {
    "app_custom_product_page_version_id": (
        "app_custom_product_page_version",
        "appCustomProductPageVersions",
    ),
    "app_event_id": ("app_event", "appEvents"),
    "app_store_version_id": ("app_store_version", "appStoreVersions"),
    "app_store_version_experiment_id": (
        "app_store_version_experiment",
        "appStoreVersionExperiments",
    ),
    "app_store_version_experiment_v2_id": (
        "app_store_version_experiment_v2",
        "appStoreVersionExperiments",
    ),
}


class ReviewSubmissionsService:
    """
    Review submission operations of the App Store Connect API.

    Usually reached through ``AppStoreConnectAPI.review_submissions``.

    https://developer.apple.com/documentation/appstoreconnectapi/review_submissions
    """

    def __init__(self, api: "AppStoreConnectAPI"):
        self.api = api

    # ===== REVIEW SUBMISSIONS =====

    def _list_params(
        self, app_id: Optional[str], query: Optional[ListSubmissionsForAppQuery]
    ) -> Dict[str, str]:
        query = query.model_copy() if query else ListSubmissionsForAppQuery()
        if app_id is not None:
            query.filter_app = [validate_resource_id(app_id, "App ID")]
        if not query.filter_app:
            raise ValidationError("Listing review submissions requires filter[app]")
        if query.filter_platform:
            query.filter_platform = [validate_platform(p) for p in query.filter_platform]
        if query.filter_state:
            query.filter_state = [validate_submission_state(s) for s in query.filter_state]
        return query.to_params()

    def list_review_submissions_for_app(
        self,
        app_id: Optional[str] = None,
        query: Optional[ListSubmissionsForAppQuery] = None,
    ) -> ReviewSubmissionsResponse:
        """
        List review submissions for an app.

        Args:
            app_id: App to list submissions for; overrides ``query.filter_app``
            query: Optional fields, filters, includes and limits

        Returns:
            One page of review submissions

        Raises:
            ValidationError: If no app filter is given
        """
        params = self._list_params(app_id, query)
        return self.api.get(
            "/reviewSubmissions", params=params, model=ReviewSubmissionsResponse
        )

    def iter_review_submissions_for_app(
        self,
        app_id: Optional[str] = None,
        query: Optional[ListSubmissionsForAppQuery] = None,
    ) -> Iterator[ReviewSubmission]:
        """Yield every review submission for an app, following pagination."""
        params = self._list_params(app_id, query)
        for page in self.api.paginate(
            "/reviewSubmissions", params=params, model=ReviewSubmissionsResponse
        ):
            for submission in page.data:
                yield submission

    def get_review_submission(
        self, submission_id: str, query: Optional[ReadReviewSubmissionQuery] = None
    ) -> ReviewSubmissionResponse:
        """
        Read a single review submission.

        https://developer.apple.com/documentation/appstoreconnectapi/read_review_submission_information
        """
        submission_id = validate_resource_id(submission_id, "Review submission ID")
        params = query.to_params() if query else None
        return self.api.get(
            f"/reviewSubmissions/{submission_id}",
            params=params,
            model=ReviewSubmissionResponse,
        )

    def create_review_submission(
        self, platform: str, app_id: str
    ) -> ReviewSubmissionResponse:
        """
        Create a review submission for an app and platform.

        https://developer.apple.com/documentation/appstoreconnectapi/create_a_review_submission
        """
        request = ReviewSubmissionCreateRequest.build(
            platform=validate_platform(platform),
            app_id=validate_resource_id(app_id, "App ID"),
        )
        logger.info(
            f"create_review_submission: app_id={app_id} platform={request.attributes.platform}"
        )
        return self.api.post(
            "/reviewSubmissions",
            data=request_body(request),
            model=ReviewSubmissionResponse,
        )

    def update_review_submission(
        self,
        submission_id: str,
        canceled: Optional[bool] = None,
        submitted: Optional[bool] = None,
    ) -> ReviewSubmissionResponse:
        """
        Modify a review submission: submit it for review or cancel it.

        Flags left as None are not sent.

        https://developer.apple.com/documentation/appstoreconnectapi/modify_a_review_submission
        """
        submission_id = validate_resource_id(submission_id, "Review submission ID")
        request = ReviewSubmissionUpdateRequest.build(
            submission_id, canceled=canceled, submitted=submitted
        )
        logger.info(
            f"update_review_submission: id={submission_id} "
            f"canceled={canceled} submitted={submitted}"
        )
        return self.api.patch(
            f"/reviewSubmissions/{submission_id}",
            data=request_body(request),
            model=ReviewSubmissionResponse,
        )

    def submit_review_submission(self, submission_id: str) -> ReviewSubmissionResponse:
        """Send a review submission to App Review."""
        return self.update_review_submission(submission_id, submitted=True)

    def cancel_review_submission(self, submission_id: str) -> ReviewSubmissionResponse:
        """Withdraw a review submission from App Review."""
        return self.update_review_submission(submission_id, canceled=True)

    # ===== REVIEW SUBMISSION ITEMS =====

    def create_review_submission_item(
        self,
        review_submission_id: str,
        app_store_version_id: Optional[str] = None,
        app_custom_product_page_version_id: Optional[str] = None,
        app_event_id: Optional[str] = None,
        app_store_version_experiment_id: Optional[str] = None,
        app_store_version_experiment_v2_id: Optional[str] = None,
    ) -> ReviewSubmissionItemResponse:
        """
        Add an item to a review submission.

        At most one item target may be given. Targets left as None are not
        sent.

        https://developer.apple.com/documentation/appstoreconnectapi/post_v1_reviewsubmissionitems
        """
        review_submission_id = validate_resource_id(
            review_submission_id, "Review submission ID"
        )
        targets = {
            "app_store_version_id": app_store_version_id,
            "app_custom_product_page_version_id": app_custom_product_page_version_id,
            "app_event_id": app_event_id,
            "app_store_version_experiment_id": app_store_version_experiment_id,
            "app_store_version_experiment_v2_id": app_store_version_experiment_v2_id,
        }
        given = {name: value for name, value in targets.items() if value is not None}
        if len(given) > 1:
            raise ValidationError(
                f"A review submission item has a single target, got: {sorted(given)}"
            )

        relationships = ReviewSubmissionItemCreateRequestRelationships(
            review_submission=RelationshipDeclaration.to(
                "reviewSubmissions", review_submission_id
            )
        )
        for name, value in given.items():
            relationship, resource_type = ITEM_TARGETS[name]
            setattr(
                relationships,
                relationship,
                RelationshipDeclaration.to(resource_type, validate_resource_id(value)),
            )

        request = ReviewSubmissionItemCreateRequest(relationships=relationships)
        return self.api.post(
            "/reviewSubmissionItems",
            data=request_body(request),
            model=ReviewSubmissionItemResponse,
        )

    def list_review_submission_items(
        self,
        review_submission_id: str,
        query: Optional[ListReviewSubmissionItemsQuery] = None,
    ) -> ReviewSubmissionItemsResponse:
        """
        List the items of a review submission.

        https://developer.apple.com/documentation/appstoreconnectapi/get_v1_reviewsubmissions_id_items
        """
        review_submission_id = validate_resource_id(
            review_submission_id, "Review submission ID"
        )
        params = query.to_params() if query else None
        return self.api.get(
            f"/reviewSubmissions/{review_submission_id}/items",
            params=params,
            model=ReviewSubmissionItemsResponse,
        )

    def update_review_submission_item(
        self,
        item_id: str,
        removed: Optional[bool] = None,
        resolved: Optional[bool] = None,
    ) -> ReviewSubmissionItemResponse:
        """
        Modify a review submission item: mark it removed or its issues resolved.

        https://developer.apple.com/documentation/appstoreconnectapi/patch_v1_reviewsubmissionitems_id
        """
        item_id = validate_resource_id(item_id, "Review submission item ID")
        request = ReviewSubmissionItemUpdateRequest.build(
            item_id, removed=removed, resolved=resolved
        )
        return self.api.patch(
            f"/reviewSubmissionItems/{item_id}",
            data=request_body(request),
            model=ReviewSubmissionItemResponse,
        )

    def delete_review_submission_item(self, item_id: str) -> bool:
        """
        Remove an item from a review submission.

        https://developer.apple.com/documentation/appstoreconnectapi/delete_v1_reviewsubmissionitems_id
        """
        item_id = validate_resource_id(item_id, "Review submission item ID")
        return self.api.delete(f"/reviewSubmissionItems/{item_id}")
