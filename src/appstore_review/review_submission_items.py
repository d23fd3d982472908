"""
Review submission item models.

An item is one reviewable thing (an App Store version, an in-app event, a
custom product page version or a product page optimization test) attached
to a review submission.
"""

from typing import ClassVar, Dict, List, Optional, Type

from pydantic import BaseModel, Field

from .models import (
    APIModel,
    DocumentLinks,
    IncludedResource,
    PagedDocumentLinks,
    PagingInformation,
    Query,
    Relationship,
    RelationshipDeclaration,
    Resource,
)
from .resources import (
    AppCustomProductPageVersion,
    AppEvent,
    AppStoreVersion,
    AppStoreVersionExperiment,
)


class ReviewSubmissionItemAttributes(APIModel):
    """https://developer.apple.com/documentation/appstoreconnectapi/reviewsubmissionitem/attributes"""

    state: Optional[str] = None


class ReviewSubmissionItemRelationships(APIModel):
    """https://developer.apple.com/documentation/appstoreconnectapi/reviewsubmissionitem/relationships"""

    app_custom_product_page_version: Optional[Relationship] = None
    app_event: Optional[Relationship] = None
    app_store_version: Optional[Relationship] = None
    app_store_version_experiment: Optional[Relationship] = None
    app_store_version_experiment_v2: Optional[Relationship] = None


class ReviewSubmissionItem(Resource):
    """
    A single item in a review submission.

    https://developer.apple.com/documentation/appstoreconnectapi/reviewsubmissionitem
    """

    attributes: Optional[ReviewSubmissionItemAttributes] = None
    relationships: Optional[ReviewSubmissionItemRelationships] = None


class ReviewSubmissionItemResponseIncluded(IncludedResource):
    """Related resource embedded in a review submission item response."""

    variants: ClassVar[Dict[str, Type[BaseModel]]] = {
        "appStoreVersions": AppStoreVersion,
        "appCustomProductPageVersions": AppCustomProductPageVersion,
        "appEvents": AppEvent,
        "appStoreVersionExperiments": AppStoreVersionExperiment,
    }

    def app_store_version(self) -> Optional[AppStoreVersion]:
        """Return the AppStoreVersion stored within, if one is present."""
        return self._variant("appStoreVersions")

    def app_custom_product_page_version(self) -> Optional[AppCustomProductPageVersion]:
        """Return the AppCustomProductPageVersion stored within, if one is present."""
        return self._variant("appCustomProductPageVersions")

    def app_event(self) -> Optional[AppEvent]:
        """Return the AppEvent stored within, if one is present."""
        return self._variant("appEvents")

    def app_store_version_experiment(self) -> Optional[AppStoreVersionExperiment]:
        """Return the AppStoreVersionExperiment stored within, if one is present."""
        return self._variant("appStoreVersionExperiments")


class ReviewSubmissionItemResponse(APIModel):
    """https://developer.apple.com/documentation/appstoreconnectapi/reviewsubmissionitemresponse"""

    data: ReviewSubmissionItem
    included: Optional[List[ReviewSubmissionItemResponseIncluded]] = None
    links: Optional[DocumentLinks] = None


class ReviewSubmissionItemsResponse(APIModel):
    """https://developer.apple.com/documentation/appstoreconnectapi/reviewsubmissionitemsresponse"""

    data: List[ReviewSubmissionItem] = Field(default_factory=list)
    included: Optional[List[ReviewSubmissionItemResponseIncluded]] = None
    links: Optional[PagedDocumentLinks] = None
    meta: Optional[PagingInformation] = None


class ListReviewSubmissionItemsQuery(Query):
    """
    Query options for listing the items of a review submission.

    https://developer.apple.com/documentation/appstoreconnectapi/get_v1_reviewsubmissions_id_items
    """

    fields_review_submission_items: Optional[List[str]] = Field(
        default=None, alias="fields[reviewSubmissionItems]"
    )
    fields_app_store_versions: Optional[List[str]] = Field(
        default=None, alias="fields[appStoreVersions]"
    )
    include: Optional[List[str]] = None
    limit: Optional[int] = None


# ===== REQUEST BUILDERS =====


class ReviewSubmissionItemCreateRequestRelationships(APIModel):
    app_custom_product_page_version: Optional[RelationshipDeclaration] = None
    app_event: Optional[RelationshipDeclaration] = None
    app_store_version: Optional[RelationshipDeclaration] = None
    app_store_version_experiment: Optional[RelationshipDeclaration] = None
    app_store_version_experiment_v2: Optional[RelationshipDeclaration] = None
    review_submission: RelationshipDeclaration


class ReviewSubmissionItemCreateRequest(APIModel):
    """https://developer.apple.com/documentation/appstoreconnectapi/reviewsubmissionitemcreaterequest/data"""

    type: str = "reviewSubmissionItems"
    relationships: ReviewSubmissionItemCreateRequestRelationships


class ReviewSubmissionItemUpdateRequestAttributes(APIModel):
    removed: Optional[bool] = None
    resolved: Optional[bool] = None


class ReviewSubmissionItemUpdateRequest(APIModel):
    """https://developer.apple.com/documentation/appstoreconnectapi/reviewsubmissionitemupdaterequest/data"""

    type: str = "reviewSubmissionItems"
    id: str
    attributes: Optional[ReviewSubmissionItemUpdateRequestAttributes] = None

    @classmethod
    def build(
        cls,
        item_id: str,
        removed: Optional[bool] = None,
        resolved: Optional[bool] = None,
    ) -> "ReviewSubmissionItemUpdateRequest":
        """Build an update request, leaving ``attributes`` out when both flags are None."""
        attributes = None
        if removed is not None or resolved is not None:
            attributes = ReviewSubmissionItemUpdateRequestAttributes(
                removed=removed, resolved=resolved
            )
        return cls(id=item_id, attributes=attributes)
