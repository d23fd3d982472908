"""
Tests for the review submissions service.
"""

import pytest

from appstore_review.exceptions import ConflictError, NotFoundError, ValidationError
from appstore_review.review_submission_items import (
    ListReviewSubmissionItemsQuery,
    ReviewSubmissionItemResponse,
    ReviewSubmissionItemsResponse,
)
from appstore_review.review_submissions import (
    ListSubmissionsForAppQuery,
    ReadReviewSubmissionQuery,
    ReviewSubmissionResponse,
    ReviewSubmissionsResponse,
)

from conftest import (
    APP_ID,
    APP_RECORD,
    BASE_URL,
    VERSION_RECORD,
    item_record,
    make_response,
    submission_record,
)


def single(record, included=None):
    document = {"data": record, "links": {"self": "x"}}
    if included is not None:
        document["included"] = included
    return document


class TestListReviewSubmissions:
    """Test listing review submissions."""

    def test_list_for_app(self, api_client, mock_request):
        mock_request.return_value = make_response(
            200, {"data": [submission_record()], "links": {"self": "x"}}
        )

        result = api_client.review_submissions.list_review_submissions_for_app(APP_ID)

        assert isinstance(result, ReviewSubmissionsResponse)
        assert result.data[0].id == "sub-1"

        kwargs = mock_request.call_args.kwargs
        assert kwargs["method"] == "GET"
        assert kwargs["url"] == f"{BASE_URL}/reviewSubmissions"
        assert kwargs["params"] == {"filter[app]": APP_ID}

    def test_list_with_query(self, api_client, mock_request):
        mock_request.return_value = make_response(200, {"data": [], "links": {"self": "x"}})
        query = ListSubmissionsForAppQuery(
            filter_app=[APP_ID],
            filter_state=["in_review"],
            filter_platform=["ios"],
            include=["items"],
            limit=20,
        )

        api_client.review_submissions.list_review_submissions_for_app(query=query)

        assert mock_request.call_args.kwargs["params"] == {
            "filter[app]": APP_ID,
            "filter[state]": "IN_REVIEW",
            "filter[platform]": "IOS",
            "include": "items",
            "limit": 20,
        }
        # the caller's query is left untouched
        assert query.filter_state == ["in_review"]

    def test_app_id_overrides_query_filter(self, api_client, mock_request):
        mock_request.return_value = make_response(200, {"data": [], "links": {"self": "x"}})
        query = ListSubmissionsForAppQuery(filter_app=["999999999"])

        api_client.review_submissions.list_review_submissions_for_app(APP_ID, query)

        assert mock_request.call_args.kwargs["params"]["filter[app]"] == APP_ID

    def test_list_requires_app_filter(self, api_client, mock_request):
        with pytest.raises(ValidationError, match="filter\\[app\\]"):
            api_client.review_submissions.list_review_submissions_for_app()

        mock_request.assert_not_called()

    def test_list_rejects_bad_state(self, api_client, mock_request):
        query = ListSubmissionsForAppQuery(filter_state=["SHIPPED"])

        with pytest.raises(ValidationError, match="Invalid submission state"):
            api_client.review_submissions.list_review_submissions_for_app(APP_ID, query)

    def test_iter_follows_pages(self, api_client, mock_request):
        next_url = f"{BASE_URL}/reviewSubmissions?cursor=Mg&filter%5Bapp%5D={APP_ID}"
        mock_request.side_effect = [
            make_response(
                200,
                {
                    "data": [submission_record("sub-1"), submission_record("sub-2")],
                    "links": {"self": "x", "next": next_url},
                },
            ),
            make_response(
                200, {"data": [submission_record("sub-3")], "links": {"self": next_url}}
            ),
        ]

        submissions = list(
            api_client.review_submissions.iter_review_submissions_for_app(APP_ID)
        )

        assert [s.id for s in submissions] == ["sub-1", "sub-2", "sub-3"]
        assert mock_request.call_args_list[1].kwargs["url"] == next_url


class TestGetReviewSubmission:
    """Test reading a review submission."""

    def test_get_with_included(self, api_client, mock_request):
        mock_request.return_value = make_response(
            200,
            single(
                submission_record(),
                included=[APP_RECORD, VERSION_RECORD, {"type": "actors", "id": "a-1"}],
            ),
        )

        result = api_client.review_submissions.get_review_submission(
            "sub-1", ReadReviewSubmissionQuery(include=["app", "appStoreVersionForReview"])
        )

        assert isinstance(result, ReviewSubmissionResponse)
        assert result.data.id == "sub-1"
        assert result.included[0].app().id == APP_ID
        assert result.included[1].app_store_version().attributes.version_string == "2.1.0"
        assert not result.included[2].is_known

        kwargs = mock_request.call_args.kwargs
        assert kwargs["url"] == f"{BASE_URL}/reviewSubmissions/sub-1"
        assert kwargs["params"] == {"include": "app,appStoreVersionForReview"}

    def test_get_without_query(self, api_client, mock_request):
        mock_request.return_value = make_response(200, single(submission_record()))

        api_client.review_submissions.get_review_submission("sub-1")

        assert mock_request.call_args.kwargs["params"] is None

    def test_get_not_found(self, api_client, mock_request):
        mock_request.return_value = make_response(404)

        with pytest.raises(NotFoundError):
            api_client.review_submissions.get_review_submission("missing")

    @pytest.mark.parametrize("bad_id", ["", "   ", None, "a/b"])
    def test_get_rejects_bad_id(self, api_client, mock_request, bad_id):
        with pytest.raises(ValidationError):
            api_client.review_submissions.get_review_submission(bad_id)


class TestCreateAndUpdateReviewSubmission:
    """Test creating and modifying review submissions."""

    def test_create(self, api_client, mock_request):
        mock_request.return_value = make_response(201, single(submission_record()))

        result = api_client.review_submissions.create_review_submission("ios", APP_ID)

        assert result.data.state == "READY_FOR_REVIEW"
        kwargs = mock_request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["url"] == f"{BASE_URL}/reviewSubmissions"
        assert kwargs["json"] == {
            "data": {
                "type": "reviewSubmissions",
                "attributes": {"platform": "IOS"},
                "relationships": {"app": {"data": {"type": "apps", "id": APP_ID}}},
            }
        }

    def test_create_rejects_bad_platform(self, api_client, mock_request):
        with pytest.raises(ValidationError, match="Invalid platform"):
            api_client.review_submissions.create_review_submission("ANDROID", APP_ID)

        mock_request.assert_not_called()

    def test_update_flags(self, api_client, mock_request):
        mock_request.return_value = make_response(
            200, single(submission_record(state="WAITING_FOR_REVIEW"))
        )

        result = api_client.review_submissions.update_review_submission(
            "sub-1", submitted=True
        )

        assert result.data.state == "WAITING_FOR_REVIEW"
        kwargs = mock_request.call_args.kwargs
        assert kwargs["method"] == "PATCH"
        assert kwargs["url"] == f"{BASE_URL}/reviewSubmissions/sub-1"
        assert kwargs["json"] == {
            "data": {
                "type": "reviewSubmissions",
                "id": "sub-1",
                "attributes": {"submitted": True},
            }
        }

    def test_update_without_flags(self, api_client, mock_request):
        mock_request.return_value = make_response(200, single(submission_record()))

        api_client.review_submissions.update_review_submission("sub-1")

        assert mock_request.call_args.kwargs["json"] == {
            "data": {"type": "reviewSubmissions", "id": "sub-1"}
        }

    def test_cancel(self, api_client, mock_request):
        mock_request.return_value = make_response(
            200, single(submission_record(state="CANCELING"))
        )

        result = api_client.review_submissions.cancel_review_submission("sub-1")

        assert result.data.state == "CANCELING"
        assert mock_request.call_args.kwargs["json"]["data"]["attributes"] == {
            "canceled": True
        }

    def test_submit_empty_submission_conflicts(self, api_client, mock_request):
        mock_request.return_value = make_response(
            409,
            {
                "errors": [
                    {
                        "status": "409",
                        "code": "ENTITY_ERROR",
                        "title": "There was a problem with the request entity",
                        "detail": "The review submission has no items",
                    }
                ]
            },
        )

        with pytest.raises(ConflictError, match="no items"):
            api_client.review_submissions.submit_review_submission("sub-1")


class TestReviewSubmissionItems:
    """Test review submission item operations."""

    def test_create_item_for_version(self, api_client, mock_request):
        mock_request.return_value = make_response(
            201, single(item_record(), included=[VERSION_RECORD])
        )

        result = api_client.review_submissions.create_review_submission_item(
            "sub-1", app_store_version_id="ver-1"
        )

        assert isinstance(result, ReviewSubmissionItemResponse)
        assert result.data.id == "item-1"
        assert result.included[0].app_store_version().id == "ver-1"

        kwargs = mock_request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["url"] == f"{BASE_URL}/reviewSubmissionItems"
        assert kwargs["json"] == {
            "data": {
                "type": "reviewSubmissionItems",
                "relationships": {
                    "reviewSubmission": {
                        "data": {"type": "reviewSubmissions", "id": "sub-1"}
                    },
                    "appStoreVersion": {
                        "data": {"type": "appStoreVersions", "id": "ver-1"}
                    },
                },
            }
        }

    def test_create_item_without_target(self, api_client, mock_request):
        mock_request.return_value = make_response(201, single(item_record()))

        api_client.review_submissions.create_review_submission_item("sub-1")

        assert mock_request.call_args.kwargs["json"]["data"]["relationships"] == {
            "reviewSubmission": {"data": {"type": "reviewSubmissions", "id": "sub-1"}}
        }

    @pytest.mark.parametrize(
        "argument, relationship, resource_type",
        [
            ("app_event_id", "appEvent", "appEvents"),
            (
                "app_custom_product_page_version_id",
                "appCustomProductPageVersion",
                "appCustomProductPageVersions",
            ),
            (
                "app_store_version_experiment_id",
                "appStoreVersionExperiment",
                "appStoreVersionExperiments",
            ),
            (
                "app_store_version_experiment_v2_id",
                "appStoreVersionExperimentV2",
                "appStoreVersionExperiments",
            ),
        ],
    )
    def test_create_item_other_targets(
        self, api_client, mock_request, argument, relationship, resource_type
    ):
        mock_request.return_value = make_response(201, single(item_record()))

        api_client.review_submissions.create_review_submission_item(
            "sub-1", **{argument: "target-1"}
        )

        relationships = mock_request.call_args.kwargs["json"]["data"]["relationships"]
        assert relationships[relationship] == {
            "data": {"type": resource_type, "id": "target-1"}
        }
        assert set(relationships) == {"reviewSubmission", relationship}

    def test_create_item_rejects_two_targets(self, api_client, mock_request):
        with pytest.raises(ValidationError, match="single target"):
            api_client.review_submissions.create_review_submission_item(
                "sub-1", app_store_version_id="ver-1", app_event_id="event-1"
            )

        mock_request.assert_not_called()

    def test_list_items(self, api_client, mock_request):
        mock_request.return_value = make_response(
            200,
            {
                "data": [item_record("item-1"), item_record("item-2", "ACCEPTED")],
                "links": {"self": "x"},
            },
        )

        result = api_client.review_submissions.list_review_submission_items(
            "sub-1", ListReviewSubmissionItemsQuery(limit=50)
        )

        assert isinstance(result, ReviewSubmissionItemsResponse)
        assert [item.attributes.state for item in result.data] == [
            "READY_FOR_REVIEW",
            "ACCEPTED",
        ]
        kwargs = mock_request.call_args.kwargs
        assert kwargs["url"] == f"{BASE_URL}/reviewSubmissions/sub-1/items"
        assert kwargs["params"] == {"limit": 50}

    def test_update_item(self, api_client, mock_request):
        mock_request.return_value = make_response(200, single(item_record(state="REMOVED")))

        result = api_client.review_submissions.update_review_submission_item(
            "item-1", removed=True
        )

        assert result.data.attributes.state == "REMOVED"
        kwargs = mock_request.call_args.kwargs
        assert kwargs["method"] == "PATCH"
        assert kwargs["url"] == f"{BASE_URL}/reviewSubmissionItems/item-1"
        assert kwargs["json"] == {
            "data": {
                "type": "reviewSubmissionItems",
                "id": "item-1",
                "attributes": {"removed": True},
            }
        }

    def test_delete_item(self, api_client, mock_request):
        mock_request.return_value = make_response(204)

        assert api_client.review_submissions.delete_review_submission_item("item-1")

        kwargs = mock_request.call_args.kwargs
        assert kwargs["method"] == "DELETE"
        assert kwargs["url"] == f"{BASE_URL}/reviewSubmissionItems/item-1"
        assert kwargs["json"] is None
