"""
Apple App Store Connect API client.

This module provides the shared HTTP client used by the review submission
service: JWT authentication, rate limiting, error mapping, response decoding
and pagination.
"""

import jwt
import os
import requests
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Type, TypeVar, Union
from ratelimit import limits, sleep_and_retry
import logging

import pydantic

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
from .models import ErrorDetail, ErrorResponse
from .review_submissions import ReviewSubmissionsService

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


class AppStoreConnectAPI:
    """
    Apple App Store Connect API client.

    Provides authenticated, rate-limited access to the App Store Connect API
    and decodes responses into typed models.

    Args:
        key_id: Your App Store Connect API key ID
        issuer_id: Your App Store Connect API issuer ID
        private_key_path: Path to your .p8 private key file
        base_url: API root, without a trailing slash
        timeout: Request timeout in seconds
    """

    BASE_URL = "https://api.appstoreconnect.apple.com/v1"
    DEFAULT_TIMEOUT = 30

    def __init__(
        self,
        key_id: str,
        issuer_id: str,
        private_key_path: Union[str, Path],
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize the App Store Connect API client."""
        # Validate required parameters
        if not all([key_id, issuer_id, private_key_path]):
            raise ValidationError("Missing required authentication parameters")

        self.key_id = key_id
        self.issuer_id = issuer_id
        self.private_key_path = Path(private_key_path)
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else self.DEFAULT_TIMEOUT
        self._token: Optional[str] = None
        self._token_expiry: Optional[int] = None

        if not self.private_key_path.exists():
            raise ValidationError(f"Private key file not found: {private_key_path}")

        self.review_submissions = ReviewSubmissionsService(self)

    @classmethod
    def from_env(cls) -> "AppStoreConnectAPI":
        """
        Create a client from environment variables.

        Reads APP_STORE_CONNECT_KEY_ID, APP_STORE_CONNECT_ISSUER_ID and
        APP_STORE_CONNECT_PRIVATE_KEY_PATH, plus the optional
        APP_STORE_CONNECT_BASE_URL and APP_STORE_CONNECT_TIMEOUT.
        """
        timeout = os.getenv("APP_STORE_CONNECT_TIMEOUT")
        try:
            timeout_value = float(timeout) if timeout else None
        except ValueError:
            raise ValidationError(
                f"APP_STORE_CONNECT_TIMEOUT must be a number, got: {timeout}"
            )

        return cls(
            key_id=os.getenv("APP_STORE_CONNECT_KEY_ID", ""),
            issuer_id=os.getenv("APP_STORE_CONNECT_ISSUER_ID", ""),
            private_key_path=os.getenv("APP_STORE_CONNECT_PRIVATE_KEY_PATH", ""),
            base_url=os.getenv("APP_STORE_CONNECT_BASE_URL"),
            timeout=timeout_value,
        )

    def _load_private_key(self) -> str:
        """Load the private key from file."""
        try:
            with open(self.private_key_path, "r") as f:
                return f.read()
        except IOError as e:
            raise AuthenticationError(f"Failed to load private key: {e}")

    def _generate_token(self) -> str:
        """Generate a JWT token for App Store Connect API."""
        current_time = int(datetime.now(timezone.utc).timestamp())

        if self._token and self._token_expiry and current_time < self._token_expiry:
            return self._token

        private_key = self._load_private_key()

        # Token expires in 20 minutes (max allowed by Apple)
        expiry = current_time + 1200

        payload = {
            "iss": self.issuer_id,
            "exp": expiry,
            "aud": "appstoreconnect-v1",
        }

        headers = {"alg": "ES256", "kid": self.key_id, "typ": "JWT"}

        try:
            self._token = jwt.encode(
                payload, private_key, algorithm="ES256", headers=headers
            )
        except Exception as e:
            raise AuthenticationError(f"Failed to generate JWT token: {e}")

        self._token_expiry = expiry - 60  # Refresh 1 minute before expiry
        return self._token

    def _get_headers(self) -> Dict[str, str]:
        """Get headers for API requests."""
        token = self._generate_token()
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def _parse_errors(response: requests.Response) -> List[ErrorDetail]:
        """Decode the JSON:API error list of a failed response, if any."""
        try:
            return ErrorResponse.model_validate(response.json()).errors
        except (ValueError, pydantic.ValidationError):
            return []

    def _raise_for_status(self, response: requests.Response) -> None:
        """Map an error status code to the matching exception."""
        status = response.status_code
        if status < 400:
            return

        errors = self._parse_errors(response)
        detail = errors[0].detail if errors and errors[0].detail else None

        if status == 401:
            raise AuthenticationError(
                "Authentication failed - check credentials", status, errors
            )
        elif status == 403:
            raise PermissionError(
                "Insufficient permissions for this operation", status, errors
            )
        elif status == 404:
            raise NotFoundError(
                detail or "Requested resource not found", status, errors
            )
        elif status == 409:
            raise ConflictError(
                detail or "Request conflicts with the resource state", status, errors
            )
        elif status == 429:
            raise RateLimitError("Rate limit exceeded", status, errors)

        error_msg = detail or response.text
        logging.error(f"API Error {status}: {error_msg}")
        if status >= 500:
            raise ServerError(f"API Error {status}: {error_msg}", status, errors)
        raise AppStoreConnectError(f"API Error {status}: {error_msg}", status, errors)

    def _make_request_raw(
        self,
        method: str = "GET",
        url: Optional[str] = None,
        endpoint: Optional[str] = None,
        params: Optional[Dict] = None,
        data: Optional[Dict] = None,
    ) -> requests.Response:
        """Make a request to the API."""
        logger = logging.getLogger(__name__)

        # Absolute URLs come from pagination links
        if url is None and endpoint is not None:
            url = f"{self.base_url}{endpoint}"
        elif url is None:
            raise ValidationError("Either url or endpoint must be provided")

        headers = self._get_headers()

        logger.info(f"_make_request: {method} {url}")
        if params:
            logger.info(f"_make_request: params={params}")

        try:
            response = requests.request(
                method=method,
                url=url,
                headers=headers,
                params=params,
                json=data,
                timeout=self.timeout,
            )
            logger.info(
                f"_make_request: Response received - " f"status={response.status_code}"
            )
        except requests.exceptions.Timeout as e:
            logger.error(f"_make_request: Request timed out after {self.timeout}s: {e}")
            raise AppStoreConnectError(f"Request failed: {e}")
        except requests.exceptions.RequestException as e:
            logger.error(f"_make_request: Request failed: {e}")
            raise AppStoreConnectError(f"Request failed: {e}")

        self._raise_for_status(response)
        return response

    @sleep_and_retry
    @limits(calls=3500, period=3600)  # Apple's rate limit
    def _make_request(self, *args, **kwargs) -> requests.Response:
        """Rate-limited wrapper for _make_request_raw."""
        return self._make_request_raw(*args, **kwargs)

    # ===== RESPONSE DECODING =====

    def _decode(
        self, response: requests.Response, model: Optional[Type[ModelT]]
    ) -> Any:
        """Decode a response body into ``model``, or a dict when no model is given."""
        if response.status_code == 204 or not response.content:
            return None

        try:
            payload = response.json()
        except ValueError as e:
            raise AppStoreConnectError(f"Failed to parse response: {e}")

        if model is None:
            return payload

        try:
            return model.model_validate(payload)
        except pydantic.ValidationError as e:
            raise AppStoreConnectError(
                f"Failed to parse response as {model.__name__}: {e}"
            )

    # ===== HTTP VERBS =====

    def get(
        self,
        endpoint: str,
        params: Optional[Dict] = None,
        model: Optional[Type[ModelT]] = None,
    ) -> Any:
        """GET ``endpoint`` and decode the response."""
        response = self._make_request(method="GET", endpoint=endpoint, params=params)
        return self._decode(response, model)

    def post(
        self,
        endpoint: str,
        data: Dict,
        model: Optional[Type[ModelT]] = None,
    ) -> Any:
        """POST a JSON document to ``endpoint`` and decode the response."""
        response = self._make_request(method="POST", endpoint=endpoint, data=data)
        return self._decode(response, model)

    def patch(
        self,
        endpoint: str,
        data: Dict,
        model: Optional[Type[ModelT]] = None,
    ) -> Any:
        """PATCH ``endpoint`` with a JSON document and decode the response."""
        response = self._make_request(method="PATCH", endpoint=endpoint, data=data)
        return self._decode(response, model)

    def delete(self, endpoint: str) -> bool:
        """DELETE ``endpoint``; returns True once the API accepts it."""
        response = self._make_request(method="DELETE", endpoint=endpoint)
        return response.status_code in (200, 202, 204)

    def paginate(
        self,
        endpoint: str,
        params: Optional[Dict] = None,
        model: Optional[Type[ModelT]] = None,
    ) -> Iterator[Any]:
        """
        Yield every page of a list endpoint.

        The first request goes to ``endpoint`` with ``params``; later requests
        follow the ``links.next`` URL of the previous page, which already
        carries the cursor and the original parameters.

        Args:
            endpoint: List endpoint, e.g. ``/reviewSubmissions``
            params: Query parameters for the first page
            model: Page model; it must expose ``links.next``

        Yields:
            One decoded page per request
        """
        logger = logging.getLogger(__name__)

        response = self._make_request(method="GET", endpoint=endpoint, params=params)
        page_number = 1
        while True:
            page = self._decode(response, model)
            if page is None:
                return
            yield page

            next_url = self._next_link(page)
            if not next_url:
                return

            page_number += 1
            logger.info(f"paginate: Fetching page {page_number} of {endpoint}")
            response = self._make_request(method="GET", url=next_url)

    @staticmethod
    def _next_link(page: Any) -> Optional[str]:
        if isinstance(page, dict):
            return (page.get("links") or {}).get("next")
        links = getattr(page, "links", None)
        return getattr(links, "next", None) if links is not None else None
