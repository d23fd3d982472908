"""
Related resources that review submission responses can embed in ``included``.

Only the attributes relevant to reviewing are modelled; anything else the
API returns is ignored.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from .models import APIModel, Resource


class AppAttributes(APIModel):
    name: Optional[str] = None
    bundle_id: Optional[str] = None
    sku: Optional[str] = None
    primary_locale: Optional[str] = None
    content_rights_declaration: Optional[str] = None
    is_or_ever_was_made_for_kids: Optional[bool] = None


class App(Resource):
    """
    An app in App Store Connect.

    https://developer.apple.com/documentation/appstoreconnectapi/app
    """

    attributes: Optional[AppAttributes] = None
    relationships: Optional[Dict[str, Any]] = None


class AppStoreVersionAttributes(APIModel):
    platform: Optional[str] = None
    version_string: Optional[str] = None
    app_store_state: Optional[str] = None
    app_version_state: Optional[str] = None
    copyright: Optional[str] = None
    release_type: Optional[str] = None
    earliest_release_date: Optional[datetime] = None
    downloadable: Optional[bool] = None
    created_date: Optional[datetime] = None
    review_type: Optional[str] = None


class AppStoreVersion(Resource):
    """
    A version of an app on the App Store.

    https://developer.apple.com/documentation/appstoreconnectapi/appstoreversion
    """

    attributes: Optional[AppStoreVersionAttributes] = None
    relationships: Optional[Dict[str, Any]] = None


class AppEventAttributes(APIModel):
    reference_name: Optional[str] = None
    badge: Optional[str] = None
    event_state: Optional[str] = None
    deep_link: Optional[str] = None
    purchase_requirement: Optional[str] = None
    primary_locale: Optional[str] = None
    priority: Optional[str] = None
    purpose: Optional[str] = None


class AppEvent(Resource):
    """
    An in-app event.

    https://developer.apple.com/documentation/appstoreconnectapi/appevent
    """

    attributes: Optional[AppEventAttributes] = None
    relationships: Optional[Dict[str, Any]] = None


class AppCustomProductPageVersionAttributes(APIModel):
    version: Optional[str] = None
    state: Optional[str] = None
    deep_link: Optional[str] = None


class AppCustomProductPageVersion(Resource):
    """
    A version of a custom product page.

    https://developer.apple.com/documentation/appstoreconnectapi/appcustomproductpageversion
    """

    attributes: Optional[AppCustomProductPageVersionAttributes] = None
    relationships: Optional[Dict[str, Any]] = None


class AppStoreVersionExperimentAttributes(APIModel):
    name: Optional[str] = None
    platform: Optional[str] = None
    traffic_proportion: Optional[int] = None
    state: Optional[str] = None
    review_required: Optional[bool] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class AppStoreVersionExperiment(Resource):
    """
    A product page optimization test.

    https://developer.apple.com/documentation/appstoreconnectapi/appstoreversionexperimentv2
    """

    attributes: Optional[AppStoreVersionExperimentAttributes] = None
    relationships: Optional[Dict[str, Any]] = None
