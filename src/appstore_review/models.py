"""
Shared JSON:API building blocks for appstore-connect-review.

Every App Store Connect resource follows the same document shape: a ``data``
member holding one resource or a list of them, optional ``included`` related
resources, ``links`` and paging ``meta``. This module provides the pieces
those documents are made of, plus helpers for request bodies and query
strings.
"""

from typing import Any, ClassVar, Dict, List, Mapping, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator
from pydantic.alias_generators import to_camel

from .utils import join_query_values


class APIModel(BaseModel):
    """
    Base class for all API models.

    Fields are declared in snake_case and exchanged with the API in
    camelCase. Unknown fields sent by the API are ignored.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# ===== LINKS AND PAGING =====


class ResourceLinks(APIModel):
    """Self-links for a single resource."""

    self_link: Optional[str] = Field(default=None, alias="self")


class DocumentLinks(APIModel):
    """Self-links for a response document."""

    self_link: Optional[str] = Field(default=None, alias="self")


class PagedDocumentLinks(APIModel):
    """Links for a paged response document; ``next`` is absent on the last page."""

    self_link: Optional[str] = Field(default=None, alias="self")
    first: Optional[str] = None
    next: Optional[str] = None


class Paging(APIModel):
    total: Optional[int] = None
    limit: Optional[int] = None


class PagingInformation(APIModel):
    """Paging details returned in a response's ``meta`` member."""

    paging: Paging


# ===== RELATIONSHIPS =====


class RelationshipData(APIModel):
    """Resource identifier object: the type and id of a related resource."""

    type: str
    id: str


class RelationshipLinks(APIModel):
    self_link: Optional[str] = Field(default=None, alias="self")
    related: Optional[str] = None


class Relationship(APIModel):
    """To-one relationship."""

    data: Optional[RelationshipData] = None
    links: Optional[RelationshipLinks] = None


class PagedRelationship(APIModel):
    """To-many relationship."""

    data: Optional[List[RelationshipData]] = None
    links: Optional[RelationshipLinks] = None
    meta: Optional[PagingInformation] = None


class RelationshipDeclaration(APIModel):
    """Relationship as declared in a create request body."""

    data: RelationshipData

    @classmethod
    def to(cls, resource_type: str, resource_id: str) -> "RelationshipDeclaration":
        return cls(data=RelationshipData(type=resource_type, id=resource_id))


class Resource(APIModel):
    """Fields every resource object carries."""

    id: str
    type: str
    links: Optional[ResourceLinks] = None


# ===== ERRORS =====


class ErrorDetail(APIModel):
    """One entry of an error response's ``errors`` list."""

    id: Optional[str] = None
    status: Optional[str] = None
    code: Optional[str] = None
    title: Optional[str] = None
    detail: Optional[str] = None
    source: Optional[Dict[str, Any]] = None


class ErrorResponse(APIModel):
    errors: List[ErrorDetail] = Field(default_factory=list)


# ===== INCLUDED RESOURCES =====


class IncludedResource(BaseModel):
    """
    Wrapper for one element of a response's ``included`` list.

    The API may embed related resources of several types in the same list,
    each tagged by its ``type`` member. Subclasses map the ``type`` values
    they understand to concrete models in ``variants`` and expose one accessor
    per variant. An element whose ``type`` is not in ``variants`` is kept as
    an inert raw record: decoding the enclosing response still succeeds and
    every accessor returns None.

    Build instances with ``model_validate(record)``. Serializing a wrapper
    gives back the record it was built from.
    """

    variants: ClassVar[Dict[str, Type[BaseModel]]] = {}

    type: Optional[str] = None
    raw: Dict[str, Any] = Field(default_factory=dict)
    resource: Optional[Any] = None

    @model_validator(mode="before")
    @classmethod
    def _decode_record(cls, record: Any) -> Dict[str, Any]:
        if isinstance(record, IncludedResource):
            record = record.raw
        if not isinstance(record, Mapping):
            raise ValueError("included resource must be a JSON object")

        kind = record.get("type")
        if not isinstance(kind, str):
            kind = None

        model = cls.variants.get(kind) if kind else None
        return {
            "type": kind,
            "raw": dict(record),
            "resource": model.model_validate(record) if model else None,
        }

    @model_serializer
    def _serialize_record(self) -> Dict[str, Any]:
        return self.raw

    @property
    def is_known(self) -> bool:
        """Whether the ``type`` matched one of this wrapper's variants."""
        return self.resource is not None

    def _variant(self, kind: str) -> Optional[Any]:
        if self.type == kind:
            return self.resource
        return None


# ===== REQUESTS =====


class Query(APIModel):
    """
    Base class for query-parameter models.

    Subclasses declare their parameters with explicit API aliases such as
    ``fields[reviewSubmissions]`` or ``limit[items]``.
    """

    def to_params(self) -> Dict[str, Any]:
        """Serialize to request parameters, dropping empty values."""
        params: Dict[str, Any] = {}
        for name, value in self.model_dump(by_alias=True, exclude_none=True).items():
            if not value:
                continue
            if isinstance(value, (list, tuple)):
                value = join_query_values(value)
            params[name] = value
        return params


def request_body(model: BaseModel) -> Dict[str, Any]:
    """Wrap a request model in a ``{"data": ...}`` document."""
    return {"data": model.model_dump(by_alias=True, exclude_none=True)}
