"""Typed success/failure envelope models returned at request boundaries."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Generic, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

from packages.rampart_shared.errors import ErrorCategory, ErrorPriority

from .status import status_for_code

T = TypeVar("T")


class SuccessMeta(BaseModel):
    """Metadata attached to every success envelope."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime


class FailureMeta(BaseModel):
    """Metadata attached to every failure envelope."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    retryable: bool


class ErrorBody(BaseModel):
    """Classified failure payload carried by a failure envelope."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    code: str
    message: str
    details: Any | None = None
    error_id: str = Field(alias="errorId")
    category: ErrorCategory
    priority: ErrorPriority
    retryable: bool
    suggestions: list[str]


class SuccessEnvelope(BaseModel, Generic[T]):
    """Envelope for a successful request."""

    model_config = ConfigDict(frozen=True)

    success: Literal[True] = True
    data: T
    message: str | None = None
    meta: SuccessMeta

    @property
    def status_code(self) -> int:
        return 200

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the JSON wire shape, omitting an absent message."""
        payload = self.model_dump(mode="json", by_alias=True)
        if payload.get("message") is None:
            payload.pop("message", None)
        return payload


class FailureEnvelope(BaseModel):
    """Envelope for a failed request."""

    model_config = ConfigDict(frozen=True)

    success: Literal[False] = False
    error: ErrorBody
    meta: FailureMeta

    @property
    def status_code(self) -> int:
        """Return the HTTP status mapped from the error code."""
        return status_for_code(self.error.code)

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the JSON wire shape, omitting absent details."""
        payload = self.model_dump(mode="json", by_alias=True)
        if payload["error"].get("details") is None:
            payload["error"].pop("details", None)
        return payload


ResponseEnvelope = Union[SuccessEnvelope[Any], FailureEnvelope]
