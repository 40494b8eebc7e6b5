"""Pydantic schemas for request and response bodies of the review service."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Review(BaseModel):
    """A single submitted review.

    Both fields are free-form text and are kept exactly as sent. Unknown keys
    in the request body are ignored; a missing or non-string field is a
    validation error.
    """

    model_config = ConfigDict(
        extra="ignore",
        strict=True,
        frozen=True,
    )

    name: str
    review: str


class SubmitResponse(BaseModel):
    """Body returned after a review is accepted."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    success: bool = True


class HealthResponse(BaseModel):
    """Health check payload."""

    model_config = ConfigDict(extra="forbid")

    status: str
    reviews: int
    persistence: str
