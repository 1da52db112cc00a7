"""Pydantic schema for the JSON error body."""

from pydantic import BaseModel, Field


class ApiErrorBody(BaseModel):
    message: str = Field(
        min_length=1,
        description="Error message",
        examples=["bad request"],
    )
    details: str | None = Field(
        default=None,
        description="Error details, if present. Omitted when absent.",
        examples=["id must not be blank"],
    )

    model_config = {"frozen": True}
