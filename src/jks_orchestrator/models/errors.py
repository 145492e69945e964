"""Error response models following RFC 7807 Problem Details."""

from typing import Any

from pydantic import BaseModel, Field, model_validator

# RFC status code to section mapping
status_to_section: dict[int, str] = {
    400: "6.5.1",
    404: "6.5.4",
    405: "6.5.5",
    422: "https://datatracker.ietf.org/doc/html/rfc4918#section-11.2",
    500: "6.6.1",
    503: "6.6.4",
}


def get_rfc_section_url(status: int) -> str:
    """Get the RFC section URL for a given HTTP status code.

    Args:
        status: The HTTP status code.

    Returns:
        The URL to the corresponding section in the RFC.
    """
    base_url = "https://datatracker.ietf.org/doc/html/rfc7231#section-"
    section = status_to_section.get(status)
    if section is None:
        return f"{base_url}6.6.1"
    if section.startswith("https://"):
        return section
    return f"{base_url}{section}"


class ValidationErrorDetail(BaseModel):
    """Validation error detail for one field of a job request."""

    type: str = Field(..., description="Error type")
    loc: tuple[str, ...] = Field(..., description="Error location in request")
    msg: str = Field(..., description="Human-readable error message")
    input: Any = Field(..., description="Invalid input value")
    ctx: dict[str, Any] | None = Field(None, description="Additional error context")


class ProblemDetail(BaseModel):
    """Problem Detail response as defined in RFC 7807.

    Job failures are not reported this way: a failed job is still a 200
    carrying a Failure JobResult. Problem details cover malformed
    requests and unexpected server errors.
    """

    type: str | None = Field(
        default=None,
        description="URI reference to the problem type (RFC 7807)",
    )
    title: str = Field(..., description="Short, human-readable summary")
    status: int = Field(..., description="HTTP status code")
    detail: str | None = Field(default=None, description="Human-readable explanation")
    instance: str | None = Field(
        default=None,
        description="URI reference identifying this occurrence",
        json_schema_extra={"example": "/jobs/inventory"},
    )
    errors: list[ValidationErrorDetail] | None = Field(
        default=None, description="Validation errors (for 422 responses)"
    )

    @model_validator(mode="before")
    @classmethod
    def set_default_type(cls, values: dict[str, Any]) -> dict[str, Any]:
        if "type" not in values or values["type"] is None:
            values["type"] = get_rfc_section_url(values.get("status", 500))
        return values
