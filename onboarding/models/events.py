"""
Event Models

Pydantic model for the inbound Pinpoint webhook that starts the
onboarding workflow.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

HIRED_EVENT_TYPE = "application_hired"


class HireEvent(BaseModel):
    """
    Candidate hired in Pinpoint.

    Source: Pinpoint webhook (API Gateway proxy)
    Triggers: application_hired Lambda
    """

    model_config = ConfigDict(frozen=True)

    event_type: Literal["application_hired"] = Field(
        ...,
        description="Webhook event name",
    )
    application_id: str = Field(
        ...,
        min_length=1,
        description="Pinpoint application identifier",
    )
    job_id: str | None = Field(default=None, description="Pinpoint job identifier")

    @field_validator("application_id", "job_id", mode="before")
    @classmethod
    def coerce_identifier(cls, v: Any) -> Any:
        """Pinpoint sends numeric ids; keep them as strings."""
        if isinstance(v, bool):
            return v
        if isinstance(v, int):
            return str(v)
        if isinstance(v, str):
            return v.strip()
        return v
