"""
Record Models

Transient records passed between workflow steps. None of these outlive a
single invocation.
"""

import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ApplicantRecord(BaseModel):
    """
    Candidate attributes normalized from a Pinpoint application.

    The résumé URL and file name form a single optional unit: a record
    either has both or neither.
    """

    model_config = ConfigDict(frozen=True)

    first_name: str | None = Field(default=None, description="Candidate first name")
    last_name: str | None = Field(default=None, description="Candidate last name")
    email: str = Field(..., description="Candidate email address")
    resume_url: str | None = Field(default=None, description="URL of the PDF CV")
    resume_file_name: str | None = Field(default=None, description="Filename of the PDF CV")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip()
        if not EMAIL_PATTERN.match(v):
            raise ValueError(f"Malformed email address: {v!r}")
        return v

    @model_validator(mode="before")
    @classmethod
    def pair_resume_fields(cls, data: Any) -> Any:
        """Drop a half-populated résumé pair."""
        if isinstance(data, dict):
            url = data.get("resume_url")
            name = data.get("resume_file_name")
            if not url or not name:
                data = {**data, "resume_url": None, "resume_file_name": None}
        return data

    @property
    def has_resume(self) -> bool:
        return self.resume_url is not None and self.resume_file_name is not None


class EmployeeRecord(BaseModel):
    """Employee created in HiBob."""

    model_config = ConfigDict(frozen=True)

    employee_id: str = Field(..., min_length=1, description="Opaque HiBob employee id")
    email: str = Field(..., description="Email address the employee was registered with")
    raw_fields: dict[str, Any] = Field(
        default_factory=dict,
        description="Full creation response from HiBob",
    )


class UploadOutcome(BaseModel):
    """Result of the optional résumé transfer."""

    model_config = ConfigDict(frozen=True)

    attempted: bool = False
    uploaded: bool = False
    error: str | None = None

    @classmethod
    def skipped(cls) -> "UploadOutcome":
        return cls()

    @classmethod
    def succeeded(cls) -> "UploadOutcome":
        return cls(attempted=True, uploaded=True)

    @classmethod
    def failed(cls, error: str) -> "UploadOutcome":
        return cls(attempted=True, uploaded=False, error=error)


class WorkflowResult(BaseModel):
    """Terminal success artifact of one invocation."""

    model_config = ConfigDict(frozen=True)

    application_id: str
    employee_id: str
    employee_email: str
    comment_id: str
    cv_uploaded: bool
    timestamp: datetime

    def to_response_data(self) -> dict[str, Any]:
        """Build the `data` block of the success response."""
        return {
            "pinpoint": {
                "application_id": self.application_id,
                "comment_id": self.comment_id,
            },
            "hibob": {
                "employee_id": self.employee_id,
                "email": self.employee_email,
                "cv_uploaded": self.cv_uploaded,
            },
        }

    @property
    def timestamp_iso(self) -> str:
        """ISO-8601 UTC timestamp with a Z suffix and second precision."""
        return self.timestamp.strftime("%Y-%m-%dT%H:%M:%SZ")
