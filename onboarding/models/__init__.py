# Shared Models
"""
Pydantic models for the inbound hire event and the records passed
between workflow steps.
"""

from onboarding.models.events import HIRED_EVENT_TYPE, HireEvent
from onboarding.models.records import (
    ApplicantRecord,
    EmployeeRecord,
    UploadOutcome,
    WorkflowResult,
)

__all__ = [
    # Events
    "HIRED_EVENT_TYPE",
    "HireEvent",
    # Records
    "ApplicantRecord",
    "EmployeeRecord",
    "UploadOutcome",
    "WorkflowResult",
]
