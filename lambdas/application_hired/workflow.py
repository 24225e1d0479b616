"""
Onboarding Workflow

Sequences one hire event through Pinpoint and HiBob:

1. Parse and validate the webhook body
2. Fetch the applicant from Pinpoint
3. Create the employee in HiBob (email-conflict retry lives in HiBobClient)
4. Upload the CV to HiBob when one is attached (failure is non-fatal)
5. Comment on the Pinpoint application with the employee id
6. Assemble the WorkflowResult

Every write in steps 3-5 is real and non-idempotent. Nothing is rolled
back: if step 5 fails the HiBob employee already exists and is logged as
orphaned for manual follow-up.
"""

from datetime import datetime, timezone
from typing import Any, Callable

import structlog

from lambdas.application_hired.event_parser import extract_body, parse_hire_event
from onboarding.exceptions import OnboardingError
from onboarding.models.events import HireEvent
from onboarding.models.records import (
    ApplicantRecord,
    EmployeeRecord,
    UploadOutcome,
    WorkflowResult,
)
from onboarding.state_machine import WorkflowStage, validate_transition
from onboarding.tools.hibob import HiBobClient
from onboarding.tools.pinpoint import PinpointClient


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OnboardingWorkflow:
    """Single-use orchestrator for one hire event."""

    def __init__(
        self,
        pinpoint: PinpointClient,
        hibob: HiBobClient,
        log: structlog.stdlib.BoundLogger,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.pinpoint = pinpoint
        self.hibob = hibob
        self.log = log
        self._clock = clock
        self.stage = WorkflowStage.RECEIVED
        self.employee: EmployeeRecord | None = None

    def _advance(self, new_stage: WorkflowStage) -> None:
        validate_transition(self.stage, new_stage, logger=self.log)
        self.log.debug("workflow_stage_changed", from_stage=self.stage.value, to_stage=new_stage.value)
        self.stage = new_stage

    def run(self, event: dict[str, Any]) -> WorkflowResult:
        """
        Execute the workflow for an API Gateway proxy event.

        Raises:
            OnboardingError: Any fatal failure; the stage is left at ERRORED
        """
        try:
            return self._run(event)
        except Exception as e:
            failed_stage = self.stage
            if not self.stage.is_terminal:
                self._advance(WorkflowStage.ERRORED)
            self.log.warning(
                "workflow_aborted",
                failed_stage=failed_stage.value,
                error_kind=e.kind.value if isinstance(e, OnboardingError) else type(e).__name__,
            )
            if self.employee is not None:
                self.log.warning(
                    "orphaned_employee_record",
                    employee_id=self.employee.employee_id,
                    email=self.employee.email,
                    note="Employee exists in HiBob but the workflow did not complete",
                )
            raise

    def _run(self, event: dict[str, Any]) -> WorkflowResult:
        hire_event = parse_hire_event(extract_body(event))
        self.log = self.log.bind(application_id=hire_event.application_id)
        self.log.info("hire_event_received", job_id=hire_event.job_id)
        self._advance(WorkflowStage.VALIDATED)

        applicant = self.pinpoint.fetch_application(hire_event.application_id)
        self._advance(WorkflowStage.FETCHED)

        self.employee = self.hibob.create_employee(
            applicant.first_name,
            applicant.last_name,
            applicant.email,
        )
        self.log = self.log.bind(employee_id=self.employee.employee_id)
        self._advance(WorkflowStage.PROVISIONED)

        upload = self._upload_cv(applicant, self.employee)

        comment_id = self.pinpoint.post_hired_comment(
            hire_event.application_id,
            self.employee.employee_id,
        )
        self._advance(WorkflowStage.ACKNOWLEDGED)

        result = self._build_result(hire_event, self.employee, comment_id, upload)
        self._advance(WorkflowStage.COMPLETED)

        self.log.info(
            "workflow_completed",
            comment_id=comment_id,
            cv_uploaded=result.cv_uploaded,
        )
        return result

    def _upload_cv(self, applicant: ApplicantRecord, employee: EmployeeRecord) -> UploadOutcome:
        """
        Transfer the CV if the applicant has one.

        Upload errors are logged and recorded, never raised.
        """
        if not applicant.has_resume:
            self.log.info("no_cv_available")
            self._advance(WorkflowStage.UPLOAD_SKIPPED)
            return UploadOutcome.skipped()

        try:
            self.hibob.upload_document(
                employee.employee_id,
                applicant.resume_url,
                applicant.resume_file_name,
            )
            outcome = UploadOutcome.succeeded()
        except OnboardingError as e:
            self.log.warning(
                "cv_upload_failed",
                error=str(e),
                error_kind=e.kind.value,
            )
            outcome = UploadOutcome.failed(e.message)

        self._advance(WorkflowStage.UPLOAD_ATTEMPTED)
        return outcome

    def _build_result(
        self,
        hire_event: HireEvent,
        employee: EmployeeRecord,
        comment_id: str,
        upload: UploadOutcome,
    ) -> WorkflowResult:
        return WorkflowResult(
            application_id=hire_event.application_id,
            employee_id=employee.employee_id,
            employee_email=employee.email,
            comment_id=comment_id,
            cv_uploaded=upload.uploaded,
            timestamp=self._clock(),
        )
