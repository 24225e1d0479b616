"""
Unit tests for the application_hired Lambda.

Tests cover:
- Error classification and response building: responses.py
- Workflow sequencing with stubbed clients: workflow.py
- Lambda entry point: handler.py
"""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from lambdas.application_hired.responses import (
    build_response,
    classify_error,
    error_response,
    is_client_error,
)
from lambdas.application_hired.workflow import OnboardingWorkflow
from onboarding.exceptions import (
    ClientInputError,
    InvalidStageTransitionError,
    ParseError,
    RemoteServiceError,
    ResourceExhaustedError,
)
from onboarding.models.records import ApplicantRecord, EmployeeRecord
from onboarding.state_machine import WorkflowStage, validate_transition


# ============================================================================
# Responses
# ============================================================================

class TestBuildResponse:
    """Tests for build_response."""

    def test_adds_request_id_and_headers(self):
        response = build_response(200, {"status": "success"}, "req-1")

        assert response["statusCode"] == 200
        assert response["headers"] == {"Content-Type": "application/json"}
        assert json.loads(response["body"]) == {"status": "success", "request_id": "req-1"}


class TestClassifyError:
    """Tests for classify_error."""

    def test_client_input_error(self):
        status, message, detail = classify_error(ClientInputError("Invalid event type: foo"))

        assert status == 400
        assert message == "Invalid event type: foo"
        assert detail == {"kind": "client_input"}

    def test_client_input_error_custom_status(self):
        status, _, _ = classify_error(ClientInputError("Unprocessable", status=422))

        assert status == 422

    def test_inbound_parse_error(self):
        status, message, detail = classify_error(ParseError("Invalid JSON in request body", reason="Expecting value"))

        assert status == 400
        assert message == "Invalid JSON in request body"
        assert detail["kind"] == "parse"
        assert detail["reason"] == "Expecting value"

    def test_upstream_parse_error(self):
        status, message, detail = classify_error(ParseError("Invalid response format from Pinpoint API", upstream=True))

        assert status == 500
        assert message == "Internal server error"
        assert detail["message"] == "Invalid response format from Pinpoint API"

    def test_remote_service_error(self):
        error = RemoteServiceError(service="hibob", message="Failed to create employee", status=403)

        status, message, detail = classify_error(error)

        assert status == 500
        assert message == "Internal server error"
        assert detail == {
            "kind": "remote_service",
            "service": "hibob",
            "status_code": 403,
            "message": "Failed to create employee",
        }

    def test_resource_exhausted_error(self):
        status, _, detail = classify_error(ResourceExhaustedError(attempts=10, last_email="jane-9@x.com"))

        assert status == 500
        assert detail["kind"] == "resource_exhausted"
        assert detail["attempts"] == 10

    def test_stage_transition_error(self):
        error = InvalidStageTransitionError("FETCHED", "COMPLETED", ["PROVISIONED"])

        status, _, detail = classify_error(error)

        assert status == 500
        assert detail["kind"] == "invalid_transition"

    def test_unexpected_error(self):
        status, message, detail = classify_error(KeyError("id"))

        assert status == 500
        assert message == "Internal server error"
        assert detail["kind"] == "unclassified"
        assert detail["type"] == "KeyError"

    def test_is_client_error(self):
        assert is_client_error(ClientInputError("x")) is True
        assert is_client_error(ParseError("x")) is True
        assert is_client_error(ParseError("x", upstream=True)) is False
        assert is_client_error(RemoteServiceError(service="hibob", message="x")) is False
        assert is_client_error(ValueError("x")) is False

    def test_error_response_body(self):
        response = error_response(ClientInputError("Missing application ID in the payload"), "req-2")

        body = json.loads(response["body"])
        assert response["statusCode"] == 400
        assert body == {
            "message": "Missing application ID in the payload",
            "error": {"kind": "client_input"},
            "request_id": "req-2",
        }


# ============================================================================
# Workflow
# ============================================================================

@pytest.fixture
def stub_pinpoint():
    pinpoint = MagicMock()
    pinpoint.fetch_application.return_value = ApplicantRecord(
        first_name="Jane",
        last_name="Doe",
        email="jane@x.com",
    )
    pinpoint.post_hired_comment.return_value = "c1"
    return pinpoint


@pytest.fixture
def stub_hibob():
    hibob = MagicMock()
    hibob.create_employee.return_value = EmployeeRecord(employee_id="emp1", email="jane@x.com")
    hibob.upload_document.return_value = {}
    return hibob


@pytest.fixture
def workflow(stub_pinpoint, stub_hibob, request_log, frozen_now):
    return OnboardingWorkflow(stub_pinpoint, stub_hibob, request_log, clock=lambda: frozen_now)


class TestOnboardingWorkflow:
    """Tests for OnboardingWorkflow sequencing."""

    def test_happy_path_without_cv(self, workflow, stub_pinpoint, stub_hibob, hired_event, frozen_now):
        result = workflow.run(hired_event)

        stub_pinpoint.fetch_application.assert_called_once_with("8863880")
        stub_hibob.create_employee.assert_called_once_with("Jane", "Doe", "jane@x.com")
        stub_hibob.upload_document.assert_not_called()
        stub_pinpoint.post_hired_comment.assert_called_once_with("8863880", "emp1")
        assert result.cv_uploaded is False
        assert result.comment_id == "c1"
        assert result.timestamp == frozen_now
        assert workflow.stage is WorkflowStage.COMPLETED

    def test_uploads_cv_when_present(self, workflow, stub_pinpoint, stub_hibob, hired_event):
        stub_pinpoint.fetch_application.return_value = ApplicantRecord(
            first_name="Jane",
            last_name="Doe",
            email="jane@x.com",
            resume_url="https://x.com/cv.pdf",
            resume_file_name="cv.pdf",
        )

        result = workflow.run(hired_event)

        stub_hibob.upload_document.assert_called_once_with("emp1", "https://x.com/cv.pdf", "cv.pdf")
        assert result.cv_uploaded is True

    @pytest.mark.parametrize(
        "error",
        [
            RemoteServiceError(service="hibob", message="Failed to upload", status=500),
            ClientInputError("Invalid document URL format"),
            RemoteServiceError(service="hibob", message="timed out", timed_out=True),
        ],
    )
    def test_cv_upload_failure_is_not_fatal(self, workflow, stub_pinpoint, stub_hibob, hired_event, error):
        stub_pinpoint.fetch_application.return_value = ApplicantRecord(
            email="jane@x.com",
            resume_url="https://x.com/cv.pdf",
            resume_file_name="cv.pdf",
        )
        stub_hibob.upload_document.side_effect = error

        result = workflow.run(hired_event)

        assert result.cv_uploaded is False
        stub_pinpoint.post_hired_comment.assert_called_once()
        assert workflow.stage is WorkflowStage.COMPLETED

    def test_invalid_event_makes_no_calls(self, workflow, stub_pinpoint, stub_hibob, api_gateway_event):
        with pytest.raises(ClientInputError):
            workflow.run(api_gateway_event({"event": "application_rejected"}))

        stub_pinpoint.fetch_application.assert_not_called()
        stub_hibob.create_employee.assert_not_called()
        assert workflow.stage is WorkflowStage.ERRORED

    def test_fetch_failure_stops_pipeline(self, workflow, stub_pinpoint, stub_hibob, hired_event):
        stub_pinpoint.fetch_application.side_effect = RemoteServiceError(service="pinpoint", message="x", status=404)

        with pytest.raises(RemoteServiceError):
            workflow.run(hired_event)

        stub_hibob.create_employee.assert_not_called()
        assert workflow.stage is WorkflowStage.ERRORED
        assert workflow.employee is None

    def test_exhaustion_posts_no_comment(self, workflow, stub_pinpoint, stub_hibob, hired_event):
        stub_hibob.create_employee.side_effect = ResourceExhaustedError(attempts=10)

        with pytest.raises(ResourceExhaustedError):
            workflow.run(hired_event)

        stub_pinpoint.post_hired_comment.assert_not_called()

    def test_comment_failure_leaves_orphaned_employee(self, workflow, stub_pinpoint, hired_event):
        stub_pinpoint.post_hired_comment.side_effect = RemoteServiceError(service="pinpoint", message="x", status=500)

        with pytest.raises(RemoteServiceError):
            workflow.run(hired_event)

        assert workflow.employee.employee_id == "emp1"
        assert workflow.stage is WorkflowStage.ERRORED

    def test_abort_goes_through_transition_table(self, workflow, stub_pinpoint, hired_event):
        stub_pinpoint.fetch_application.side_effect = RemoteServiceError(service="pinpoint", message="x", status=500)

        with patch(
            "lambdas.application_hired.workflow.validate_transition",
            wraps=validate_transition,
        ) as validate:
            with pytest.raises(RemoteServiceError):
                workflow.run(hired_event)

        stages = [(c.args[0], c.args[1]) for c in validate.call_args_list]
        assert stages[-1] == (WorkflowStage.VALIDATED, WorkflowStage.ERRORED)
        assert validate.call_args.kwargs["logger"] is not None


# ============================================================================
# Lambda Handler
# ============================================================================

class TestLambdaHandler:
    """Tests for lambda_handler."""

    def test_uses_context_request_id(self, hired_event):
        from lambdas.application_hired import handler

        with patch.object(handler, "process_hire_webhook", return_value={"statusCode": 200}) as process:
            handler.lambda_handler(hired_event, SimpleNamespace(aws_request_id="aws-req-123"))

        args = process.call_args.args
        assert args[0] is hired_event
        assert args[1] == "aws-req-123"
        assert args[2].pinpoint_api_key.get_secret_value() == "test-pinpoint-key"

    def test_defaults_request_id_without_context(self, hired_event):
        from lambdas.application_hired import handler

        with patch.object(handler, "process_hire_webhook", return_value={"statusCode": 200}) as process:
            handler.lambda_handler(hired_event, None)

        assert process.call_args.args[1] == "local"

    def test_bad_request_never_reaches_network(self, api_gateway_event):
        from lambdas.application_hired.handler import lambda_handler

        response = lambda_handler(api_gateway_event("{broken"), SimpleNamespace(aws_request_id="r"))

        body = json.loads(response["body"])
        assert response["statusCode"] == 400
        assert body["message"] == "Invalid JSON in request body"
        assert body["request_id"] == "r"
