"""
API Gateway Responses

Builds proxy-integration responses and classifies failures into status
codes. Every body carries the invocation's request_id.
"""

import json
from typing import Any

from onboarding.exceptions import ErrorKind, OnboardingError
from onboarding.models.records import WorkflowResult

JSON_HEADERS = {"Content-Type": "application/json"}

SUCCESS_MESSAGE = "Employee successfully created in HiBob"
INTERNAL_ERROR_MESSAGE = "Internal server error"


def build_response(status_code: int, body: dict[str, Any], request_id: str) -> dict[str, Any]:
    """Wrap a JSON body in an API Gateway proxy response."""
    return {
        "statusCode": status_code,
        "headers": dict(JSON_HEADERS),
        "body": json.dumps({**body, "request_id": request_id}, default=str),
    }


def success_response(result: WorkflowResult, request_id: str) -> dict[str, Any]:
    return build_response(
        200,
        {
            "status": "success",
            "message": SUCCESS_MESSAGE,
            "data": result.to_response_data(),
            "timestamp": result.timestamp_iso,
        },
        request_id,
    )


def classify_error(error: Exception) -> tuple[int, str, dict[str, Any]]:
    """
    Map an exception to (status_code, message, error detail).

    Client input and inbound parse errors echo their own message. Everything
    else is reported as an internal error with the cause in the detail.
    """
    if isinstance(error, OnboardingError):
        status_code = error.status_code
        detail = error.to_detail()
        if status_code < 500:
            return status_code, error.message, detail
        detail["message"] = error.message
        return status_code, INTERNAL_ERROR_MESSAGE, detail

    return 500, INTERNAL_ERROR_MESSAGE, {
        "kind": "unclassified",
        "type": type(error).__name__,
        "message": str(error),
    }


def error_response(error: Exception, request_id: str) -> dict[str, Any]:
    status_code, message, detail = classify_error(error)
    return build_response(
        status_code,
        {"message": message, "error": detail},
        request_id,
    )


def is_client_error(error: Exception) -> bool:
    """True when the failure is attributable to the caller."""
    return (
        isinstance(error, OnboardingError)
        and error.kind in (ErrorKind.CLIENT_INPUT, ErrorKind.PARSE)
        and error.status_code < 500
    )
