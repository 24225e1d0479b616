"""
ApplicationHired Lambda Handler

Main entry point for the Pinpoint "application_hired" webhook.
Creates the hired candidate as a HiBob employee and confirms back on the
Pinpoint application.

Trigger: API Gateway (HTTP proxy integration) receiving the Pinpoint webhook
Output: HiBob employee (+ shared CV document), Pinpoint comment

Flow:
1. Parse and validate the webhook body
2. Fetch candidate and attachments from Pinpoint
3. Create employee in HiBob, suffixing the email on conflicts
4. Upload the CV to HiBob if present (non-fatal)
5. Post a comment with the employee id to the Pinpoint application
6. Return a JSON summary

Known limitation: the webhook carries no idempotency key, so a redelivered
event creates a second employee.
"""

import logging
from typing import Any

import httpx
import structlog

from lambdas.application_hired.responses import error_response, is_client_error, success_response
from lambdas.application_hired.workflow import OnboardingWorkflow
from onboarding.config import Settings, get_settings
from onboarding.exceptions import OnboardingError
from onboarding.tools.hibob import HiBobClient
from onboarding.tools.pinpoint import PinpointClient

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

log = structlog.get_logger()


def process_hire_webhook(
    event: dict[str, Any],
    request_id: str,
    settings: Settings,
    transport: httpx.BaseTransport | None = None,
) -> dict[str, Any]:
    """
    Run one webhook delivery end to end and build the proxy response.

    Args:
        event: API Gateway proxy event
        request_id: Correlation id echoed in logs and the response body
        settings: Process-wide settings
        transport: Optional httpx transport shared by both API clients

    Returns:
        Response dict with statusCode, headers and JSON body
    """
    request_log = log.bind(request_id=request_id)
    request_log.info("processing_hire_webhook")

    pinpoint = PinpointClient(settings, request_log, transport=transport)
    hibob = HiBobClient(settings, request_log, transport=transport)
    workflow = OnboardingWorkflow(pinpoint, hibob, request_log)

    try:
        result = workflow.run(event)
    except OnboardingError as e:
        if is_client_error(e):
            request_log.warning("client_error", error=str(e), status_code=e.status_code)
        else:
            request_log.error(
                "hire_webhook_failed",
                error=str(e),
                error_kind=e.kind.value,
                stage=workflow.stage.value,
            )
        return error_response(e, request_id)
    except Exception as e:
        request_log.error("hire_webhook_failed", error=str(e), exc_info=True)
        return error_response(e, request_id)
    finally:
        pinpoint.close()
        hibob.close()

    return success_response(result, request_id)


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    AWS Lambda handler for the Pinpoint hire webhook.

    Args:
        event: API Gateway proxy event
        context: Lambda context

    Returns:
        API Gateway proxy response
    """
    request_id = getattr(context, "aws_request_id", "local")
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level)

    return process_hire_webhook(event, request_id, settings)
