"""
ApplicationHired Lambda

Onboards candidates marked as hired in Pinpoint into HiBob.

Flow:
    Pinpoint webhook (application_hired)
    → API Gateway
    → This Lambda
    → Pinpoint: GET application  → HiBob: POST people
    → HiBob: POST shared document (optional)
    → Pinpoint: POST comment
"""

from lambdas.application_hired.event_parser import extract_body, parse_hire_event
from lambdas.application_hired.handler import lambda_handler, process_hire_webhook
from lambdas.application_hired.responses import classify_error
from lambdas.application_hired.workflow import OnboardingWorkflow

__all__ = [
    "OnboardingWorkflow",
    "classify_error",
    "extract_body",
    "lambda_handler",
    "parse_hire_event",
    "process_hire_webhook",
]
