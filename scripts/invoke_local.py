#!/usr/bin/env python3
"""
Local Invocation Script

Builds an API Gateway proxy event for a Pinpoint "application_hired"
webhook and runs the Lambda handler once in-process.

Usage:
    # Print the event that would be sent, without calling any API
    python scripts/invoke_local.py 8863880 --dry-run

    # Run against the APIs configured in .env.local / .env
    python scripts/invoke_local.py 8863880

    # Send a different event type to exercise validation
    python scripts/invoke_local.py 8863880 --event application_rejected

WARNING: a real run creates an employee in HiBob and comments on the
Pinpoint application. Point the base URLs at sandboxes first.
"""

import argparse
import json
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any
from uuid import uuid4

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import structlog

log = structlog.get_logger()


def build_api_gateway_event(
    application_id: str,
    event_type: str = "application_hired",
    job_id: str | None = None,
) -> dict[str, Any]:
    """API Gateway proxy event wrapping a Pinpoint webhook body."""
    data: dict[str, Any] = {"application": {"id": application_id}}
    if job_id:
        data["job"] = {"id": job_id}

    return {
        "httpMethod": "POST",
        "path": "/webhooks/pinpoint",
        "headers": {"Content-Type": "application/json"},
        "isBase64Encoded": False,
        "body": json.dumps({"event": event_type, "data": data}),
    }


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Invoke the application_hired Lambda handler locally",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("application_id", help="Pinpoint application id")
    parser.add_argument("--event", default="application_hired", help="Webhook event name")
    parser.add_argument("--job-id", default=None, help="Optional Pinpoint job id")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the generated event and exit",
    )
    args = parser.parse_args()

    event = build_api_gateway_event(args.application_id, args.event, args.job_id)

    if args.dry_run:
        print(json.dumps(event, indent=2))
        return 0

    from lambdas.application_hired.handler import lambda_handler

    context = SimpleNamespace(aws_request_id=f"local-{uuid4()}")
    log.info("invoking_handler", application_id=args.application_id, request_id=context.aws_request_id)

    response = lambda_handler(event, context)

    print(f"Status: {response['statusCode']}")
    print(json.dumps(json.loads(response["body"]), indent=2))
    return 0 if response["statusCode"] == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
