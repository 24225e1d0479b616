"""
Hire Event Parser

Turns an API Gateway proxy event carrying a Pinpoint webhook into a
validated HireEvent. Nothing here touches the network.
"""

import base64
import binascii
import json
from typing import Any

from pydantic import ValidationError

from onboarding.exceptions import ClientInputError, ParseError
from onboarding.models.events import HIRED_EVENT_TYPE, HireEvent


def _dig(payload: Any, *keys: str) -> Any:
    """Walk nested dicts, returning None as soon as a level is missing."""
    current = payload
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def extract_body(event: dict[str, Any]) -> str:
    """
    Get the raw request body from an API Gateway proxy event.

    Direct invocations that pass the webhook payload itself as the event
    are accepted too (used by scripts/invoke_local.py and the console
    test button).

    Raises:
        ClientInputError: Body missing or empty
        ParseError: isBase64Encoded body that is not valid base64/UTF-8
    """
    if "body" not in event and "event" in event:
        return json.dumps(event)

    body = event.get("body")
    if body is None or body == "":
        raise ClientInputError("Missing request body", status=400)

    if isinstance(body, dict):
        return json.dumps(body)

    if event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ParseError("Invalid base64 request body", reason=str(e)) from e
        if not body:
            raise ClientInputError("Missing request body", status=400)

    return body


def parse_hire_event(body: str) -> HireEvent:
    """
    Parse and validate the webhook body.

    Raises:
        ParseError: Body is not a JSON object
        ClientInputError: Wrong event type or missing application id
    """
    try:
        payload = json.loads(body)
    except json.JSONDecodeError as e:
        raise ParseError("Invalid JSON in request body", reason=str(e)) from e

    if not isinstance(payload, dict):
        raise ParseError(
            "Invalid JSON in request body",
            reason=f"expected an object, got {type(payload).__name__}",
        )

    event_type = payload.get("event")
    if event_type != HIRED_EVENT_TYPE:
        raise ClientInputError(f"Invalid event type: {event_type}", status=400)

    application_id = _dig(payload, "data", "application", "id")
    if application_id is None or (isinstance(application_id, str) and not application_id.strip()):
        raise ClientInputError("Missing application ID in the payload", status=400)

    try:
        return HireEvent(
            event_type=event_type,
            application_id=application_id,
            job_id=_dig(payload, "data", "job", "id"),
        )
    except ValidationError as e:
        raise ClientInputError(
            "Invalid hire event payload",
            status=400,
            errors=[err["msg"] for err in e.errors()],
        ) from e
