"""
HiBob Client

Creates employee records and attaches shared documents in HiBob.

Employee creation is the only retried operation in the integration: when
HiBob rejects the address as already registered, the request is re-sent
with a numbered address (jane-1@x.com, jane-2@x.com, ...) until it is
accepted or MAX_EMAIL_ATTEMPTS creation calls have been made.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable
from urllib.parse import urlparse

import httpx
import structlog

from onboarding.config import Settings
from onboarding.exceptions import ClientInputError, ParseError, ResourceExhaustedError
from onboarding.models.records import EmployeeRecord
from onboarding.tools.http import (
    MAX_ERROR_BODY_CHARS,
    ServiceHttpClient,
    parse_json_body,
    raise_for_remote_status,
    remote_error,
)

SERVICE_NAME = "hibob"

MAX_EMAIL_ATTEMPTS = 10

# Validation key HiBob returns when the email is already registered
EMAIL_EXISTS_MARKER = "validations.email.alreadyexists"
EMAIL_CONFLICT_STATUSES = frozenset({400, 409})

ALLOWED_DOCUMENT_SCHEMES = frozenset({"http", "https"})


class AttemptOutcome(str, Enum):
    """Classification of a single employee-creation response."""

    CREATED = "created"
    EMAIL_CONFLICT = "email_conflict"
    FAILED = "failed"


@dataclass
class CreationAttempt:
    """One POST /people call and how it was classified."""

    number: int
    email: str
    outcome: AttemptOutcome
    response: httpx.Response


def classify_creation_response(response: httpx.Response) -> AttemptOutcome:
    """Map a POST /people response to an AttemptOutcome."""
    if response.is_success:
        return AttemptOutcome.CREATED
    if response.status_code in EMAIL_CONFLICT_STATUSES and EMAIL_EXISTS_MARKER in response.text:
        return AttemptOutcome.EMAIL_CONFLICT
    return AttemptOutcome.FAILED


def suffixed_email(email: str, suffix: int) -> str:
    """
    Derive the disambiguated address for a retry.

    suffixed_email("jane@x.com", 2) -> "jane-2@x.com"
    """
    local_part, _, domain = email.rpartition("@")
    return f"{local_part}-{suffix}@{domain}"


def is_valid_document_url(url: str | None) -> bool:
    """True for absolute http(s) URLs with a host."""
    if not url or any(c.isspace() for c in url):
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme.lower() in ALLOWED_DOCUMENT_SCHEMES and bool(parsed.netloc)


def _tomorrow_utc() -> date:
    return (datetime.now(timezone.utc) + timedelta(days=1)).date()


class HiBobClient:
    """Employee provisioner and document uploader for HiBob."""

    def __init__(
        self,
        settings: Settings,
        log: structlog.stdlib.BoundLogger,
        transport: httpx.BaseTransport | None = None,
        start_date_provider: Callable[[], date] = _tomorrow_utc,
    ):
        self.log = log
        self.default_site = settings.hibob_default_site
        self._start_date_provider = start_date_provider
        self._http = ServiceHttpClient(
            service=SERVICE_NAME,
            base_url=settings.hibob_api_base_url,
            settings=settings,
            log=log,
            headers={
                **settings.hibob_headers,
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def _employee_body(
        self,
        first_name: str | None,
        last_name: str | None,
        email: str,
        start_date: date,
    ) -> dict[str, Any]:
        return {
            "work": {
                "site": self.default_site,
                "startDate": start_date.isoformat(),
            },
            "firstName": first_name,
            "surname": last_name,
            "email": email,
        }

    def _attempt_creation(self, number: int, body: dict[str, Any]) -> CreationAttempt:
        response = self._http.request("POST", "/people", json_body=body)
        return CreationAttempt(
            number=number,
            email=body["email"],
            outcome=classify_creation_response(response),
            response=response,
        )

    def create_employee(
        self,
        first_name: str | None,
        last_name: str | None,
        email: str,
    ) -> EmployeeRecord:
        """
        Create an employee starting tomorrow at the default site.

        Args:
            first_name: Candidate first name
            last_name: Candidate surname
            email: Preferred work email; suffixed on conflict

        Returns:
            EmployeeRecord carrying the email that was finally accepted

        Raises:
            RemoteServiceError: Any non-conflict failure response
            ResourceExhaustedError: Every attempt hit an email conflict
            ParseError: Success response without an employee id
        """
        start_date = self._start_date_provider()
        candidate_email = email

        for number in range(1, MAX_EMAIL_ATTEMPTS + 1):
            self.log.info(
                "creating_employee",
                attempt=number,
                email=candidate_email,
                start_date=start_date.isoformat(),
            )
            attempt = self._attempt_creation(
                number,
                self._employee_body(first_name, last_name, candidate_email, start_date),
            )

            if attempt.outcome is AttemptOutcome.CREATED:
                return self._employee_from_response(attempt)

            if attempt.outcome is AttemptOutcome.FAILED:
                self.log.error(
                    "employee_creation_failed",
                    attempt=number,
                    status_code=attempt.response.status_code,
                )
                raise remote_error(attempt.response, SERVICE_NAME, "create employee in HiBob")

            if number == MAX_EMAIL_ATTEMPTS:
                break

            # Email conflict: next address uses the next suffix
            candidate_email = suffixed_email(email, number)
            self.log.warning(
                "email_conflict_retrying",
                attempt=number,
                rejected_email=attempt.email,
                next_email=candidate_email,
                max_attempts=MAX_EMAIL_ATTEMPTS,
            )

        self.log.error("email_conflict_attempts_exhausted", attempts=MAX_EMAIL_ATTEMPTS)
        raise ResourceExhaustedError(attempts=MAX_EMAIL_ATTEMPTS, last_email=attempt.email)

    def _employee_from_response(self, attempt: CreationAttempt) -> EmployeeRecord:
        payload = parse_json_body(attempt.response, SERVICE_NAME)
        employee_id = payload.get("id") if isinstance(payload, dict) else None
        if employee_id is None or employee_id == "":
            raise ParseError(
                "HiBob employee response has no id",
                upstream=True,
                service=SERVICE_NAME,
                body=attempt.response.text[:MAX_ERROR_BODY_CHARS],
            )

        self.log.info(
            "employee_created",
            employee_id=str(employee_id),
            email=attempt.email,
            attempts=attempt.number,
        )
        return EmployeeRecord(
            employee_id=str(employee_id),
            email=attempt.email,
            raw_fields=payload,
        )

    def upload_document(
        self,
        employee_id: str,
        document_url: str,
        document_name: str,
    ) -> dict[str, Any]:
        """
        Attach a document to the employee's shared folder by URL.

        The URL is checked before any request is made.

        Returns:
            Parsed HiBob acknowledgment (empty dict for an empty body)

        Raises:
            ClientInputError: document_url is not an http(s) URL
            RemoteServiceError: Non-2xx response or transport failure
        """
        if not is_valid_document_url(document_url):
            raise ClientInputError(
                "Invalid document URL format",
                status=400,
                document_url=document_url,
            )

        self.log.info(
            "uploading_document",
            employee_id=employee_id,
            document_name=document_name,
        )
        response = self._http.request(
            "POST",
            f"/docs/people/{employee_id}/shared",
            json_body={
                "documentName": document_name,
                "documentUrl": document_url,
            },
        )
        raise_for_remote_status(response, SERVICE_NAME, "upload document to HiBob")

        acknowledgment = parse_json_body(response, SERVICE_NAME) if response.content else {}
        self.log.info("document_uploaded", employee_id=employee_id)
        return acknowledgment if isinstance(acknowledgment, dict) else {"result": acknowledgment}
