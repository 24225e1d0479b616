"""
Pinpoint Client

Reads hired applications (with their attachments) and writes the
confirmation comment back onto the application.
"""

from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from onboarding.config import Settings
from onboarding.exceptions import ParseError
from onboarding.models.records import ApplicantRecord
from onboarding.tools.http import ServiceHttpClient, parse_json_body, raise_for_remote_status

SERVICE_NAME = "pinpoint"

# Attachment context Pinpoint uses for the candidate's PDF CV
CV_ATTACHMENT_CONTEXT = "pdf_cv"

JSON_API_CONTENT_TYPE = "application/vnd.api+json"


def select_cv_attachment(attachments: list[dict[str, Any]] | None) -> dict[str, Any] | None:
    """Return the first attachment tagged as a PDF CV, if any."""
    for attachment in attachments or []:
        if isinstance(attachment, dict) and attachment.get("context") == CV_ATTACHMENT_CONTEXT:
            return attachment
    return None


def build_comment_document(application_id: str, employee_id: str) -> dict[str, Any]:
    """JSON:API document attaching a comment to an application."""
    return {
        "data": {
            "type": "comments",
            "attributes": {
                "body_text": f"Record created with ID: {employee_id}",
            },
            "relationships": {
                "commentable": {
                    "data": {
                        "type": "applications",
                        "id": str(application_id),
                    }
                }
            },
        }
    }


class PinpointClient:
    """Applicant data fetcher and acknowledgment writer for Pinpoint."""

    def __init__(
        self,
        settings: Settings,
        log: structlog.stdlib.BoundLogger,
        transport: httpx.BaseTransport | None = None,
    ):
        self.log = log
        self._http = ServiceHttpClient(
            service=SERVICE_NAME,
            base_url=settings.pinpoint_api_base_url,
            settings=settings,
            log=log,
            headers=settings.pinpoint_headers,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def fetch_application(self, application_id: str) -> ApplicantRecord:
        """
        Fetch an application and normalize the candidate's details.

        Args:
            application_id: Pinpoint application identifier

        Returns:
            ApplicantRecord, with the résumé pair set when a PDF CV is attached

        Raises:
            RemoteServiceError: Non-2xx response or transport failure
            ParseError: Response missing data.attributes or a usable email
        """
        self.log.info("fetching_application", application_id=application_id)

        response = self._http.request(
            "GET",
            f"/applications/{application_id}",
            params={"extra_fields[applications]": "attachments"},
            headers={"Content-Type": "application/json"},
        )
        raise_for_remote_status(response, SERVICE_NAME, "fetch application")

        payload = parse_json_body(response, SERVICE_NAME)
        data = payload.get("data") if isinstance(payload, dict) else None
        attributes = data.get("attributes") if isinstance(data, dict) else None
        if not isinstance(attributes, dict):
            raise ParseError(
                "Invalid response format from Pinpoint API",
                upstream=True,
                service=SERVICE_NAME,
            )

        cv = select_cv_attachment(attributes.get("attachments"))

        try:
            applicant = ApplicantRecord(
                first_name=attributes.get("first_name"),
                last_name=attributes.get("last_name"),
                email=attributes.get("email") or "",
                resume_url=cv.get("url") if cv else None,
                resume_file_name=cv.get("filename") if cv else None,
            )
        except ValidationError as e:
            raise ParseError(
                "Invalid applicant data in Pinpoint response",
                upstream=True,
                service=SERVICE_NAME,
                errors=[err["msg"] for err in e.errors()],
            ) from e

        self.log.info(
            "application_fetched",
            application_id=application_id,
            has_resume=applicant.has_resume,
        )
        return applicant

    def post_hired_comment(self, application_id: str, employee_id: str) -> str:
        """
        Comment on the application with the new HiBob employee id.

        Returns:
            Identifier of the created comment

        Raises:
            RemoteServiceError: Non-2xx response or transport failure
            ParseError: Response has no data.id
        """
        self.log.info(
            "posting_comment",
            application_id=application_id,
            employee_id=employee_id,
        )

        response = self._http.request(
            "POST",
            "/comments",
            json_body=build_comment_document(application_id, employee_id),
            headers={
                "Content-Type": JSON_API_CONTENT_TYPE,
                "Accept": JSON_API_CONTENT_TYPE,
            },
        )
        raise_for_remote_status(response, SERVICE_NAME, "post comment to Pinpoint")

        payload = parse_json_body(response, SERVICE_NAME)
        data = payload.get("data") if isinstance(payload, dict) else None
        comment_id = data.get("id") if isinstance(data, dict) else None
        if comment_id is None or comment_id == "":
            raise ParseError(
                "Pinpoint comment response has no id",
                upstream=True,
                service=SERVICE_NAME,
            )

        self.log.info(
            "comment_posted",
            application_id=application_id,
            comment_id=str(comment_id),
        )
        return str(comment_id)
