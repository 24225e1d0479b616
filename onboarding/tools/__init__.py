# Shared Tools
"""
API clients for the two services the onboarding workflow talks to.
"""

from onboarding.tools.hibob import (
    MAX_EMAIL_ATTEMPTS,
    AttemptOutcome,
    HiBobClient,
    classify_creation_response,
    is_valid_document_url,
    suffixed_email,
)
from onboarding.tools.http import ServiceHttpClient, build_timeout
from onboarding.tools.pinpoint import (
    PinpointClient,
    build_comment_document,
    select_cv_attachment,
)

__all__ = [
    # HTTP
    "ServiceHttpClient",
    "build_timeout",
    # Pinpoint
    "PinpointClient",
    "build_comment_document",
    "select_cv_attachment",
    # HiBob
    "MAX_EMAIL_ATTEMPTS",
    "AttemptOutcome",
    "HiBobClient",
    "classify_creation_response",
    "is_valid_document_url",
    "suffixed_email",
]
