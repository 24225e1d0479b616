"""
Custom Exceptions for the Hired-Candidate Onboarding Integration

Every failure raised by the workflow is an OnboardingError carrying an
ErrorKind tag, a message, and the context needed for logging. The Lambda
handler classifies these once into an HTTP status code and error body.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Classification tag for workflow failures."""

    CLIENT_INPUT = "client_input"
    PARSE = "parse"
    REMOTE_SERVICE = "remote_service"
    RESOURCE_EXHAUSTED = "resource_exhausted"
    INVALID_TRANSITION = "invalid_transition"


class OnboardingError(Exception):
    """Base exception for the onboarding integration."""

    kind: ErrorKind = ErrorKind.REMOTE_SERVICE
    status_code: int = 500

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message

    def to_detail(self) -> dict[str, Any]:
        """Error detail for the response body."""
        detail: dict[str, Any] = {"kind": self.kind.value}
        detail.update({k: v for k, v in self.context.items() if v is not None})
        return detail


@dataclass
class ClientInputError(OnboardingError):
    """Inbound request data is missing or malformed."""

    status: int = 400

    def __init__(self, message: str, status: int = 400, **details: Any) -> None:
        self.status = status
        super().__init__(message, **details)

    kind = ErrorKind.CLIENT_INPUT

    @property
    def status_code(self) -> int:  # type: ignore[override]
        return self.status


@dataclass
class ParseError(OnboardingError):
    """
    JSON could not be parsed or did not have the expected shape.

    Inbound parse failures are the caller's fault (400). Upstream parse
    failures are not, and map to 500.
    """

    upstream: bool = False

    def __init__(self, message: str, upstream: bool = False, **context: Any) -> None:
        self.upstream = upstream
        super().__init__(message, upstream=upstream, **context)

    kind = ErrorKind.PARSE

    @property
    def status_code(self) -> int:  # type: ignore[override]
        return 500 if self.upstream else 400


@dataclass
class RemoteServiceError(OnboardingError):
    """A remote API answered with a non-success status or could not be reached."""

    service: str
    status: int | None = None
    body: str | None = None
    timed_out: bool = False

    def __init__(
        self,
        service: str,
        message: str,
        status: int | None = None,
        body: str | None = None,
        timed_out: bool = False,
    ) -> None:
        self.service = service
        self.status = status
        self.body = body
        self.timed_out = timed_out
        super().__init__(
            message,
            service=service,
            status_code=status,
            timed_out=timed_out or None,
        )

    kind = ErrorKind.REMOTE_SERVICE


@dataclass
class ResourceExhaustedError(OnboardingError):
    """The email-conflict retry loop ran out of attempts."""

    attempts: int

    def __init__(self, attempts: int, last_email: str | None = None) -> None:
        self.attempts = attempts
        self.last_email = last_email
        super().__init__(
            "Exceeded max attempts to generate a unique email",
            attempts=attempts,
            last_email=last_email,
        )

    kind = ErrorKind.RESOURCE_EXHAUSTED


@dataclass
class InvalidStageTransitionError(OnboardingError):
    """Workflow attempted to move between stages in an illegal order."""

    current_stage: str
    new_stage: str
    allowed_transitions: list[str]

    def __init__(
        self,
        current_stage: str,
        new_stage: str,
        allowed_transitions: list[str],
    ) -> None:
        self.current_stage = current_stage
        self.new_stage = new_stage
        self.allowed_transitions = allowed_transitions
        super().__init__(
            f"Cannot transition from '{current_stage}' to '{new_stage}'. "
            f"Allowed transitions: {allowed_transitions}",
            current_stage=current_stage,
            new_stage=new_stage,
            allowed_transitions=allowed_transitions,
        )

    kind = ErrorKind.INVALID_TRANSITION
