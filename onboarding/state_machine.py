"""
Workflow Stage Machine

Defines the stages a single hire-event invocation passes through and the
transitions allowed between them.
"""

from enum import Enum
from typing import Final

import structlog

from onboarding.exceptions import InvalidStageTransitionError

log = structlog.get_logger()


class WorkflowStage(str, Enum):
    """
    Stage of one onboarding invocation.

    COMPLETED and ERRORED are terminal; ERRORED is reachable from every
    other non-terminal stage.
    """

    RECEIVED = "RECEIVED"
    """Raw request accepted, nothing inspected yet."""

    VALIDATED = "VALIDATED"
    """Body parsed and hire event validated."""

    FETCHED = "FETCHED"
    """Applicant data retrieved from Pinpoint."""

    PROVISIONED = "PROVISIONED"
    """Employee record created in HiBob."""

    UPLOAD_ATTEMPTED = "UPLOAD_ATTEMPTED"
    """Résumé upload was tried (successfully or not)."""

    UPLOAD_SKIPPED = "UPLOAD_SKIPPED"
    """Applicant had no résumé attached."""

    ACKNOWLEDGED = "ACKNOWLEDGED"
    """Confirmation comment posted back to Pinpoint."""

    COMPLETED = "COMPLETED"
    """Response assembled."""

    ERRORED = "ERRORED"
    """Invocation aborted by an error."""

    @property
    def is_terminal(self) -> bool:
        """Check if this is a terminal stage (no outgoing transitions)."""
        return self in TERMINAL_STAGES


TERMINAL_STAGES: Final[frozenset[WorkflowStage]] = frozenset({
    WorkflowStage.COMPLETED,
    WorkflowStage.ERRORED,
})

VALID_TRANSITIONS: Final[dict[WorkflowStage, frozenset[WorkflowStage]]] = {
    WorkflowStage.RECEIVED: frozenset({
        WorkflowStage.VALIDATED,
        WorkflowStage.ERRORED,
    }),
    WorkflowStage.VALIDATED: frozenset({
        WorkflowStage.FETCHED,
        WorkflowStage.ERRORED,
    }),
    WorkflowStage.FETCHED: frozenset({
        WorkflowStage.PROVISIONED,
        WorkflowStage.ERRORED,
    }),
    WorkflowStage.PROVISIONED: frozenset({
        WorkflowStage.UPLOAD_ATTEMPTED,
        WorkflowStage.UPLOAD_SKIPPED,
        WorkflowStage.ERRORED,
    }),
    WorkflowStage.UPLOAD_ATTEMPTED: frozenset({
        WorkflowStage.ACKNOWLEDGED,
        WorkflowStage.ERRORED,
    }),
    WorkflowStage.UPLOAD_SKIPPED: frozenset({
        WorkflowStage.ACKNOWLEDGED,
        WorkflowStage.ERRORED,
    }),
    WorkflowStage.ACKNOWLEDGED: frozenset({
        WorkflowStage.COMPLETED,
        WorkflowStage.ERRORED,
    }),
    WorkflowStage.COMPLETED: frozenset(),  # Terminal
    WorkflowStage.ERRORED: frozenset(),    # Terminal
}


def validate_transition(
    current_stage: WorkflowStage,
    new_stage: WorkflowStage,
    *,
    raise_on_invalid: bool = True,
    logger: structlog.stdlib.BoundLogger | None = None,
) -> bool:
    """
    Validate that a stage transition is allowed.

    Args:
        current_stage: Stage the workflow is in
        new_stage: Desired next stage
        raise_on_invalid: If True, raise exception on invalid transition
        logger: Invocation-scoped logger; falls back to the module logger

    Returns:
        True if transition is valid

    Raises:
        InvalidStageTransitionError: If transition is invalid and raise_on_invalid=True
    """
    allowed = VALID_TRANSITIONS.get(current_stage, frozenset())
    is_valid = new_stage in allowed

    if not is_valid and raise_on_invalid:
        (logger or log).warning(
            "invalid_stage_transition",
            current_stage=current_stage.value,
            new_stage=new_stage.value,
            allowed_transitions=sorted(s.value for s in allowed),
        )
        raise InvalidStageTransitionError(
            current_stage=current_stage.value,
            new_stage=new_stage.value,
            allowed_transitions=sorted(s.value for s in allowed),
        )

    return is_valid
