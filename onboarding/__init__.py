# Pinpoint to HiBob Onboarding Integration
"""
Shared infrastructure for the hired-candidate onboarding Lambda.

This package provides:
- Workflow stage machine (WorkflowStage, valid transitions)
- Pydantic models for the hire event and workflow records
- Pinpoint and HiBob API clients
- Configuration management
- Custom exceptions
"""

from onboarding.config import Settings, get_settings
from onboarding.exceptions import (
    ClientInputError,
    ErrorKind,
    InvalidStageTransitionError,
    OnboardingError,
    ParseError,
    RemoteServiceError,
    ResourceExhaustedError,
)
from onboarding.state_machine import VALID_TRANSITIONS, WorkflowStage, validate_transition

__all__ = [
    # Stage machine
    "WorkflowStage",
    "VALID_TRANSITIONS",
    "validate_transition",
    # Exceptions
    "ErrorKind",
    "OnboardingError",
    "ClientInputError",
    "ParseError",
    "RemoteServiceError",
    "ResourceExhaustedError",
    "InvalidStageTransitionError",
    # Config
    "Settings",
    "get_settings",
]
