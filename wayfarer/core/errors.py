"""
Wayfarer - Custom Error Types
Structured exceptions for simulation errors with recovery hints.

Expected failures of the simulation itself (invalid plans, bad option
indices, interrupted journeys) are reported as typed results. These
exceptions cover caller mistakes at the service boundary.
"""
from typing import Dict, Any, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for the simulation core."""
    # General errors
    UNKNOWN = "UNKNOWN"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"

    # Travel errors
    TRAVEL_INVALID_PLAN = "TRAVEL_INVALID_PLAN"
    TRAVEL_NOT_PAUSED = "TRAVEL_NOT_PAUSED"
    TRAVEL_IN_PROGRESS = "TRAVEL_IN_PROGRESS"

    # Encounter errors
    ENCOUNTER_NOT_ACTIVE = "ENCOUNTER_NOT_ACTIVE"
    ENCOUNTER_TEMPLATE_MISSING = "ENCOUNTER_TEMPLATE_MISSING"
    ENCOUNTER_TEMPLATE_INVALID = "ENCOUNTER_TEMPLATE_INVALID"

    # Session errors
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"


class GameError(Exception):
    """
    Base exception for all simulation errors.

    Provides structured error information with:
    - Error code for programmatic handling
    - Human-readable message
    - Additional context details
    - Recovery hints for the client
    """

    def __init__(
        self,
        code: ErrorCode = ErrorCode.UNKNOWN,
        message: str = "An unexpected error occurred",
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
        recovery_hint: Optional[str] = None,
        http_status: int = 500
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint
        self.http_status = http_status

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for JSON response."""
        return {
            "success": False,
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
                "recoverable": self.recoverable,
                "recovery_hint": self.recovery_hint
            }
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


# =============================================================================
# Travel Errors
# =============================================================================

class TravelError(GameError):
    """Travel execution errors."""

    def __init__(
        self,
        code: ErrorCode = ErrorCode.TRAVEL_INVALID_PLAN,
        message: str = "Travel error",
        **kwargs
    ):
        kwargs.setdefault("http_status", 400)
        super().__init__(code=code, message=message, **kwargs)


class TravelNotPausedError(TravelError):
    """Raised when resuming a journey that is not waiting on an encounter."""

    def __init__(self, status: Optional[str] = None):
        details = {}
        if status:
            details["status"] = status
        super().__init__(
            code=ErrorCode.TRAVEL_NOT_PAUSED,
            message="Journey is not paused for an encounter",
            details=details,
            http_status=409,
            recovery_hint="Only a journey paused by an encounter can be resumed"
        )


class TravelInProgressError(TravelError):
    """Raised when starting a new journey while one is suspended."""

    def __init__(self):
        super().__init__(
            code=ErrorCode.TRAVEL_IN_PROGRESS,
            message="A journey is already in progress",
            http_status=409,
            recovery_hint="Resolve the active encounter and resume travel first"
        )


# =============================================================================
# Encounter Errors
# =============================================================================

class EncounterError(GameError):
    """Encounter runtime errors."""

    def __init__(
        self,
        code: ErrorCode = ErrorCode.ENCOUNTER_NOT_ACTIVE,
        message: str = "Encounter error",
        **kwargs
    ):
        kwargs.setdefault("http_status", 400)
        super().__init__(code=code, message=message, **kwargs)


class EncounterNotActiveError(EncounterError):
    """Raised when an encounter action is attempted with no active encounter."""

    def __init__(self):
        super().__init__(
            code=ErrorCode.ENCOUNTER_NOT_ACTIVE,
            message="No active encounter",
            http_status=409,
            recovery_hint="Travel until an encounter triggers"
        )


class TemplateMissingError(EncounterError):
    """Raised when restoring an instance whose template is not registered."""

    def __init__(self, template_id: Optional[str] = None):
        details = {}
        if template_id:
            details["template_id"] = template_id
        super().__init__(
            code=ErrorCode.ENCOUNTER_TEMPLATE_MISSING,
            message="Encounter template not registered",
            details=details,
            http_status=404,
            recovery_hint="Register the template before restoring the encounter"
        )


class TemplateInvalidError(EncounterError):
    """Raised when a template fails authoring-time validation."""

    def __init__(self, template_id: str, problems: Optional[list] = None):
        super().__init__(
            code=ErrorCode.ENCOUNTER_TEMPLATE_INVALID,
            message=f"Encounter template '{template_id}' is invalid",
            details={"template_id": template_id, "problems": problems or []},
            recoverable=False,
            recovery_hint="Fix the template's node references"
        )


# =============================================================================
# Session Errors
# =============================================================================

class SessionNotFoundError(GameError):
    """Raised when a travel session is not found."""

    def __init__(self, session_id: Optional[str] = None):
        details = {}
        if session_id:
            details["session_id"] = session_id
        super().__init__(
            code=ErrorCode.SESSION_NOT_FOUND,
            message="Travel session not found",
            details=details,
            http_status=404,
            recovery_hint="Create a new session"
        )


# =============================================================================
# Validation Error
# =============================================================================

class ValidationError(GameError):
    """Input validation errors."""

    def __init__(self, field: str, message: str, value: Any = None):
        details = {"field": field}
        if value is not None:
            details["value"] = str(value)
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            details=details,
            http_status=400,
            recovery_hint=f"Check the value for '{field}'"
        )
