"""
Custom Exceptions for CampusCore
================================

Use these instead of generic Exception so the store and controller
boundaries can tell local validation problems apart from remote failures.

Usage:
    from campuscore.core.exceptions import TransportError, RecordNotFoundError

    try:
        envelope = await api.update(record_id, fields)
    except TransportError as e:
        logger.warning(f"Update failed: {e}")
        return Failure(TRANSPORT_FAILURE_MESSAGE)
"""

from typing import Optional, Any, Dict


class CampusCoreError(Exception):
    """Base exception for all CampusCore errors"""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Validation Errors (local, never reach the network)
# ============================================

class ValidationError(CampusCoreError):
    """Draft or input validation failed"""

    def __init__(
        self,
        message: str = "Please fix the errors in the form",
        field: Optional[str] = None,
        errors: Optional[Dict[str, str]] = None
    ):
        details: Dict[str, Any] = {}
        if field:
            details["field"] = field
        if errors:
            details["errors"] = dict(errors)
        super().__init__(message, code="VALIDATION_ERROR", details=details)

    @property
    def errors(self) -> Dict[str, str]:
        return self.details.get("errors", {})


# ============================================
# Remote Errors
# ============================================

class TransportError(CampusCoreError):
    """Record service unreachable, timed out or failed with a server error"""

    def __init__(self, message: str = "Record service unavailable", status_code: Optional[int] = None):
        super().__init__(message, code="TRANSPORT_ERROR")
        if status_code is not None:
            self.details["status_code"] = status_code


class RecordTimeoutError(TransportError):
    """Record service request timed out"""

    def __init__(self, timeout_seconds: Optional[float] = None):
        super().__init__(
            f"Record service timed out after {timeout_seconds}s" if timeout_seconds
            else "Record service timed out"
        )
        self.code = "TRANSPORT_TIMEOUT"
        if timeout_seconds:
            self.details["timeout_seconds"] = timeout_seconds


class RecordNotFoundError(CampusCoreError):
    """Update or delete against an identity the service does not know"""

    def __init__(self, entity: str, record_id: Any):
        super().__init__(
            f"{entity} with ID '{record_id}' not found",
            code=f"{entity.upper()}_NOT_FOUND",
            details={"entity": entity, "record_id": record_id}
        )


class PartialAcceptanceError(CampusCoreError):
    """Service accepted a write but did not echo the affected record"""

    def __init__(self, entity: str, action: str):
        super().__init__(
            f"{entity} {action} accepted but record was not returned",
            code="PARTIAL_ACCEPTANCE",
            details={"entity": entity, "action": action}
        )


class EnvelopeError(CampusCoreError):
    """Service response did not match the expected envelope shape"""

    def __init__(self, message: str = "Malformed response from record service"):
        super().__init__(message, code="ENVELOPE_ERROR")


# ============================================
# Configuration Errors
# ============================================

class ConfigurationError(CampusCoreError):
    """Required settings are missing"""

    def __init__(self, setting: str):
        super().__init__(
            f"Setting '{setting}' is required",
            code="CONFIGURATION_ERROR",
            details={"setting": setting}
        )
