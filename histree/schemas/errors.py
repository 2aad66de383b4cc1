"""
Schemas
File: errors.py

Purpose: Error taxonomy for history tree verification.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Schema & Serialization Errors
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"

    # Verification Errors
    LEAF_MISMATCH = "LEAF_MISMATCH"
    INCLUSION_MISMATCH = "INCLUSION_MISMATCH"
    CONSISTENCY_MISMATCH = "CONSISTENCY_MISMATCH"
    MALFORMED_ANCHOR_DATA = "MALFORMED_ANCHOR_DATA"


class VerificationFailure(str, Enum):
    """Sub-reason of a failed verification."""

    LEAF_MISMATCH = "LeafMismatch"
    INCLUSION_MISMATCH = "InclusionMismatch"
    CONSISTENCY_MISMATCH = "ConsistencyMismatch"
    MALFORMED_ANCHOR_DATA = "MalformedAnchorData"

    @property
    def code(self) -> str:
        return _FAILURE_CODES[self]


_FAILURE_CODES: dict[VerificationFailure, str] = {
    VerificationFailure.LEAF_MISMATCH: ErrorCodes.LEAF_MISMATCH,
    VerificationFailure.INCLUSION_MISMATCH: ErrorCodes.INCLUSION_MISMATCH,
    VerificationFailure.CONSISTENCY_MISMATCH: ErrorCodes.CONSISTENCY_MISMATCH,
    VerificationFailure.MALFORMED_ANCHOR_DATA: ErrorCodes.MALFORMED_ANCHOR_DATA,
}


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class HistreeError(BaseModel):
    """
    Base error model for structured error communication.

    Used for passing errors between modules without exceptions,
    e.g. inside a VerificationResult.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INCLUSION_MISMATCH],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    reason: VerificationFailure | None = Field(
        default=None,
        description="Verification sub-reason, when the error is a verification failure",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "HistreeException":
        """Convert this error model to a raisable exception."""
        if self.reason is not None:
            return _EXCEPTION_TYPES[self.reason](self.message, details=self.details)
        return HistreeException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class HistreeException(Exception):
    """
    Base exception for all histree errors.

    Carries structured error information and can be converted to a
    HistreeError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "HISTREE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> HistreeError:
        """Convert this exception to a HistreeError model."""
        return HistreeError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CanonicalizationException(HistreeException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
            retryable=False,
        )


class VerificationException(HistreeException):
    """
    Base exception for failed verifications.

    Verification failures are terminal and never retryable: the entry
    must not be accepted and the trust anchor must not be advanced.
    """

    reason: VerificationFailure

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=self.reason.code,
            details=details,
            retryable=False,
        )

    def to_error_model(self) -> HistreeError:
        error = super().to_error_model()
        error.reason = self.reason
        return error


class LeafMismatchException(VerificationException):
    """The recomputed entry digest does not match the proof's leaf digest."""

    reason = VerificationFailure.LEAF_MISMATCH


class InclusionMismatchException(VerificationException):
    """The inclusion path does not reconstruct the claimed root."""

    reason = VerificationFailure.INCLUSION_MISMATCH


class ConsistencyMismatchException(VerificationException):
    """The new tree is not shown to be an append-only extension of the anchor."""

    reason = VerificationFailure.CONSISTENCY_MISMATCH


class MalformedAnchorDataException(VerificationException):
    """A persisted trust anchor blob cannot be decoded."""

    reason = VerificationFailure.MALFORMED_ANCHOR_DATA


_EXCEPTION_TYPES: dict[VerificationFailure, type[VerificationException]] = {
    VerificationFailure.LEAF_MISMATCH: LeafMismatchException,
    VerificationFailure.INCLUSION_MISMATCH: InclusionMismatchException,
    VerificationFailure.CONSISTENCY_MISMATCH: ConsistencyMismatchException,
    VerificationFailure.MALFORMED_ANCHOR_DATA: MalformedAnchorDataException,
}
