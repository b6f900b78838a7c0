"""Discriminated outcome returned by the orchestrators.

An orchestrator call ends in exactly one of two states: ``Success`` holding
the fully built value, or ``Failure`` holding an error kind. Callers switch
on ``outcome.ok`` (or ``isinstance``) instead of threading callbacks.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar, Union

T = TypeVar("T")


class AnalysisErrorKind(str, Enum):
    """Every failure a user can see, each with one retry-oriented message."""

    ENTITLEMENT_EXHAUSTED = "ENTITLEMENT_EXHAUSTED"
    IMAGE_TOO_LARGE = "IMAGE_TOO_LARGE"
    UNSUPPORTED_IMAGE_TYPE = "UNSUPPORTED_IMAGE_TYPE"
    CLASSIFICATION_FAILED = "CLASSIFICATION_FAILED"
    SEVERITY_ASSESSMENT_FAILED = "SEVERITY_ASSESSMENT_FAILED"
    REMEDY_GENERATION_FAILED = "REMEDY_GENERATION_FAILED"
    INGREDIENT_READ_FAILED = "INGREDIENT_READ_FAILED"
    SUITABILITY_CHECK_FAILED = "SUITABILITY_CHECK_FAILED"
    FOLLOW_UP_FAILED = "FOLLOW_UP_FAILED"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    PROFILE_UPDATE_FAILED = "PROFILE_UPDATE_FAILED"
    PROFILE_UNAVAILABLE = "PROFILE_UNAVAILABLE"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"

    @property
    def user_message(self) -> str:
        return _USER_MESSAGES[self]


_ANALYSIS_RETRY = "An unexpected error occurred during the analysis. Please try again."
_INGREDIENT_RETRY = "Could not read the ingredients. Please try again with a clearer image."

_USER_MESSAGES = {
    AnalysisErrorKind.ENTITLEMENT_EXHAUSTED: "No trials remaining. Please upgrade to continue.",
    AnalysisErrorKind.IMAGE_TOO_LARGE: "Image is too large. Please upload a smaller image.",
    AnalysisErrorKind.UNSUPPORTED_IMAGE_TYPE: (
        "Unsupported image format. Please upload a JPEG, PNG, GIF, BMP or TIFF image."
    ),
    AnalysisErrorKind.CLASSIFICATION_FAILED: "Could not classify the image. Please try again.",
    AnalysisErrorKind.SEVERITY_ASSESSMENT_FAILED: _ANALYSIS_RETRY,
    AnalysisErrorKind.REMEDY_GENERATION_FAILED: _ANALYSIS_RETRY,
    AnalysisErrorKind.INGREDIENT_READ_FAILED: _INGREDIENT_RETRY,
    AnalysisErrorKind.SUITABILITY_CHECK_FAILED: _INGREDIENT_RETRY,
    AnalysisErrorKind.FOLLOW_UP_FAILED: (
        "I'm sorry, but I encountered an error and can't respond right now. "
        "Please try again later."
    ),
    AnalysisErrorKind.PROFILE_NOT_FOUND: "Your profile could not be loaded. Please sign in again.",
    AnalysisErrorKind.PROFILE_UPDATE_FAILED: (
        "We could not record this analysis. Please try again."
    ),
    AnalysisErrorKind.PROFILE_UNAVAILABLE: (
        "Your profile is temporarily unavailable. Please try again in a moment."
    ),
    AnalysisErrorKind.UNEXPECTED_ERROR: "An unexpected error occurred. Please try again.",
}


@dataclass(frozen=True)
class Success(Generic[T]):
    """Completed operation carrying its value."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Failed operation.

    Attributes:
        kind: Error category shown to the user
        detail: Internal description for logs (never shown to the user)
    """

    kind: AnalysisErrorKind
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return self.kind.user_message


Outcome = Union[Success[T], Failure]
