"""GraphQL types for SkinWise.

Output types are built from domain objects with ``from_domain``;
failures travel as payloads (``success=false``, ``errorKind``, ``message``).
"""

from typing import List, Optional

import strawberry

from skinwise.domain.analysis.core.entities.analysis_result import AnalysisResult
from skinwise.domain.analysis.core.entities.remedy import RemedyItem
from skinwise.domain.conversation.core.entities.conversation import ConversationTurn
from skinwise.domain.conversation.core.services.diagnosis_context import (
    build_diagnosis_context,
)
from skinwise.domain.entitlement.core.entities.entitlement_state import EntitlementState
from skinwise.domain.ingredients.core.entities.ingredient import (
    IngredientReport,
    SuitabilityReport,
)
from skinwise.domain.shared.outcome import Failure

# ============================================
# Output types
# ============================================


@strawberry.type
class EntitlementType:
    """Usage metering state.

    Examples:
        query {
          entitlement(userId: "auth0|123") { trialCount hasPaid unlimited }
        }
    """

    trial_count: Optional[int]
    has_paid: bool
    unlimited: bool

    @staticmethod
    def from_domain(state: EntitlementState) -> "EntitlementType":
        return EntitlementType(
            trial_count=state.trial_count,
            has_paid=state.has_paid,
            unlimited=state.is_unlimited,
        )


@strawberry.type
class RemedyItemType:
    title: str
    description: str

    @staticmethod
    def from_domain(item: RemedyItem) -> "RemedyItemType":
        return RemedyItemType(title=item.title, description=item.description)


@strawberry.type
class DailyRoutineType:
    am: List[str]
    pm: List[str]


@strawberry.type
class AnalysisResultType:
    """Completed skin analysis.

    ``diagnosisContext`` is the string to send back with followUp.
    """

    condition: str
    severity: str
    remedies: List[RemedyItemType]
    routine: DailyRoutineType
    lifestyle: List[RemedyItemType]
    remaining_trials: Optional[int]
    diagnosis_context: str

    @staticmethod
    def from_domain(result: AnalysisResult) -> "AnalysisResultType":
        bundle = result.remedies
        return AnalysisResultType(
            condition=result.classification.label,
            severity=result.severity.value,
            remedies=[RemedyItemType.from_domain(r) for r in bundle.remedies],
            routine=DailyRoutineType(am=list(bundle.routine.am), pm=list(bundle.routine.pm)),
            lifestyle=[RemedyItemType.from_domain(r) for r in bundle.lifestyle],
            remaining_trials=result.remaining_trials,
            diagnosis_context=build_diagnosis_context(result),
        )


@strawberry.type
class IngredientType:
    name: str
    short_description: str
    is_beneficial: bool
    is_irritant: bool


@strawberry.type
class IngredientReportType:
    ingredients: List[IngredientType]
    summary: str

    @staticmethod
    def from_domain(report: IngredientReport) -> "IngredientReportType":
        return IngredientReportType(
            ingredients=[
                IngredientType(
                    name=i.name,
                    short_description=i.short_description,
                    is_beneficial=i.is_beneficial,
                    is_irritant=i.is_irritant,
                )
                for i in report.ingredients
            ],
            summary=report.summary,
        )


@strawberry.type
class IngredientAnalysisType:
    name: str
    is_helpful: bool
    is_harmful: bool
    reason: str


@strawberry.type
class SuitabilityReportType:
    is_good_match: bool
    summary: str
    ingredient_analyses: List[IngredientAnalysisType]

    @staticmethod
    def from_domain(report: SuitabilityReport) -> "SuitabilityReportType":
        return SuitabilityReportType(
            is_good_match=report.is_good_match,
            summary=report.summary,
            ingredient_analyses=[
                IngredientAnalysisType(
                    name=a.name,
                    is_helpful=a.is_helpful,
                    is_harmful=a.is_harmful,
                    reason=a.reason,
                )
                for a in report.ingredient_analyses
            ],
        )


@strawberry.type
class ConversationTurnType:
    role: str
    content: str

    @staticmethod
    def from_domain(turn: ConversationTurn) -> "ConversationTurnType":
        return ConversationTurnType(role=turn.role.value, content=turn.content)


# ============================================
# Payloads
# ============================================


@strawberry.type
class AnalyzeSkinPayload:
    success: bool
    result: Optional[AnalysisResultType] = None
    preview: Optional[str] = None
    error_kind: Optional[str] = None
    message: Optional[str] = None


@strawberry.type
class AnalyzeIngredientsPayload:
    success: bool
    report: Optional[IngredientReportType] = None
    error_kind: Optional[str] = None
    message: Optional[str] = None


@strawberry.type
class CheckSuitabilityPayload:
    success: bool
    report: Optional[SuitabilityReportType] = None
    error_kind: Optional[str] = None
    message: Optional[str] = None


@strawberry.type
class FollowUpPayload:
    success: bool
    reply: Optional[ConversationTurnType] = None
    error_kind: Optional[str] = None
    message: Optional[str] = None


def failure_fields(failure: Failure) -> dict:
    """Common payload fields for a failed outcome."""
    return {
        "success": False,
        "error_kind": failure.kind.value,
        "message": failure.message,
    }


# ============================================
# Inputs
# ============================================


@strawberry.input
class AnalyzeSkinInput:
    """Skin photo to analyze, as a ``data:<mime>;base64,...`` URI."""

    user_id: str
    image: str


@strawberry.input
class AnalyzeIngredientsInput:
    image: str
    user_id: Optional[str] = None


@strawberry.input
class CheckSuitabilityInput:
    diagnosed_condition: str
    image: str
    user_id: Optional[str] = None


@strawberry.input
class ConversationTurnInput:
    role: str
    content: str


@strawberry.input
class FollowUpInput:
    """Follow-up question with the caller-owned history."""

    diagnosis_context: str
    question: str
    history: List[ConversationTurnInput] = strawberry.field(default_factory=list)
