"""Diagnosis context and reply policy for follow-up conversations.

The context is the only view of the analysis the model gets during a
follow-up, so its format is fixed:

    Condition: Acne, Severity: Moderate, Suggested Remedies: Gentle cleanser: Wash twice daily.
    Morning Routine: Cleanse; SPF 30
    Evening Routine: Cleanse; Niacinamide serum
    Lifestyle Tips: Sleep: Aim for 8 hours.
"""

from typing import Tuple

from skinwise.domain.analysis.core.entities.analysis_result import AnalysisResult
from skinwise.domain.analysis.core.entities.remedy import RemedyItem

DISCLAIMER = (
    "Remember, this is for informational purposes only. "
    "Please consult a doctor for medical advice."
)

FALLBACK_REPLY = (
    "I'm sorry, but I encountered an error and can't respond right now. "
    "Please try again later."
)


def _items(items: Tuple[RemedyItem, ...]) -> str:
    return "; ".join(f"{item.title}: {item.description}" for item in items)


def build_diagnosis_context(result: AnalysisResult) -> str:
    """
    Render an analysis result as the follow-up context string.

    The output is deterministic: the same result always yields the same
    string, and every remedy title appears in it.

    Args:
        result: Completed analysis

    Returns:
        Multi-line context string
    """
    lines = [
        f"Condition: {result.classification.label}, "
        f"Severity: {result.severity.value}, "
        f"Suggested Remedies: {_items(result.remedies.remedies)}"
    ]

    routine = result.remedies.routine
    if routine.am:
        lines.append(f"Morning Routine: {'; '.join(routine.am)}")
    if routine.pm:
        lines.append(f"Evening Routine: {'; '.join(routine.pm)}")
    if result.remedies.lifestyle:
        lines.append(f"Lifestyle Tips: {_items(result.remedies.lifestyle)}")

    return "\n".join(lines)


def ensure_disclaimer(reply: str) -> str:
    """Append the informational disclaimer when the reply lacks it."""
    reply = reply.rstrip()
    if DISCLAIMER.lower() in reply.lower():
        return reply
    if not reply:
        return DISCLAIMER
    return f"{reply}\n\n{DISCLAIMER}"
