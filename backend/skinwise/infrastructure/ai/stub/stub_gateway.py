"""Stub inference gateway for testing and local development.

Returns deterministic results without calling external APIs. Ingredient
images are treated as already-OCR'd text: the image bytes are decoded as
UTF-8 and split on commas.
"""

import asyncio
import re
from collections import Counter
from typing import Dict, Iterable, List, Sequence, Tuple

from skinwise.domain.analysis.core.entities.classification import ClassificationResult
from skinwise.domain.analysis.core.entities.remedy import (
    DailyRoutine,
    RemedyBundle,
    RemedyItem,
)
from skinwise.domain.analysis.core.value_objects.severity import Severity
from skinwise.domain.conversation.core.entities.conversation import ConversationTurn
from skinwise.domain.conversation.core.services.diagnosis_context import DISCLAIMER
from skinwise.domain.ingredients.core.entities.ingredient import (
    Ingredient,
    IngredientAnalysis,
    IngredientReport,
    SuitabilityReport,
)
from skinwise.domain.shared.errors import InferenceError, SchemaValidationError
from skinwise.domain.shared.value_objects.image_payload import ImagePayload

OPERATIONS = frozenset(
    {
        "classify",
        "assess_severity",
        "generate_remedies",
        "analyze_ingredients",
        "check_suitability",
        "follow_up",
    }
)

BENEFICIAL = {
    "aqua": "Solvent",
    "water": "Solvent",
    "glycerin": "Humectant",
    "niacinamide": "Brightening",
    "hyaluronic acid": "Humectant",
    "sodium hyaluronate": "Humectant",
    "ceramide np": "Barrier repair",
    "panthenol": "Soothing",
    "salicylic acid": "Exfoliant",
    "azelaic acid": "Anti-inflammatory",
    "squalane": "Emollient",
    "tocopherol": "Antioxidant",
    "allantoin": "Soothing",
    "colloidal oatmeal": "Soothing",
    "zinc oxide": "Sunscreen",
}

IRRITANTS = {
    "fragrance": "Fragrance",
    "parfum": "Fragrance",
    "alcohol denat.": "Solvent",
    "alcohol": "Solvent",
    "sodium lauryl sulfate": "Surfactant",
    "isopropyl myristate": "Emollient",
    "coconut oil": "Emollient",
    "menthol": "Cooling agent",
    "limonene": "Fragrance",
}

# condition -> (helpful, harmful)
CONDITION_RULES: Dict[str, Tuple[frozenset, frozenset]] = {
    "acne": (
        frozenset({"salicylic acid", "niacinamide", "azelaic acid", "benzoyl peroxide"}),
        frozenset({"coconut oil", "isopropyl myristate", "mineral oil", "cocoa butter"}),
    ),
    "rosacea": (
        frozenset({"niacinamide", "azelaic acid", "panthenol", "allantoin"}),
        frozenset({"alcohol denat.", "alcohol", "fragrance", "parfum", "menthol", "limonene"}),
    ),
    "eczema": (
        frozenset({"hyaluronic acid", "ceramide np", "glycerin", "colloidal oatmeal"}),
        frozenset({"fragrance", "parfum", "sodium lauryl sulfate", "alcohol denat."}),
    ),
}

REMEDIES: Dict[str, RemedyBundle] = {
    "acne": RemedyBundle(
        remedies=(
            RemedyItem("Salicylic acid cleanser", "Use a 2% BHA cleanser once daily."),
            RemedyItem("Benzoyl peroxide spot treatment", "Apply a thin layer to lesions."),
            RemedyItem("Non-comedogenic moisturizer", "Keep skin hydrated without clogging pores."),
        ),
        routine=DailyRoutine(
            am=("Gentle cleanser", "Niacinamide serum", "SPF 30"),
            pm=("Salicylic acid cleanser", "Moisturizer"),
        ),
        lifestyle=(
            RemedyItem("Hands off", "Avoid picking or squeezing spots."),
            RemedyItem("Clean pillowcases", "Change them twice a week."),
        ),
    ),
    "eczema": RemedyBundle(
        remedies=(
            RemedyItem("Emollients", "Apply a thick fragrance-free cream several times a day."),
            RemedyItem("Lukewarm showers", "Keep showers short and pat skin dry."),
        ),
        routine=DailyRoutine(am=("Ceramide cream",), pm=("Ceramide cream",)),
        lifestyle=(RemedyItem("Cotton clothing", "Avoid wool and synthetic fabrics."),),
    ),
}

_GENERIC_REMEDIES = RemedyBundle(
    remedies=(
        RemedyItem("Gentle care", "Use mild, fragrance-free products."),
        RemedyItem("See a dermatologist", "Get a professional opinion if it persists."),
    ),
    routine=DailyRoutine(am=("Gentle cleanser", "SPF 30"), pm=("Gentle cleanser",)),
    lifestyle=(),
)

_CONDITION_PATTERN = re.compile(r"Condition:\s*(?P<label>[^,\n]+)")


class StubInferenceGateway:
    """
    Stub implementation of IInferenceGateway for testing.

    Args:
        label: Condition returned by classify
        severity: Grade returned by assess_severity
        fail_on: Operations that raise InferenceError
        delay_s: Artificial latency for every call
        include_disclaimer: Whether follow-up replies carry the disclaimer

    Every call is counted in ``calls`` (operation -> count).
    Supports async context manager protocol for lifespan compatibility.
    """

    def __init__(
        self,
        label: str = "Acne",
        severity: Severity = Severity.MODERATE,
        fail_on: Iterable[str] = (),
        delay_s: float = 0.0,
        include_disclaimer: bool = True,
    ):
        unknown = set(fail_on) - OPERATIONS
        if unknown:
            raise ValueError(f"Unknown stub operations: {sorted(unknown)}")
        self.label = label
        self.severity = severity
        self.fail_on = set(fail_on)
        self.delay_s = delay_s
        self.include_disclaimer = include_disclaimer
        self.calls: Counter = Counter()
        self.follow_up_requests: List[Tuple[str, Tuple[ConversationTurn, ...], str]] = []

    async def __aenter__(self) -> "StubInferenceGateway":
        """Enter async context (no-op for stub)."""
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        """Exit async context (no-op for stub)."""
        return None

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())

    async def _enter(self, operation: str) -> None:
        self.calls[operation] += 1
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if operation in self.fail_on:
            raise InferenceError(operation, "stub failure")

    async def classify(self, image: ImagePayload) -> ClassificationResult:
        await self._enter("classify")
        return ClassificationResult(self.label)

    async def assess_severity(self, image: ImagePayload, label: str) -> Severity:
        await self._enter("assess_severity")
        return self.severity

    async def generate_remedies(self, label: str) -> RemedyBundle:
        await self._enter("generate_remedies")
        return REMEDIES.get(label.strip().lower(), _GENERIC_REMEDIES)

    async def analyze_ingredients(self, image: ImagePayload) -> IngredientReport:
        await self._enter("analyze_ingredients")
        names = self._read_label(image, "analyze_ingredients")

        ingredients = []
        for name in names:
            key = name.lower()
            ingredients.append(
                Ingredient(
                    name=name,
                    short_description=BENEFICIAL.get(key) or IRRITANTS.get(key) or "Other",
                    is_beneficial=key in BENEFICIAL,
                    is_irritant=key in IRRITANTS,
                )
            )

        irritant_count = sum(1 for i in ingredients if i.is_irritant)
        if irritant_count:
            summary = (
                f"Contains {irritant_count} potential irritant(s); "
                "may not suit sensitive skin."
            )
        else:
            summary = "No common irritants found; likely suitable for sensitive skin."
        return IngredientReport(ingredients=tuple(ingredients), summary=summary)

    async def check_suitability(self, label: str, image: ImagePayload) -> SuitabilityReport:
        await self._enter("check_suitability")
        names = self._read_label(image, "check_suitability")
        helpful, harmful = CONDITION_RULES.get(
            label.strip().lower(), (frozenset(BENEFICIAL), frozenset(IRRITANTS))
        )

        analyses = []
        for name in names:
            key = name.lower()
            if key in harmful:
                analyses.append(
                    IngredientAnalysis(name, False, True, f"May aggravate {label}.")
                )
            elif key in helpful:
                analyses.append(IngredientAnalysis(name, True, False, f"Supports {label} care."))

        harmful_names = [a.name for a in analyses if a.is_harmful]
        if harmful_names:
            summary = f"Not recommended for {label}: contains {', '.join(harmful_names)}."
        else:
            summary = f"No ingredients known to aggravate {label}."
        return SuitabilityReport(
            is_good_match=not harmful_names,
            summary=summary,
            ingredient_analyses=tuple(analyses),
        )

    async def follow_up(
        self,
        context: str,
        history: Sequence[ConversationTurn],
        question: str,
    ) -> str:
        await self._enter("follow_up")
        self.follow_up_requests.append((context, tuple(history), question))

        match = _CONDITION_PATTERN.search(context)
        condition = match.group("label").strip() if match else "your condition"
        reply = f"Regarding {condition}: please follow the suggested routine consistently."
        if self.include_disclaimer:
            reply = f"{reply} {DISCLAIMER}"
        return reply

    @staticmethod
    def _read_label(image: ImagePayload, operation: str) -> List[str]:
        """Pretend-OCR: decode bytes as text and split on commas."""
        text = image.data.decode("utf-8", errors="ignore")
        names = [part.strip() for part in text.split(",") if part.strip()]
        if not names or not any(ch.isalpha() for ch in text):
            raise SchemaValidationError(operation, "no ingredients could be read")
        return names

