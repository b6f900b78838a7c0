"""Pydantic models for OpenAI structured outputs.

These models define the schema for structured outputs from OpenAI API.
Used with beta.chat.completions.parse() for native Pydantic support.
"""

from typing import List, Literal

from pydantic import BaseModel, Field


class ClassificationResponse(BaseModel):
    """Root model for image classification. Maps to ClassificationResult."""

    condition: str = Field(
        ...,
        description="Name of the skin condition only (e.g., 'Acne', 'Eczema')",
    )


class SeverityResponse(BaseModel):
    """Root model for severity assessment. Maps to Severity."""

    severity: Literal["Mild", "Moderate", "Severe"] = Field(
        ...,
        description="Severity of the diagnosed condition",
    )


class RemedyItemModel(BaseModel):
    """Single remedy or lifestyle tip. Maps to RemedyItem."""

    title: str = Field(..., description="Short title (e.g., 'Gentle cleanser')")
    description: str = Field(..., description="One or two sentence explanation")


class RoutineModel(BaseModel):
    """Daily routine. Maps to DailyRoutine."""

    am: List[str] = Field(default_factory=list, description="Morning steps in order")
    pm: List[str] = Field(default_factory=list, description="Evening steps in order")


class RemedyResponse(BaseModel):
    """Root model for remedy generation. Maps to RemedyBundle."""

    remedies: List[RemedyItemModel] = Field(
        default_factory=list,
        description="Remedies and treatments for the condition",
    )
    routine: RoutineModel = Field(default_factory=RoutineModel)
    lifestyle: List[RemedyItemModel] = Field(
        default_factory=list,
        description="Lifestyle tips (diet, sleep, stress, sun exposure)",
    )


class IngredientModel(BaseModel):
    """Single ingredient read from a label. Maps to Ingredient."""

    name: str = Field(..., description="Ingredient name as printed (INCI)")
    short_description: str = Field(
        ...,
        description="One or two word function (e.g., 'Moisturizer')",
    )
    is_beneficial: bool = Field(..., description="Generally beneficial or benign carrier")
    is_irritant: bool = Field(..., description="Potential irritant or highly comedogenic")


class IngredientResponse(BaseModel):
    """Root model for ingredient analysis. Maps to IngredientReport."""

    ingredients: List[IngredientModel] = Field(default_factory=list)
    summary: str = Field(default="", description="One to two sentence product summary")


class IngredientAnalysisModel(BaseModel):
    """Ingredient judged against a condition. Maps to IngredientAnalysis."""

    name: str
    is_helpful: bool
    is_harmful: bool
    reason: str


class SuitabilityResponse(BaseModel):
    """Root model for suitability checks. Maps to SuitabilityReport."""

    is_good_match: bool = Field(..., description="Overall verdict for the condition")
    summary: str = Field(default="", description="Short explanation of the verdict")
    ingredient_analyses: List[IngredientAnalysisModel] = Field(default_factory=list)


class FollowUpResponse(BaseModel):
    """Root model for follow-up answers."""

    reply: str = Field(..., description="Answer ending with the informational disclaimer")
