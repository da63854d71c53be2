"""Pydantic models for ingredient analysis and recipe rewriting."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ecoswap.app.services.substitution.catalog import IngredientCategory


class MatchedIngredient(BaseModel):
    original: str
    normalized: str
    quantity: str = ""
    unit: str = ""
    matched_key: str
    category: IngredientCategory


class SubstitutionSuggestion(BaseModel):
    original: str
    matched_key: str
    alternatives: List[str]
    recommended: str
    ratio: str
    notes: str
    quantity: str = ""
    unit: str = ""
    category: IngredientCategory
    carbon_savings: float
    water_savings: float


class AnalysisReport(BaseModel):
    total_ingredients: int
    non_vegan_count: int
    vegan_count: int
    sustainability_score: int = Field(ge=0, le=100)


class EnvironmentalImpact(BaseModel):
    carbon_footprint_reduction: float = 0.0
    water_usage_reduction: float = 0.0
    land_use_reduction: float = 0.0


class AnalysisResult(BaseModel):
    report: AnalysisReport
    suggestions: List[SubstitutionSuggestion] = Field(default_factory=list)
    non_vegan_ingredients: List[MatchedIngredient] = Field(default_factory=list)


class EcoSwappedIngredient(BaseModel):
    original: str
    swapped: str
    is_swapped: bool = False
    notes: Optional[str] = None


class SwapSummaryItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str
    notes: Optional[str] = None


class EcoSwappedRecipe(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    description: Optional[str] = None
    servings: Optional[str] = None
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    total_time: Optional[str] = None
    ingredients: List[EcoSwappedIngredient] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    swap_count: int = 0
    swap_summary: List[SwapSummaryItem] = Field(default_factory=list)
