from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ecoswap.app.services.substitution.models import (
    AnalysisReport,
    EcoSwappedRecipe,
    EnvironmentalImpact,
    MatchedIngredient,
    SubstitutionSuggestion,
)
from ecoswap.app.services.url_parsing.models import UsageSnapshot


class AnalyzeRequest(BaseModel):
    url: Optional[str] = None


class RecipeSummary(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    author: Optional[str] = None
    source_url: Optional[str] = None
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    total_time: Optional[str] = None
    servings: Optional[str] = None
    original_ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    extraction_method: str
    llm_usage: Optional[UsageSnapshot] = None
    scraped_at: Optional[datetime] = None


class AnalysisSection(BaseModel):
    total_ingredients: int
    non_vegan_ingredients: List[MatchedIngredient] = Field(default_factory=list)
    vegan_alternatives: List[SubstitutionSuggestion] = Field(default_factory=list)
    is_vegan_friendly: bool
    sustainability_score: int
    analysis_details: AnalysisReport


class AnalyzeData(BaseModel):
    recipe: RecipeSummary
    analysis: AnalysisSection
    environmental_impact: EnvironmentalImpact
    eco_swapped_recipe: Optional[EcoSwappedRecipe] = None


class AnalyzeResponse(BaseModel):
    success: bool = True
    data: AnalyzeData


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: str


class SupportedSite(BaseModel):
    name: str
    domain: str
    description: str


class SupportedSitesData(BaseModel):
    message: str
    supported_sites: List[SupportedSite]
    note: str


class SupportedSitesResponse(BaseModel):
    success: bool = True
    data: SupportedSitesData


class UrlValidationData(BaseModel):
    valid: bool
    url: str
    message: str


class UrlValidationResponse(BaseModel):
    success: bool = True
    data: UrlValidationData


class LLMUsageResponse(BaseModel):
    configured: bool
    usage: UsageSnapshot
    last_reset: datetime
