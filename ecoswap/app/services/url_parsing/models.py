"""Pydantic models for URL recipe extraction."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExtractionMethod(str, Enum):
    STRUCTURED = "structured"
    HEURISTIC = "heuristic"
    DYNAMIC = "dynamic"
    DYNAMIC_TIMEOUT = "dynamic-timeout"
    GENERATIVE = "generative"
    FAILED = "failed"
    ERROR = "error"


class UsageSnapshot(BaseModel):
    """Point-in-time copy of the generative usage governor's counters."""

    model_config = ConfigDict(frozen=True)

    request_count: int
    daily_cost: float
    max_requests: int
    max_daily_cost: float
    tokens_used: Optional[int] = None
    cost_this_call: Optional[float] = None


class RawExtractionResult(BaseModel):
    """Recipe fields produced by a single extractor invocation."""

    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    author: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    total_time: Optional[str] = None
    servings: Optional[str] = None
    source_url: Optional[str] = None
    scraped_at: Optional[datetime] = None
    extraction_method: ExtractionMethod
    generative_usage: Optional[UsageSnapshot] = None
    error: Optional[str] = None

    def is_sufficient(self) -> bool:
        """A result is usable when it has a title and at least one ingredient."""
        return bool(self.title and self.title.strip()) and any(
            item.strip() for item in self.ingredients
        )


class RenderedPage(BaseModel):
    """Markup captured by the headless browser, plus what could be parsed from it."""

    html: str = ""
    timed_out: bool = False
    result: Optional[RawExtractionResult] = None


class OutcomeStatus(str, Enum):
    SUFFICIENT = "sufficient"
    INSUFFICIENT = "insufficient"
    ERROR = "error"


class StrategyOutcome(BaseModel):
    """Tagged result of one extraction strategy attempt."""

    status: OutcomeStatus
    result: Optional[RawExtractionResult] = None
    timed_out: bool = False
    error: Optional[str] = None

    @classmethod
    def sufficient(cls, result: RawExtractionResult) -> "StrategyOutcome":
        return cls(status=OutcomeStatus.SUFFICIENT, result=result)

    @classmethod
    def insufficient(
        cls, result: Optional[RawExtractionResult] = None, timed_out: bool = False
    ) -> "StrategyOutcome":
        return cls(status=OutcomeStatus.INSUFFICIENT, result=result, timed_out=timed_out)

    @classmethod
    def failed(cls, error: str) -> "StrategyOutcome":
        return cls(status=OutcomeStatus.ERROR, error=error)


class ExtractionContext(BaseModel):
    """Mutable state shared by the strategies of one extraction run."""

    url: str
    static_html: Optional[str] = None
    rendered_html: Optional[str] = None
    render_timed_out: bool = False
    errors: List[str] = Field(default_factory=list)

    def best_html(self) -> str:
        """Best markup gathered so far for the generative fallback."""
        for candidate in (self.static_html, self.rendered_html):
            if candidate and candidate.strip():
                return candidate
        return ""


class UrlValidation(BaseModel):
    """Result of a URL sanity check."""

    valid: bool
    error: Optional[str] = None
