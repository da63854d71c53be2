import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from ecoswap.app.api.deps import get_analyzer, get_extractor, get_governor
from ecoswap.app.schemas.analysis import (
    AnalysisSection,
    AnalyzeData,
    AnalyzeRequest,
    AnalyzeResponse,
    ErrorResponse,
    LLMUsageResponse,
    RecipeSummary,
    SupportedSite,
    SupportedSitesData,
    SupportedSitesResponse,
    UrlValidationData,
    UrlValidationResponse,
)
from ecoswap.app.services.substitution.ingredient_analyzer import IngredientAnalyzer
from ecoswap.app.services.url_parsing.html_fetcher import validate_recipe_url
from ecoswap.app.services.url_parsing.models import RawExtractionResult
from ecoswap.app.services.url_parsing.usage_governor import UsageGovernor
from ecoswap.app.services.url_recipe_parser import RecipeExtractor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recipes", tags=["recipes"])

SUPPORTED_SITES = [
    SupportedSite(name="AllRecipes", domain="allrecipes.com", description="Popular recipe sharing platform"),
    SupportedSite(name="Food Network", domain="foodnetwork.com", description="Professional recipes from TV chefs"),
    SupportedSite(name="Epicurious", domain="epicurious.com", description="Gourmet recipes and cooking tips"),
    SupportedSite(name="Simply Recipes", domain="simplyrecipes.com", description="Simple, tested recipes"),
    SupportedSite(name="Eating Well", domain="eatingwell.com", description="Healthy recipe collection"),
    SupportedSite(
        name="Universal Support",
        domain="Any recipe website",
        description="Recipes from most food blogs and recipe sites are extracted with layered fallbacks",
    ),
]

EXTRACTION_FAILED_MESSAGE = (
    "Could not extract recipe ingredients from the provided URL. The site may not contain "
    "recipe data or may require JavaScript to load content."
)


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, message=message).model_dump(),
    )


def _recipe_summary(recipe: RawExtractionResult) -> RecipeSummary:
    return RecipeSummary(
        title=recipe.title,
        description=recipe.description,
        image=recipe.image,
        author=recipe.author,
        source_url=recipe.source_url,
        prep_time=recipe.prep_time,
        cook_time=recipe.cook_time,
        total_time=recipe.total_time,
        servings=recipe.servings,
        original_ingredients=recipe.ingredients,
        instructions=recipe.instructions,
        extraction_method=recipe.extraction_method.value,
        llm_usage=recipe.generative_usage,
        scraped_at=recipe.scraped_at,
    )


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_recipe(
    payload: AnalyzeRequest,
    extractor: RecipeExtractor = Depends(get_extractor),
    analyzer: IngredientAnalyzer = Depends(get_analyzer),
):
    url = (payload.url or "").strip()
    if not url:
        return _error(
            status.HTTP_400_BAD_REQUEST, "Recipe URL is required", "Please provide a valid recipe URL"
        )
    validation = validate_recipe_url(url)
    if not validation.valid:
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid URL", validation.error or "Invalid URL.")

    try:
        logger.info("Starting analysis for %s", url)
        recipe = await extractor.extract(url)
        if not recipe.ingredients:
            logger.warning(
                "No ingredients extracted from %s (method=%s, error=%s)",
                url,
                recipe.extraction_method.value,
                recipe.error,
            )
            return _error(
                status.HTTP_422_UNPROCESSABLE_ENTITY,
                "Recipe extraction failed",
                EXTRACTION_FAILED_MESSAGE,
            )

        analysis = analyzer.analyze(recipe.ingredients)
        impact = analyzer.environmental_impact(analysis.suggestions)
        swapped = analyzer.rewrite(recipe, analysis.suggestions)
    except Exception:  # noqa: BLE001
        logger.exception("Recipe analysis failed for %s", url)
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Analysis failed",
            "An error occurred while analyzing the recipe.",
        )

    report = analysis.report
    logger.info(
        "Analysis complete for %s: %d non-vegan ingredients, score %d/100",
        recipe.title,
        report.non_vegan_count,
        report.sustainability_score,
    )
    return AnalyzeResponse(
        data=AnalyzeData(
            recipe=_recipe_summary(recipe),
            analysis=AnalysisSection(
                total_ingredients=report.total_ingredients,
                non_vegan_ingredients=analysis.non_vegan_ingredients,
                vegan_alternatives=analysis.suggestions,
                is_vegan_friendly=report.non_vegan_count == 0,
                sustainability_score=report.sustainability_score,
                analysis_details=report,
            ),
            environmental_impact=impact,
            eco_swapped_recipe=swapped,
        )
    )


@router.get("/supported-sites", response_model=SupportedSitesResponse)
async def supported_sites():
    return SupportedSitesResponse(
        data=SupportedSitesData(
            message="Most recipe websites are supported",
            supported_sites=SUPPORTED_SITES,
            note=(
                "Popular sites have tuned selectors; other sites, including personal food blogs, "
                "fall back to structured data, rendered markup and AI-assisted extraction."
            ),
        )
    )


@router.get("/validate-url", response_model=UrlValidationResponse)
async def validate_url(url: Optional[str] = Query(None)):
    if not url:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": "URL parameter is required"},
        )
    validation = validate_recipe_url(url)
    return UrlValidationResponse(
        data=UrlValidationData(
            valid=validation.valid,
            url=url,
            message="URL is valid and ready for analysis" if validation.valid else validation.error,
        )
    )


@router.get("/llm-usage", response_model=LLMUsageResponse)
async def llm_usage(governor: UsageGovernor = Depends(get_governor)):
    return LLMUsageResponse(
        configured=governor.has_credential,
        usage=governor.snapshot(),
        last_reset=governor.last_reset_time,
    )
