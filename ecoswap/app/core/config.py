import logging
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_API_KEY = "your_openai_api_key_here"


class Settings(BaseSettings):
    openai_api_key: str | None = Field(None, alias="OPENAI_API_KEY")
    llm_base_url: str = Field("https://api.openai.com", alias="LLM_BASE_URL")
    llm_model_name: str = Field("gpt-4o-mini", alias="LLM_MODEL_NAME")
    llm_max_requests_per_hour: int = Field(50, alias="OPENAI_MAX_REQUESTS_PER_HOUR")
    llm_max_daily_cost: float = Field(2.00, alias="OPENAI_MAX_DAILY_COST")
    # Published per-million-token rates for the default model
    llm_input_cost_per_million: float = Field(0.15, alias="LLM_INPUT_COST_PER_MILLION")
    llm_output_cost_per_million: float = Field(0.60, alias="LLM_OUTPUT_COST_PER_MILLION")
    llm_max_content_chars: int = Field(8000, alias="LLM_MAX_CONTENT_CHARS")
    llm_max_tokens: int = Field(1000, alias="LLM_MAX_TOKENS")
    llm_temperature: float = Field(0.1, alias="LLM_TEMPERATURE")
    llm_timeout_seconds: float = Field(60.0, alias="LLM_TIMEOUT_SECONDS")
    fetch_timeout_seconds: float = Field(15.0, alias="FETCH_TIMEOUT_SECONDS")
    render_timeout_ms: int = Field(30000, alias="SCRAPING_TIMEOUT")
    render_settle_ms: int = Field(2000, alias="RENDER_SETTLE_MS")
    scraper_user_agent: str = Field(
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0 Safari/537.36",
        alias="SCRAPER_USER_AGENT",
    )
    frontend_url: str = Field("http://localhost:5173", alias="FRONTEND_URL")

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore", populate_by_name=True
    )

    @model_validator(mode="after")
    def _check_timeouts(self) -> "Settings":
        if self.fetch_timeout_seconds * 1000 >= self.render_timeout_ms:
            raise ValueError(
                "FETCH_TIMEOUT_SECONDS must be shorter than SCRAPING_TIMEOUT "
                f"({self.fetch_timeout_seconds}s vs {self.render_timeout_ms}ms)"
            )
        return self

    @property
    def has_llm_credential(self) -> bool:
        key = (self.openai_api_key or "").strip()
        return bool(key) and key != PLACEHOLDER_API_KEY


logger = logging.getLogger(__name__)


@lru_cache
def get_settings() -> Settings:
    try:
        settings = Settings()
    except PermissionError:
        logger.warning("Unable to read .env; continuing with environment variables only")
        settings = Settings(_env_file=None)
    return settings
