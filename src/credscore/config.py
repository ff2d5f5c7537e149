from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configuration sourced from environment variables."""

    fact_check_api_key: str | None = None
    fact_check_api_url: str = "https://factchecktools.googleapis.com/v1alpha1/claims:search"
    fact_check_language_code: str = "en-US"
    fact_check_page_size: int = 5
    fact_check_timeout: float = 10.0
    analysis_timeout: float = 30.0
    classifier_backend: str = "rules"
    classifier_model_name: str = "hamzab/roberta-fake-news-classification"
    classifier_fake_label: str = "FAKE"
    classifier_max_workers: int = 1
    data_dir: str | None = None
    trusted_domains: list[str] = Field(default_factory=list)
    suspicious_suffixes: list[str] = Field(default_factory=list)
    log_level: str = "INFO"
    cors_origins: str = "*"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "",
        "case_sensitive": False,
    }

    def get_cors_origins(self) -> list[str]:
        """Parse CORS origins from string"""
        return [origin.strip() for origin in self.cors_origins.split(",")]


@lru_cache(1)
def get_settings() -> Settings:
    return Settings()
