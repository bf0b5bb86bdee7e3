"""
Application settings, read from environment variables (prefix FILMORATE_) or a .env file.
"""

from datetime import date
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	"""Runtime configuration. The core receives these values as constructor arguments."""

	model_config = SettingsConfigDict(env_prefix="FILMORATE_", env_file=".env", extra="ignore")

	# API
	api_title: str = "Filmorate API"
	seed_file: Optional[str] = None  # JSONL fixtures applied at startup

	# Business rules
	default_popular_count: int = 10
	default_mpa_id: int = 1
	min_release_date: date = date(1895, 12, 28)
	max_description_length: int = 200

	# Observability
	log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
	return Settings()
