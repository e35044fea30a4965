"""
Activity configuration settings.
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from adaptive_cat.difficulty import DifficultyRange


class Settings(BaseSettings):
    """Adaptive activity settings loaded from CAT_-prefixed environment variables."""

    # Environment
    ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Difficulty scale of the question bank
    LOWEST_LEVEL: int = 1
    HIGHEST_LEVEL: int = 10
    STARTING_LEVEL: int = Field(default=5, gt=0)

    # Stopping error as a percent; converted to a logit before comparison
    STANDARD_ERROR_PERCENT: float = Field(
        default=5.0,
        ge=0.0,
        lt=50.0,
        description="Standard error (percent) at which an attempt stops",
    )

    # The error check only runs once MINIMUM_QUESTIONS have been answered;
    # MAXIMUM_QUESTIONS is a hard cap on attempt length
    MINIMUM_QUESTIONS: int = Field(default=2, ge=1)
    MAXIMUM_QUESTIONS: int = Field(default=10, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="CAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_difficulty_scale(self) -> Self:
        """Validate that the scale is non-empty and contains the starting level."""
        if self.LOWEST_LEVEL >= self.HIGHEST_LEVEL:
            raise ValueError(
                f"LOWEST_LEVEL must be below HIGHEST_LEVEL, got "
                f"{self.LOWEST_LEVEL} >= {self.HIGHEST_LEVEL}"
            )
        if not self.LOWEST_LEVEL <= self.STARTING_LEVEL <= self.HIGHEST_LEVEL:
            raise ValueError(
                f"STARTING_LEVEL {self.STARTING_LEVEL} is outside "
                f"[{self.LOWEST_LEVEL}, {self.HIGHEST_LEVEL}]"
            )
        return self

    @model_validator(mode="after")
    def validate_question_limits(self) -> Self:
        if self.MINIMUM_QUESTIONS > self.MAXIMUM_QUESTIONS:
            raise ValueError(
                f"MINIMUM_QUESTIONS ({self.MINIMUM_QUESTIONS}) must not exceed "
                f"MAXIMUM_QUESTIONS ({self.MAXIMUM_QUESTIONS})"
            )
        return self

    def difficulty_range(self) -> DifficultyRange:
        return DifficultyRange(low=self.LOWEST_LEVEL, high=self.HIGHEST_LEVEL)


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loaded once."""
    return Settings()
