"""Configuration management for the Skirmish combat engine.

Centralised settings built on pydantic-settings, read from environment
variables and an optional ``.env`` file. API keys are held as SecretStr.

Example:
    >>> from skirmish.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.game.heal_amount
    30

Environment Variables:
    SKIRMISH_OPENAI_API_KEY: OpenAI API key
    SKIRMISH_OPENROUTER_API_KEY: OpenRouter API key
    SKIRMISH_AI_MODEL: Chat model used by LLM decision sources
    SKIRMISH_AI_TIMEOUT_SECONDS: Request timeout for a single decision
    SKIRMISH_GAME_HEAL_AMOUNT: Hit points restored by a heal action
    SKIRMISH_GAME_DECISION_TIMEOUT_SECONDS: Deadline for any decision source
    SKIRMISH_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from skirmish.core.exceptions import ConfigurationError


OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class AIProviderSettings(BaseSettings):
    """Configuration for the external reasoning service.

    Attributes:
        openai_api_key: OpenAI API key.
        openrouter_api_key: OpenRouter API key.
        default_provider: Provider used when a decision source does not
            name one.
        model: Chat model identifier.
        base_url: Optional override of the provider endpoint.
        temperature: Sampling temperature for decisions.
        max_retries: Maximum retry attempts on transient failures.
        timeout_seconds: Timeout applied to every decision request.
    """

    model_config = SettingsConfigDict(
        env_prefix="SKIRMISH_AI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    openai_api_key: SecretStr | None = Field(
        default=None,
        validation_alias="SKIRMISH_OPENAI_API_KEY",
        description="OpenAI API key",
    )
    openrouter_api_key: SecretStr | None = Field(
        default=None,
        validation_alias="SKIRMISH_OPENROUTER_API_KEY",
        description="OpenRouter API key",
    )
    default_provider: Literal["openai", "openrouter"] = Field(
        default="openai",
        description="Default AI provider",
    )
    model: str = Field(
        default="gpt-4o-mini",
        description="Chat model used for decisions",
    )
    base_url: str | None = Field(
        default=None,
        description="Override of the provider endpoint",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature",
    )
    max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Maximum retry attempts on transient failures",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Timeout for a single decision request",
    )

    def api_key_for(self, provider: str) -> str:
        """Return the plain API key for a provider.

        Args:
            provider: Either 'openai' or 'openrouter'.

        Returns:
            The secret value of the key.

        Raises:
            ConfigurationError: If the key for the provider is not set.
        """
        key = self.openrouter_api_key if provider == "openrouter" else self.openai_api_key
        if key is None:
            raise ConfigurationError(
                f"No API key configured for provider '{provider}'",
                config_key=f"{provider}_api_key",
            )
        return key.get_secret_value()

    def endpoint_for(self, provider: str) -> str | None:
        """Return the base URL to use for a provider (None means the SDK default)."""
        if self.base_url:
            return self.base_url
        if provider == "openrouter":
            return OPENROUTER_BASE_URL
        return None


class GameSettings(BaseSettings):
    """Configuration for game rules that sit outside the stat math.

    Attributes:
        heal_amount: Hit points restored by a heal command.
        heal_threshold_percent: HP percentage below which rule-based
            casters heal an ally.
        console_max_attempts: Invalid console entries tolerated before a
            human decision is treated as unavailable.
        decision_timeout_seconds: Deadline for one decide() call of any
            decision source, retries included.
    """

    model_config = SettingsConfigDict(
        env_prefix="SKIRMISH_GAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    heal_amount: int = Field(
        default=30,
        gt=0,
        description="Hit points restored by a heal",
    )
    heal_threshold_percent: float = Field(
        default=30.0,
        ge=0.0,
        le=100.0,
        description="HP percentage that triggers a rule-based heal",
    )
    console_max_attempts: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Invalid console entries tolerated per turn",
    )
    decision_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        le=3600,
        description="Deadline for a decision source to answer",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        log_level: Application logging level.
        json_logs: Emit JSON logs instead of console output.
        ai: External reasoning service settings.
        game: Game rule settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="SKIRMISH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Skirmish",
        description="Application name",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Emit JSON logs",
    )

    ai: AIProviderSettings = Field(default_factory=AIProviderSettings)
    game: GameSettings = Field(default_factory=GameSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is invalid.
    """
    try:
        return Settings()
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"cause": type(exc).__name__},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "OPENROUTER_BASE_URL",
    "AIProviderSettings",
    "GameSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
