"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        SkirmishError: Base exception for all engine errors.
        MatchConfigurationError: Structural misconfiguration at match setup.
        DecisionUnavailableError: A decision source could not answer.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from skirmish.core.config import (
    AIProviderSettings,
    GameSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from skirmish.core.exceptions import (
    AIConnectionError,
    AIControlError,
    AIRateLimitError,
    AIResponseError,
    AITimeoutError,
    CombatError,
    CommandError,
    ConfigurationError,
    DecisionUnavailableError,
    GameEngineError,
    InvalidGameStateError,
    MatchConfigurationError,
    SkirmishError,
)
from skirmish.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Exceptions
    "SkirmishError",
    "ConfigurationError",
    # Game engine exceptions
    "GameEngineError",
    "MatchConfigurationError",
    "CombatError",
    "CommandError",
    "InvalidGameStateError",
    # Decision source exceptions
    "DecisionUnavailableError",
    "AIControlError",
    "AIConnectionError",
    "AITimeoutError",
    "AIResponseError",
    "AIRateLimitError",
    # Configuration
    "Settings",
    "AIProviderSettings",
    "GameSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
