"""Exception hierarchy for the Skirmish combat engine.

Every error derives from SkirmishError and carries a ``details`` dict
with the domain context it was raised in (team, actor, model, ...).

Only structural misconfiguration escapes a running match. Decision
source failures are recovered at the per-turn boundary and malformed
decisions never raise at all.

Example:
    >>> from skirmish.core.exceptions import MatchConfigurationError
    >>> raise MatchConfigurationError("Team has no members", team="Red")
"""

from __future__ import annotations

from typing import Any


class SkirmishError(Exception):
    """Base exception for all Skirmish errors.

    Context keyword arguments are merged into ``details``; those passed
    as None are left out.

    Attributes:
        message: Human-readable error description.
        details: Context for logs and callers.
    """

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        **context: Any,
    ) -> None:
        self.message = message
        self.details = dict(details or {})
        self.details.update({key: value for key, value in context.items() if value is not None})
        super().__init__(str(self))

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{self.message} [{context}]"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, details={self.details!r})"


class ConfigurationError(SkirmishError):
    """Settings are missing or invalid (e.g. no API key for a provider)."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details, config_key=config_key)


# =============================================================================
# Engine
# =============================================================================


class GameEngineError(SkirmishError):
    """Base for match, turn and command errors."""


class MatchConfigurationError(GameEngineError):
    """A match is structurally invalid.

    Raised at setup for an empty team, a duplicate actor or an actor
    without a decision source, before any turn is played.

    Args:
        message: Error description.
        team: Offending team name.
        actor: Offending actor name.
        details: Extra context.
    """

    def __init__(
        self,
        message: str,
        *,
        team: str | None = None,
        actor: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details, team=team, actor=actor)


class CombatError(GameEngineError):
    """An actor was asked to act when it cannot, e.g. after defeat."""

    def __init__(
        self,
        message: str,
        *,
        actor: str | None = None,
        round_number: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details, actor=actor, round_number=round_number)


class CommandError(GameEngineError):
    """A command was executed twice or undone out of order."""

    def __init__(
        self,
        message: str,
        *,
        command: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details, command=command)


class InvalidGameStateError(GameEngineError):
    """A turn state transition would break counter monotonicity."""

    def __init__(
        self,
        message: str,
        *,
        current_state: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details, current_state=current_state)


# =============================================================================
# Decision sources
# =============================================================================


class DecisionUnavailableError(SkirmishError):
    """A decision source could not produce a payload.

    The controller catches this (and any other source failure) for the
    current turn and substitutes the default action.
    """

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        details: dict[str, Any] | None = None,
        **context: Any,
    ) -> None:
        super().__init__(message, details=details, source=source, **context)


class AIControlError(DecisionUnavailableError):
    """Base for failures of the external reasoning service.

    Args:
        message: Error description.
        model: Model that was asked.
        provider: Provider name (``openai`` or ``openrouter``).
        source: Decision source name.
        details: Extra context.
    """

    def __init__(
        self,
        message: str,
        *,
        model: str | None = None,
        provider: str | None = None,
        source: str | None = None,
        details: dict[str, Any] | None = None,
        **context: Any,
    ) -> None:
        super().__init__(
            message,
            source=source,
            details=details,
            model=model,
            provider=provider,
            **context,
        )


class AIConnectionError(AIControlError):
    """Service unreachable or answered with an HTTP error."""


class AITimeoutError(AIControlError):
    """No answer within the configured timeout."""


class AIResponseError(AIControlError):
    """Answer empty or not a JSON object."""


class AIRateLimitError(AIControlError):
    """Rate limited on every attempt."""

    def __init__(
        self,
        message: str,
        *,
        retry_after_seconds: float | None = None,
        model: str | None = None,
        provider: str | None = None,
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            model=model,
            provider=provider,
            source=source,
            details=details,
            retry_after_seconds=retry_after_seconds,
        )


__all__ = [
    "SkirmishError",
    "ConfigurationError",
    # Engine
    "GameEngineError",
    "MatchConfigurationError",
    "CombatError",
    "CommandError",
    "InvalidGameStateError",
    # Decision sources
    "DecisionUnavailableError",
    "AIControlError",
    "AIConnectionError",
    "AITimeoutError",
    "AIResponseError",
    "AIRateLimitError",
]
