"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

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


class TestSkirmishError:
    """Tests for the base SkirmishError exception."""

    def test_basic_message(self) -> None:
        """Test exception with basic message."""
        exc = SkirmishError("Test error message")
        assert exc.message == "Test error message"
        assert exc.details == {}
        assert str(exc) == "Test error message"

    def test_with_details(self) -> None:
        """Test exception with additional details."""
        exc = SkirmishError("Test error", details={"key": "value", "count": 42})
        assert exc.details == {"key": "value", "count": 42}
        assert "key='value'" in str(exc)
        assert "count=42" in str(exc)

    def test_repr(self) -> None:
        """Test exception repr output."""
        repr_str = repr(SkirmishError("Test", details={"x": 1}))
        assert "SkirmishError" in repr_str
        assert "Test" in repr_str
        assert "x" in repr_str


class TestGameEngineExceptions:
    """Tests for game engine exceptions."""

    def test_match_configuration_error_context(self) -> None:
        """Team and actor names end up in details."""
        exc = MatchConfigurationError("No source", team="Blue", actor="Bob")
        assert exc.details == {"team": "Blue", "actor": "Bob"}
        assert isinstance(exc, GameEngineError)

    def test_combat_error_context(self) -> None:
        """Round zero is still recorded."""
        exc = CombatError("Defeated", actor="Bob", round_number=0)
        assert exc.details["actor"] == "Bob"
        assert exc.details["round_number"] == 0

    def test_command_error_context(self) -> None:
        exc = CommandError("Twice", command="attack Bob -> Orc")
        assert exc.details["command"] == "attack Bob -> Orc"

    def test_invalid_game_state_error(self) -> None:
        exc = InvalidGameStateError("Shrunk", current_state="TurnState(...)")
        assert exc.details["current_state"] == "TurnState(...)"
        assert isinstance(exc, SkirmishError)


class TestDecisionExceptions:
    """Tests for decision source exceptions."""

    @pytest.mark.parametrize(
        "exc_class",
        [AIConnectionError, AITimeoutError, AIResponseError, AIRateLimitError],
    )
    def test_ai_errors_are_decision_unavailable(self, exc_class: type[AIControlError]) -> None:
        """Every AI failure is a DecisionUnavailableError."""
        exc = exc_class("Failed", model="gpt-4o-mini", provider="openai", source="Barbara")
        assert isinstance(exc, DecisionUnavailableError)
        assert exc.details["model"] == "gpt-4o-mini"
        assert exc.details["provider"] == "openai"
        assert exc.details["source"] == "Barbara"

    def test_rate_limit_retry_after(self) -> None:
        exc = AIRateLimitError("Slow down", retry_after_seconds=2.5)
        assert exc.details["retry_after_seconds"] == 2.5

    def test_configuration_error(self) -> None:
        assert ConfigurationError("Missing", config_key="openai_api_key").details == {
            "config_key": "openai_api_key"
        }

    def test_unset_context_is_omitted(self) -> None:
        exc = DecisionUnavailableError("No input", source=None, details={"attempts": 3})
        assert exc.details == {"attempts": 3}

    def test_caller_details_not_mutated(self) -> None:
        details = {"status_code": 502}
        exc = AIConnectionError("Bad gateway", model="m", details=details)
        assert details == {"status_code": 502}
        assert exc.details == {"status_code": 502, "model": "m"}
