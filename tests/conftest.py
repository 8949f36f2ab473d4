"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the Skirmish test suite.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING, Any

import pytest

from skirmish.core.config import GameSettings, Settings
from skirmish.core.exceptions import AITimeoutError
from skirmish.models.actor import Actor, Team
from skirmish.models.decision import DecisionPayload
from skirmish.models.enums import ActorRole
from skirmish.models.turn_state import TurnState
from skirmish.players.base import DecisionSource


if TYPE_CHECKING:
    from collections.abc import Generator


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from skirmish.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    """Hide developer SKIRMISH_* variables and any local .env file."""
    for key in list(os.environ):
        if key.startswith("SKIRMISH_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "SKIRMISH_OPENAI_API_KEY": "test-openai-key",
        "SKIRMISH_JSON_LOGS": "true",
        "SKIRMISH_LOG_LEVEL": "DEBUG",
        "SKIRMISH_GAME_HEAL_AMOUNT": "25",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def settings() -> Settings:
    """Default settings, unaffected by the environment."""
    return Settings()


@pytest.fixture
def game_settings() -> GameSettings:
    return GameSettings()


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def make_actor() -> Callable[..., Actor]:
    """Factory for actors with explicit numbers.

    Returns:
        Callable building an Actor; ``hp`` defaults to ``hp_max``.
    """

    def _make(
        name: str,
        *,
        role: ActorRole = ActorRole.TANK,
        hp: int | None = None,
        hp_max: int = 100,
        offense: int = 40,
        defense: int = 10,
    ) -> Actor:
        return Actor(
            name=name,
            role=role,
            hp_current=hp_max if hp is None else hp,
            hp_max=hp_max,
            offense=offense,
            defense=defense,
        )

    return _make


@pytest.fixture
def blue_team(make_actor: Callable[..., Actor]) -> Team:
    """Warrior (150/150) and Wizard (10/80)."""
    return Team(
        name="Blue",
        members=(
            make_actor("Warrior", hp_max=150, offense=40, defense=20),
            make_actor("Wizard", role=ActorRole.CASTER, hp=10, hp_max=80, offense=60, defense=5),
        ),
    )


@pytest.fixture
def red_team(make_actor: Callable[..., Actor]) -> Team:
    """Archer (100/100) and Rogue (40/90)."""
    return Team(
        name="Red",
        members=(
            make_actor("Archer", role=ActorRole.RANGED, hp_max=100, offense=50, defense=10),
            make_actor("Rogue", role=ActorRole.SKIRMISHER, hp=40, hp_max=90, offense=55, defense=8),
        ),
    )


# =============================================================================
# Decision Source Fixtures
# =============================================================================


class ScriptedDecisionSource(DecisionSource):
    """Return queued payloads in order, then an empty payload.

    Every call is recorded as ``(actor name, turn_state)``.
    """

    def __init__(self, name: str = "scripted", payloads: Iterable[DecisionPayload | None] = ()) -> None:
        super().__init__(name)
        self.payloads = list(payloads)
        self.calls: list[tuple[str, TurnState]] = []

    def decide(
        self,
        actor: Actor,
        allies: Sequence[Actor],
        enemies: Sequence[Actor],
        turn_state: TurnState,
    ) -> DecisionPayload:
        self.calls.append((actor.name, turn_state))
        if self.payloads:
            return self.payloads.pop(0)  # type: ignore[return-value]
        return DecisionPayload.empty()


class FailingDecisionSource(DecisionSource):
    """Raise the given exception on every call."""

    def __init__(self, name: str = "failing", error: Exception | None = None) -> None:
        super().__init__(name)
        self.error = error or AITimeoutError("timed out", model="test-model")
        self.calls = 0

    def decide(
        self,
        actor: Actor,
        allies: Sequence[Actor],
        enemies: Sequence[Actor],
        turn_state: TurnState,
    ) -> DecisionPayload:
        self.calls += 1
        raise self.error


@pytest.fixture
def scripted_source() -> type[ScriptedDecisionSource]:
    return ScriptedDecisionSource


@pytest.fixture
def failing_source() -> type[FailingDecisionSource]:
    return FailingDecisionSource
