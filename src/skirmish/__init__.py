"""Skirmish - turn-based team combat driven by pluggable decision sources.

Each actor's action comes from a decision source: a human at the
console, a fixed rule set or an LLM. Decisions are untrusted; the
engine validates every payload into an executable command and falls
back to a safe default when the payload cannot be honoured, so a match
never stalls on bad input.

Example:
    >>> from skirmish import GameController, Team, RuleBasedDecisionSource
    >>> from skirmish import create_tank, create_caster
    >>>
    >>> blue = Team(name="Blue", members=(create_tank("Bob"), create_caster("Wizard")))
    >>> red = Team(name="Red", members=(create_tank("Grunt"),))
    >>> sources = {name: RuleBasedDecisionSource(name) for name in ("Bob", "Wizard", "Grunt")}
    >>> result = GameController(blue, red, sources).play()
    >>> result.winner
    'Blue'

Modules:
    core: Configuration, logging, and base exceptions.
    models: Actors, teams, decision payloads and turn state.
    engine: Combat math, commands, validation, observers and the game loop.
    players: Human, rule-based and LLM decision sources.
    app: Command-line demo match.
"""

from __future__ import annotations

# Core
from skirmish.core.config import Settings, get_settings
from skirmish.core.exceptions import (
    DecisionUnavailableError,
    MatchConfigurationError,
    SkirmishError,
)
from skirmish.core.logging import configure_logging, get_logger

# Models
from skirmish.models import (
    ActionKind,
    Actor,
    ActorRole,
    DecisionPayload,
    Team,
    TurnState,
    create_actor,
    create_caster,
    create_ranged,
    create_skirmisher,
    create_tank,
)

# Engine
from skirmish.engine import (
    CommandInvoker,
    ConsoleObserver,
    DecisionValidator,
    FallbackReason,
    GameController,
    LoggingObserver,
    MatchObserver,
    MatchResult,
    StandardCombatMath,
)

# Players
from skirmish.players import (
    ConsoleDecisionSource,
    DecisionSource,
    LLMDecisionSource,
    RuleBasedDecisionSource,
)


__version__ = "0.1.0"
__author__ = "Skirmish Team"
__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Core
    "SkirmishError",
    "MatchConfigurationError",
    "DecisionUnavailableError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "ActorRole",
    "ActionKind",
    "Actor",
    "Team",
    "DecisionPayload",
    "TurnState",
    "create_actor",
    "create_tank",
    "create_caster",
    "create_ranged",
    "create_skirmisher",
    # Engine
    "StandardCombatMath",
    "CommandInvoker",
    "DecisionValidator",
    "FallbackReason",
    "GameController",
    "MatchObserver",
    "LoggingObserver",
    "ConsoleObserver",
    "MatchResult",
    # Players
    "DecisionSource",
    "RuleBasedDecisionSource",
    "ConsoleDecisionSource",
    "LLMDecisionSource",
]
