"""Turn engine: combat math, commands, validation, observers and the game loop.

Example:
    >>> from skirmish.engine import GameController
    >>> controller = GameController(blue, red, sources)
    >>> result = controller.play()
    >>> result.winner
    'Blue'
"""

from __future__ import annotations

from skirmish.engine.combat_math import CombatMath, StandardCombatMath
from skirmish.engine.commands import (
    AttackCommand,
    CommandInvoker,
    CommandResult,
    GameCommand,
    HealCommand,
)
from skirmish.engine.validation import (
    DecisionValidator,
    FallbackReason,
    ValidatedDecision,
    normalize_action_kind,
    resolve_target,
    select_weakest_enemy,
)
from skirmish.engine.observers import (
    ConsoleObserver,
    LoggingObserver,
    MatchObserver,
    MatchResult,
    RoundSummary,
    TeamCount,
    TurnReport,
)
from skirmish.engine.controller import GameController


__all__ = [
    # Combat math
    "CombatMath",
    "StandardCombatMath",
    # Commands
    "CommandResult",
    "GameCommand",
    "AttackCommand",
    "HealCommand",
    "CommandInvoker",
    # Validation
    "FallbackReason",
    "ValidatedDecision",
    "DecisionValidator",
    "normalize_action_kind",
    "resolve_target",
    "select_weakest_enemy",
    # Observers
    "TurnReport",
    "TeamCount",
    "RoundSummary",
    "MatchResult",
    "MatchObserver",
    "LoggingObserver",
    "ConsoleObserver",
    # Controller
    "GameController",
]
