"""Decision sources: who chooses an actor's action.

Submodules:
    base: DecisionSource interface.
    rule_based: Deterministic fixed-rule player.
    console: Human player at a text console.
    llm: External reasoning service over the OpenAI API.
    prompts: Tactical briefing sent to the reasoning service.
"""

from __future__ import annotations

from skirmish.players.base import DecisionSource
from skirmish.players.console import ConsoleDecisionSource
from skirmish.players.llm import LLMDecisionSource
from skirmish.players.rule_based import RuleBasedDecisionSource


__all__ = [
    "DecisionSource",
    "RuleBasedDecisionSource",
    "ConsoleDecisionSource",
    "LLMDecisionSource",
]
