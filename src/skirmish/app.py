"""Command-line entry point: a demo match between two teams.

Team 1 is a human-controlled tank and a rule-based caster. Team 2 is a
ranged and a skirmisher, each driven by an LLM when an API key for its
provider is configured and by the fixed rules otherwise.

Usage:
    python -m skirmish
    python -m skirmish --ai-only --log-level DEBUG
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from skirmish.core.config import Settings, get_settings
from skirmish.core.exceptions import ConfigurationError, SkirmishError
from skirmish.core.logging import configure_logging, get_logger
from skirmish.engine.controller import GameController
from skirmish.engine.observers import ConsoleObserver, LoggingObserver
from skirmish.models.actor import Team
from skirmish.models.factory import create_caster, create_ranged, create_skirmisher, create_tank
from skirmish.players.base import DecisionSource
from skirmish.players.console import ConsoleDecisionSource
from skirmish.players.llm import LLMDecisionSource
from skirmish.players.rule_based import RuleBasedDecisionSource


logger = get_logger(__name__)


@dataclass
class MatchSetup:
    """Teams and decision sources ready for a GameController."""

    team_a: Team
    team_b: Team
    sources: dict[str, DecisionSource]

    def describe(self) -> list[str]:
        """One line per actor: name, role and who controls it."""
        lines = []
        for team in (self.team_a, self.team_b):
            for member in team.members:
                source = self.sources[member.name]
                lines.append(
                    f"{team.name}: {member.name} ({member.role.display_name}) - "
                    f"{type(source).__name__} [{source.name}]"
                )
        return lines


def _has_api_key(settings: Settings, provider: str) -> bool:
    try:
        settings.ai.api_key_for(provider)
    except ConfigurationError:
        return False
    return True


def _llm_or_rules(name: str, provider: str, settings: Settings, ai_only: bool) -> DecisionSource:
    if not ai_only and _has_api_key(settings, provider):
        return LLMDecisionSource(name, provider=provider, settings=settings)
    if not ai_only:
        logger.warning("No API key configured, using rule-based player", provider=provider, actor=name)
    return RuleBasedDecisionSource(name, settings=settings.game)


def build_demo_match(
    *,
    ai_only: bool = False,
    settings: Settings | None = None,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> MatchSetup:
    """Assemble the demo teams.

    Args:
        ai_only: Replace the human and LLM players with rule-based ones.
        settings: Application settings. Global settings if omitted.
        input_fn: Input for the human player.
        output_fn: Output for the human player.

    Returns:
        MatchSetup for a GameController.
    """
    settings = settings or get_settings()

    bob = create_tank("Bob")
    wizard = create_caster("Wizard")
    barbara = create_ranged("Barbara")
    shadow = create_skirmisher("Shadow")

    if ai_only:
        bob_source: DecisionSource = RuleBasedDecisionSource("Bob", settings=settings.game)
    else:
        bob_source = ConsoleDecisionSource(
            "Bob",
            input_fn=input_fn,
            output_fn=output_fn,
            settings=settings.game,
        )

    sources: dict[str, DecisionSource] = {
        "Bob": bob_source,
        "Wizard": RuleBasedDecisionSource("Wizard", settings=settings.game),
        "Barbara": _llm_or_rules("Barbara", "openai", settings, ai_only),
        "Shadow": _llm_or_rules("Shadow", "openrouter", settings, ai_only),
    }

    return MatchSetup(
        team_a=Team(name="Team 1", members=(bob, wizard)),
        team_b=Team(name="Team 2", members=(barbara, shadow)),
        sources=sources,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skirmish",
        description="Turn-based team combat with human, rule-based and LLM players",
    )
    parser.add_argument(
        "--ai-only",
        action="store_true",
        help="Use rule-based players only (no console input, no network)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (defaults to SKIRMISH_LOG_LEVEL)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON logs on stderr",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the demo match.

    Returns:
        Process exit code.
    """
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    configure_logging(
        level=args.log_level or settings.log_level,
        json_format=args.json_logs or settings.json_logs,
    )

    setup = build_demo_match(ai_only=args.ai_only, settings=settings)
    for line in setup.describe():
        logger.info("Player assigned", assignment=line)

    try:
        controller = GameController(
            setup.team_a,
            setup.team_b,
            setup.sources,
            observers=[ConsoleObserver(), LoggingObserver()],
            settings=settings,
        )
        controller.play()
    except SkirmishError as exc:
        logger.error("Match aborted", error=str(exc))
        return 1
    except KeyboardInterrupt:
        logger.warning("Match interrupted")
        return 130
    return 0


__all__ = [
    "MatchSetup",
    "build_demo_match",
    "build_parser",
    "main",
]
