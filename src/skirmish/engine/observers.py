"""Observation surface of a match.

The controller reports progress to injected observers instead of
printing or logging on its own. Records are read-only projections of
teams, command history and turn state; observers decide how to render
them.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import TextIO

from skirmish.core.logging import get_logger
from skirmish.engine.commands import CommandResult
from skirmish.engine.validation import FallbackReason
from skirmish.models.actor import Team
from skirmish.models.enums import ActionKind
from skirmish.models.turn_state import TurnState


logger = get_logger(__name__)

_RULE = "=" * 60


# =============================================================================
# Records
# =============================================================================


@dataclass(frozen=True)
class TurnReport:
    """What happened during one acting turn.

    Attributes:
        turn_number: Turn counter after this turn.
        round_number: Round in progress (completed rounds so far).
        actor_name: Name of the acting actor.
        source_name: Name of the decision source consulted.
        action_kind: Kind of the executed command.
        result: Result of executing the command.
        fallback_reason: Why the decision was not honoured as given.
        rationale: Rationale given by the decision source, if any.
    """

    turn_number: int
    round_number: int
    actor_name: str
    source_name: str
    action_kind: ActionKind
    result: CommandResult
    fallback_reason: FallbackReason = FallbackReason.NONE
    rationale: str | None = None

    @property
    def used_fallback(self) -> bool:
        return self.fallback_reason is not FallbackReason.NONE


@dataclass(frozen=True)
class TeamCount:
    """Living and total members of a team at a point in time."""

    team_name: str
    living: int
    total: int


@dataclass(frozen=True)
class RoundSummary:
    """Per-team survival counts after a completed round."""

    round_number: int
    counts: tuple[TeamCount, ...]


@dataclass(frozen=True)
class MatchResult:
    """End-of-match projection.

    Attributes:
        winner: Name of the team with living members, None if neither has any.
        total_turns: Acting turns taken.
        total_commands: Commands in the history.
        rounds_completed: Rounds counted by the turn state.
        final_teams: Deep copies of both teams at the end of the match.
        command_counts: Executed commands per action kind.
        fallback_count: Turns where the decision was not honoured as given.
    """

    winner: str | None
    total_turns: int
    total_commands: int
    rounds_completed: int
    final_teams: tuple[Team, ...]
    command_counts: dict[ActionKind, int] = field(default_factory=dict)
    fallback_count: int = 0


def count_team(team: Team) -> TeamCount:
    return TeamCount(team_name=team.name, living=team.living_count, total=team.size)


# =============================================================================
# Observers
# =============================================================================


class MatchObserver:
    """Base observer. Every hook is optional and does nothing by default."""

    def on_match_start(self, teams: tuple[Team, ...]) -> None:
        pass

    def on_round_start(self, state: TurnState, teams: tuple[Team, ...]) -> None:
        pass

    def on_turn(self, report: TurnReport) -> None:
        pass

    def on_round_end(self, summary: RoundSummary) -> None:
        pass

    def on_match_end(self, result: MatchResult) -> None:
        pass


class LoggingObserver(MatchObserver):
    """Emit a structured log event for every hook."""

    def on_match_start(self, teams: tuple[Team, ...]) -> None:
        logger.info(
            "Match started",
            teams={team.name: [member.name for member in team.members] for team in teams},
        )

    def on_round_start(self, state: TurnState, teams: tuple[Team, ...]) -> None:
        logger.info("Round started", round=state.round_number, turn=state.turn_number)

    def on_turn(self, report: TurnReport) -> None:
        logger.info(
            "Turn completed",
            turn=report.turn_number,
            actor=report.actor_name,
            source=report.source_name,
            action=report.action_kind.value,
            target=report.result.target_name,
            amount=report.result.amount,
            fallback=report.fallback_reason.value,
        )

    def on_round_end(self, summary: RoundSummary) -> None:
        logger.info(
            "Round completed",
            round=summary.round_number,
            alive={count.team_name: count.living for count in summary.counts},
        )

    def on_match_end(self, result: MatchResult) -> None:
        logger.info(
            "Match ended",
            winner=result.winner,
            turns=result.total_turns,
            commands=result.total_commands,
            rounds=result.rounds_completed,
            fallbacks=result.fallback_count,
        )


class ConsoleObserver(MatchObserver):
    """Render the match as plain text.

    Args:
        stream: Where to write. Defaults to standard output.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream or sys.stdout

    def _write(self, line: str = "") -> None:
        self.stream.write(line + "\n")

    def _team_status(self, team: Team, heading: str) -> None:
        self._write()
        self._write(heading)
        for member in team.members:
            self._write(f"  {member.status_line()}")

    def on_match_start(self, teams: tuple[Team, ...]) -> None:
        self._write()
        self._write(_RULE)
        self._write("GAME START!")
        self._write(_RULE)
        self._write()
        self._write("=== Team Setup ===")
        for team in teams:
            self._write()
            self._write(f"{team.name}:")
            for member in team.members:
                self._write(
                    f"  - {member.name} ({member.role.display_name}) - "
                    f"HP: {member.hp_max}, ATK: {member.offense}, DEF: {member.defense}"
                )

    def on_round_start(self, state: TurnState, teams: tuple[Team, ...]) -> None:
        self._write()
        self._write(_RULE)
        self._write(f"TURN {state.turn_number} - ROUND {state.round_number}")
        self._write(_RULE)
        for team in teams:
            self._team_status(team, f"{team.name} Status:")

    def on_turn(self, report: TurnReport) -> None:
        self._write()
        self._write(f"{report.actor_name}'s turn")
        if report.rationale:
            self._write(f"  [{report.source_name}] Reasoning: {report.rationale}")
        if report.used_fallback:
            self._write(f"  [{report.source_name}] Using fallback ({report.fallback_reason.value})")
        self._write(f"  {report.result.message}")
        self._write("---")

    def on_round_end(self, summary: RoundSummary) -> None:
        self._write()
        self._write(f"--- Round {summary.round_number} Complete ---")
        for count in summary.counts:
            self._write(f"{count.team_name}: {count.living}/{count.total} alive")

    def on_match_end(self, result: MatchResult) -> None:
        self._write()
        self._write(_RULE)
        self._write("GAME OVER")
        self._write(_RULE)
        if result.winner is not None:
            self._write(f"🏆 {result.winner} wins!")
        else:
            self._write("No team is left standing.")
        self._write()
        self._write("Final Status:")
        for team in result.final_teams:
            self._team_status(team, f"{team.name}:")
        self._write()
        self._write(f"Total turns played: {result.total_turns}")
        self._write(f"Total commands executed: {result.total_commands}")


__all__ = [
    "TurnReport",
    "TeamCount",
    "RoundSummary",
    "MatchResult",
    "count_team",
    "MatchObserver",
    "LoggingObserver",
    "ConsoleObserver",
]
