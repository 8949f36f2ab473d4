"""Game loop controller.

The controller coordinates a match between two teams: it asks each
living actor's decision source for a payload, runs the payload through
the validation pipeline, executes the resulting command through the
invoker and advances the turn state. It is strictly sequential; one
actor acts at a time and one command executes at a time.

Each decide() call runs on a daemon worker thread with a deadline. A
source that misses it is treated as unavailable and the turn falls back
to the default action; game state is only ever mutated on the
controller thread.

A round is team A's living members in list order followed by team B's.
The match ends as soon as one team has no living member, including in
the middle of a team's block.
"""

from __future__ import annotations

import contextvars
import threading
from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from uuid import uuid4

from skirmish.core.config import Settings, get_settings
from skirmish.core.exceptions import CombatError, DecisionUnavailableError, MatchConfigurationError
from skirmish.core.logging import bind_context, clear_context, get_logger
from skirmish.engine.commands import CommandInvoker, CommandResult, GameCommand
from skirmish.engine.observers import (
    MatchObserver,
    MatchResult,
    RoundSummary,
    TurnReport,
    count_team,
)
from skirmish.engine.validation import DecisionValidator
from skirmish.models.actor import Actor, Team
from skirmish.models.decision import DecisionPayload
from skirmish.models.turn_state import TurnState
from skirmish.players.base import DecisionSource


logger = get_logger(__name__)


def _source_key(name: str) -> str:
    return name.strip().casefold()


class GameController:
    """Run a match between two teams.

    Attributes:
        match_id: Identifier bound to the logging context while playing.

    Args:
        team_a: Team acting first in every round.
        team_b: Team acting second in every round.
        sources: Decision source per actor, keyed by actor name
            (case-insensitive).
        validator: Validation pipeline. Built from settings if omitted.
        invoker: Command invoker. A fresh one if omitted.
        observers: Receivers of match progress.
        settings: Application settings. Global settings if omitted.
        decision_timeout_seconds: Deadline for each decide() call.
            Defaults to ``settings.game.decision_timeout_seconds``.

    Raises:
        MatchConfigurationError: If a team is empty, actor names collide,
            an actor appears on both teams or lacks a decision source.
    """

    def __init__(
        self,
        team_a: Team,
        team_b: Team,
        sources: Mapping[str, DecisionSource],
        *,
        validator: DecisionValidator | None = None,
        invoker: CommandInvoker | None = None,
        observers: Iterable[MatchObserver] = (),
        settings: Settings | None = None,
        decision_timeout_seconds: float | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._decision_timeout = (
            decision_timeout_seconds
            if decision_timeout_seconds is not None
            else self._settings.game.decision_timeout_seconds
        )
        if self._decision_timeout <= 0:
            raise MatchConfigurationError(
                "Decision timeout must be positive",
                details={"decision_timeout_seconds": self._decision_timeout},
            )
        self._team_a = team_a
        self._team_b = team_b
        self._sources = self._index_sources(sources)
        self._check_setup()

        self._validator = validator or DecisionValidator(settings=self._settings.game)
        self._invoker = invoker or CommandInvoker()
        self._observers = list(observers)
        self._turn_state = TurnState.initial()
        self._fallback_count = 0
        self.match_id = uuid4().hex[:12]

        logger.info(
            "GameController initialized",
            match_id=self.match_id,
            team_a=team_a.name,
            team_b=team_b.name,
            actors=team_a.size + team_b.size,
        )

    # -------------------------------------------------------------------------
    # Setup validation
    # -------------------------------------------------------------------------

    @staticmethod
    def _index_sources(sources: Mapping[str, DecisionSource]) -> dict[str, DecisionSource]:
        indexed: dict[str, DecisionSource] = {}
        for name, source in sources.items():
            key = _source_key(name)
            if key in indexed:
                raise MatchConfigurationError(
                    "Decision source registered twice for the same actor name",
                    actor=name,
                )
            if not callable(getattr(source, "decide", None)):
                raise MatchConfigurationError(
                    "Decision source does not provide decide()",
                    actor=name,
                    details={"source_type": type(source).__name__},
                )
            indexed[key] = source
        return indexed

    def _check_setup(self) -> None:
        for team in (self._team_a, self._team_b):
            if team.size == 0:
                raise MatchConfigurationError("Team has no members", team=team.name)

        for member in self._team_a.members:
            if any(member is other for other in self._team_b.members):
                raise MatchConfigurationError(
                    "Actor is on both teams",
                    actor=member.name,
                )

        seen: set[str] = set()
        for team in (self._team_a, self._team_b):
            for member in team.members:
                key = _source_key(member.name)
                if key in seen:
                    raise MatchConfigurationError(
                        "Actor names must be unique within a match",
                        team=team.name,
                        actor=member.name,
                    )
                seen.add(key)
                if key not in self._sources:
                    raise MatchConfigurationError(
                        "Actor has no decision source",
                        team=team.name,
                        actor=member.name,
                    )

    # -------------------------------------------------------------------------
    # Read-only projections
    # -------------------------------------------------------------------------

    @property
    def turn_state(self) -> TurnState:
        return self._turn_state

    @property
    def history(self) -> tuple[GameCommand, ...]:
        return self._invoker.history

    @property
    def teams(self) -> tuple[Team, Team]:
        return (self._team_a, self._team_b)

    @property
    def fallback_count(self) -> int:
        """Turns where the decision was not honoured as given."""
        return self._fallback_count

    def source_for(self, actor: Actor) -> DecisionSource:
        """Get the decision source registered for an actor.

        Raises:
            MatchConfigurationError: If the actor has no source.
        """
        source = self._sources.get(_source_key(actor.name))
        if source is None:
            raise MatchConfigurationError("Actor has no decision source", actor=actor.name)
        return source

    def is_game_over(self) -> bool:
        """True when at least one team has no living member."""
        return self._team_a.is_eliminated or self._team_b.is_eliminated

    def winner(self) -> Team | None:
        """The surviving team once the match is over, else None."""
        if self._team_b.is_eliminated and not self._team_a.is_eliminated:
            return self._team_a
        if self._team_a.is_eliminated and not self._team_b.is_eliminated:
            return self._team_b
        return None

    def result(self) -> MatchResult:
        """Snapshot the match outcome and statistics."""
        winner = self.winner()
        return MatchResult(
            winner=winner.name if winner is not None else None,
            total_turns=self._turn_state.turn_number,
            total_commands=self._invoker.history_length,
            rounds_completed=self._turn_state.round_number,
            final_teams=tuple(team.model_copy(deep=True) for team in self.teams),
            command_counts=self._invoker.count_by_kind(),
            fallback_count=self._fallback_count,
        )

    # -------------------------------------------------------------------------
    # Loop
    # -------------------------------------------------------------------------

    def play(self) -> MatchResult:
        """Play rounds until one team is eliminated.

        Returns:
            The final MatchResult.
        """
        bind_context(match_id=self.match_id)
        try:
            self._notify("on_match_start", self.teams)

            while not self.is_game_over():
                self._notify("on_round_start", self._turn_state, self.teams)

                self._play_team_block(self._team_a, self._team_b)
                if self.is_game_over():
                    break

                self._play_team_block(self._team_b, self._team_a)

                self._turn_state = self._turn_state.next_round()
                self._notify("on_round_end", self._round_summary())

            result = self.result()
            logger.info(
                "Match finished",
                winner=result.winner,
                turns=result.total_turns,
                rounds=result.rounds_completed,
            )
            self._notify("on_match_end", result)
            return result
        finally:
            clear_context("match_id")

    def _play_team_block(self, team: Team, opponents: Team) -> None:
        for actor in team.members:
            if self.is_game_over():
                return
            if actor.is_defeated:
                continue
            self.process_turn(actor, team.members, opponents.members)

    def process_turn(
        self,
        actor: Actor,
        allies: Sequence[Actor],
        enemies: Sequence[Actor],
    ) -> TurnReport:
        """Run one actor's turn.

        Any failure of the decision source is caught here and handed to
        the validation pipeline, which substitutes the default action.

        Args:
            actor: Acting actor, must be alive.
            allies: Actor's team in list order.
            enemies: Opposing team in list order.

        Returns:
            TurnReport describing the executed command.

        Raises:
            CombatError: If the actor is defeated.
        """
        if actor.is_defeated:
            raise CombatError(
                "Defeated actor cannot take a turn",
                actor=actor.name,
                round_number=self._turn_state.round_number,
            )

        source = self.source_for(actor)
        payload, source_error = self._request_decision(source, actor, allies, enemies)

        decision = self._validator.validate(
            payload,
            actor,
            allies,
            enemies,
            source_error=source_error,
        )
        result: CommandResult = self._invoker.execute_command(decision.command)
        self._turn_state = self._turn_state.next_turn(self._invoker.history_length)
        if decision.used_fallback:
            self._fallback_count += 1

        report = TurnReport(
            turn_number=self._turn_state.turn_number,
            round_number=self._turn_state.round_number,
            actor_name=actor.name,
            source_name=source.name,
            action_kind=decision.action_kind,
            result=result,
            fallback_reason=decision.fallback_reason,
            rationale=decision.rationale,
        )
        self._notify("on_turn", report)
        return report

    def _request_decision(
        self,
        source: DecisionSource,
        actor: Actor,
        allies: Sequence[Actor],
        enemies: Sequence[Actor],
    ) -> tuple[DecisionPayload | None, Exception | None]:
        future = self._start_decision(source, actor, allies, enemies)
        try:
            payload = future.result(timeout=self._decision_timeout)
        except FutureTimeoutError:
            logger.warning(
                "Decision source timed out",
                actor=actor.name,
                source=source.name,
                timeout_seconds=self._decision_timeout,
            )
            return None, DecisionUnavailableError(
                "Decision source did not answer in time",
                source=source.name,
                details={"timeout_seconds": self._decision_timeout},
            )
        except Exception as exc:
            logger.warning(
                "Decision source failed",
                actor=actor.name,
                source=source.name,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return None, exc

        if payload is not None and not isinstance(payload, DecisionPayload):
            logger.warning(
                "Decision source returned an unexpected type",
                actor=actor.name,
                source=source.name,
                payload_type=type(payload).__name__,
            )
            return None, None
        return payload, None

    def _start_decision(
        self,
        source: DecisionSource,
        actor: Actor,
        allies: Sequence[Actor],
        enemies: Sequence[Actor],
    ) -> Future[DecisionPayload | None]:
        """Run ``source.decide`` on a daemon thread.

        A source that never returns is abandoned at the deadline; being a
        daemon, its thread does not keep the process alive. The logging
        context (match id) is carried into the thread.
        """
        future: Future[DecisionPayload | None] = Future()
        turn_state = self._turn_state
        allies, enemies = list(allies), list(enemies)

        def run() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                future.set_result(source.decide(actor, allies, enemies, turn_state))
            except Exception as exc:
                future.set_exception(exc)

        context = contextvars.copy_context()
        threading.Thread(
            target=context.run,
            args=(run,),
            name=f"decide-{actor.name}",
            daemon=True,
        ).start()
        return future

    def undo_last(self) -> CommandResult:
        """Undo the most recent not-yet-undone command.

        The command stays in the history; only its effect is reversed.

        Raises:
            CommandError: If there is nothing to undo.
        """
        return self._invoker.undo_last()

    # -------------------------------------------------------------------------
    # Observers
    # -------------------------------------------------------------------------

    def add_observer(self, observer: MatchObserver) -> None:
        self._observers.append(observer)

    def _round_summary(self) -> RoundSummary:
        return RoundSummary(
            round_number=self._turn_state.round_number,
            counts=tuple(count_team(team) for team in self.teams),
        )

    def _notify(self, hook: str, *args: object) -> None:
        for observer in self._observers:
            handler = getattr(observer, hook, None)
            if handler is None:
                continue
            try:
                handler(*args)
            except Exception:
                logger.exception(
                    "Observer failed",
                    hook=hook,
                    observer=type(observer).__name__,
                )


__all__ = [
    "GameController",
]
