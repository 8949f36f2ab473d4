"""Command layer: executable, undoable action units and their invoker.

A command binds an acting actor, a target and an action kind. It is
built only by the validation pipeline, so it is always executable; the
invoker runs it exactly once and keeps it in an append-only history for
undo and statistics.

Example:
    >>> invoker = CommandInvoker()
    >>> result = invoker.execute_command(AttackCommand(warrior, goblin))
    >>> print(result.message)
    Bob attacks Goblin for 35 damage (15/50 HP left)
"""

from __future__ import annotations

import abc
from collections import Counter
from dataclasses import dataclass
from typing import ClassVar

from skirmish.core.exceptions import CommandError
from skirmish.core.logging import get_logger
from skirmish.engine.combat_math import CombatMath, StandardCombatMath
from skirmish.models.actor import Actor
from skirmish.models.enums import ActionKind


logger = get_logger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of executing or undoing a command.

    Attributes:
        kind: Action kind of the command.
        actor_name: Name of the acting actor.
        target_name: Name of the target actor.
        amount: Hit points actually removed or restored.
        applied: False when the command was a recorded no-op.
        message: Human-readable description of what happened.
        undone: True if this result describes an undo.
    """

    kind: ActionKind
    actor_name: str
    target_name: str
    amount: int
    applied: bool
    message: str
    undone: bool = False


class GameCommand(abc.ABC):
    """Base class for commands.

    Subclasses implement ``_apply`` (perform the effect, return the
    amount) and ``_revert`` (reverse a previously applied amount).
    """

    kind: ClassVar[ActionKind]

    def __init__(self, actor: Actor, target: Actor) -> None:
        self.actor = actor
        self.target = target
        self._executed = False
        self._undone = False
        self._applied = False
        self._amount = 0

    @property
    def executed(self) -> bool:
        return self._executed

    @property
    def undone(self) -> bool:
        return self._undone

    @property
    def amount(self) -> int:
        """Hit points changed by the last execution (0 before execution)."""
        return self._amount

    def describe(self) -> str:
        return f"{self.kind.value} {self.actor.name} -> {self.target.name}"

    def execute(self) -> CommandResult:
        """Apply the command's effect exactly once.

        Returns:
            CommandResult describing the effect.

        Raises:
            CommandError: If the command was already executed.
        """
        if self._executed:
            raise CommandError("Command has already been executed", command=self.describe())

        self._applied = self.target.is_alive
        self._amount = self._apply() if self._applied else 0
        self._executed = True

        return CommandResult(
            kind=self.kind,
            actor_name=self.actor.name,
            target_name=self.target.name,
            amount=self._amount,
            applied=self._applied,
            message=self._outcome_message(),
        )

    def undo(self) -> CommandResult:
        """Reverse the effect recorded by ``execute``.

        Returns:
            CommandResult with ``undone=True``.

        Raises:
            CommandError: If the command was never executed or is already undone.
        """
        if not self._executed:
            raise CommandError("Cannot undo a command that was never executed", command=self.describe())
        if self._undone:
            raise CommandError("Command has already been undone", command=self.describe())

        if self._amount:
            self._revert(self._amount)
        self._undone = True

        return CommandResult(
            kind=self.kind,
            actor_name=self.actor.name,
            target_name=self.target.name,
            amount=self._amount,
            applied=self._applied,
            message=f"Undid {self.describe()} ({self._amount} HP)",
            undone=True,
        )

    @abc.abstractmethod
    def _apply(self) -> int:
        """Perform the effect against a living target and return the amount."""

    @abc.abstractmethod
    def _revert(self, amount: int) -> None:
        """Reverse an applied amount."""

    @abc.abstractmethod
    def _outcome_message(self) -> str:
        """Describe the executed effect."""

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(actor={self.actor.name!r}, "
            f"target={self.target.name!r}, executed={self._executed})"
        )


class AttackCommand(GameCommand):
    """Attack a target for damage computed by the combat math.

    Attacking an already defeated target does nothing but is still a
    valid, recorded command.
    """

    kind = ActionKind.ATTACK

    def __init__(
        self,
        actor: Actor,
        target: Actor,
        combat_math: CombatMath | None = None,
    ) -> None:
        super().__init__(actor, target)
        self.combat_math = combat_math or StandardCombatMath()

    def _apply(self) -> int:
        damage = self.combat_math.compute_attack_damage(self.actor, self.target)
        return self.combat_math.apply_damage(self.target, damage)

    def _revert(self, amount: int) -> None:
        self.target.hp_current = min(self.target.hp_max, self.target.hp_current + amount)

    def _outcome_message(self) -> str:
        if not self._applied:
            return f"{self.actor.name} attacks {self.target.name}, but {self.target.name} is already defeated"
        message = (
            f"{self.actor.name} attacks {self.target.name} for {self._amount} damage "
            f"({self.target.hp_current}/{self.target.hp_max} HP left)"
        )
        if self.target.is_defeated:
            message += f". {self.target.name} is defeated!"
        return message


class HealCommand(GameCommand):
    """Restore hit points to a target, capped at its maximum.

    Healing a defeated target is a recorded no-op: defeat is terminal.
    """

    kind = ActionKind.HEAL

    def __init__(
        self,
        actor: Actor,
        target: Actor,
        amount: int,
        combat_math: CombatMath | None = None,
    ) -> None:
        super().__init__(actor, target)
        self.heal_amount = max(0, amount)
        self.combat_math = combat_math or StandardCombatMath()

    def _apply(self) -> int:
        return self.combat_math.apply_heal(self.target, self.heal_amount)

    def _revert(self, amount: int) -> None:
        self.target.hp_current = max(0, self.target.hp_current - amount)

    def _outcome_message(self) -> str:
        if not self._applied:
            return f"{self.actor.name} tries to heal {self.target.name}, but {self.target.name} is defeated"
        return (
            f"{self.actor.name} heals {self.target.name} for {self._amount} HP "
            f"({self.target.hp_current}/{self.target.hp_max} HP)"
        )


class CommandInvoker:
    """Execute commands and keep the append-only command history.

    The history is never reordered or pruned. Undo walks back from the
    top of the history, marking commands as undone in place.
    """

    def __init__(self) -> None:
        self._history: list[GameCommand] = []
        self._seen: set[int] = set()

    @property
    def history(self) -> tuple[GameCommand, ...]:
        return tuple(self._history)

    @property
    def history_length(self) -> int:
        return len(self._history)

    @property
    def undo_depth(self) -> int:
        """Number of executed commands that can still be undone."""
        return sum(1 for command in self._history if not command.undone)

    def execute_command(self, command: GameCommand) -> CommandResult:
        """Execute a command and append it to the history.

        Args:
            command: A command that has not been executed before.

        Returns:
            The command's CommandResult.

        Raises:
            CommandError: If this command instance was already executed.
        """
        if id(command) in self._seen or command.executed:
            raise CommandError(
                "Command instance has already been executed",
                command=command.describe(),
            )

        result = command.execute()
        self._history.append(command)
        self._seen.add(id(command))

        logger.info(
            "Command executed",
            kind=result.kind.value,
            actor=result.actor_name,
            target=result.target_name,
            amount=result.amount,
            applied=result.applied,
            history_length=len(self._history),
        )
        return result

    def undo_last(self) -> CommandResult:
        """Undo the most recent command that has not been undone yet.

        Returns:
            The undo CommandResult.

        Raises:
            CommandError: If there is nothing left to undo.
        """
        for command in reversed(self._history):
            if not command.undone:
                result = command.undo()
                logger.info("Command undone", command=command.describe())
                return result
        raise CommandError("Nothing to undo", details={"history_length": len(self._history)})

    def count_by_kind(self) -> dict[ActionKind, int]:
        """Count executed commands per action kind."""
        return dict(Counter(command.kind for command in self._history))


__all__ = [
    "CommandResult",
    "GameCommand",
    "AttackCommand",
    "HealCommand",
    "CommandInvoker",
]
