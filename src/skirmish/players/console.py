"""Human player at a text console."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from skirmish.core.config import GameSettings, get_settings
from skirmish.core.exceptions import DecisionUnavailableError
from skirmish.core.logging import get_logger
from skirmish.models.actor import Actor
from skirmish.models.decision import DecisionPayload
from skirmish.models.enums import ActionKind
from skirmish.models.turn_state import TurnState
from skirmish.players.base import DecisionSource


logger = get_logger(__name__)

_ACTION_CHOICES: dict[str, ActionKind] = {
    "1": ActionKind.ATTACK,
    "attack": ActionKind.ATTACK,
    "2": ActionKind.HEAL,
    "heal": ActionKind.HEAL,
}


class ConsoleDecisionSource(DecisionSource):
    """Prompt a human for an action and a target.

    Actions and targets can be entered by number or by name. Invalid
    entries are re-prompted up to ``max_attempts`` times per question.
    Closed input (EOF) or an interrupt means no decision is available.

    Args:
        name: Display name.
        input_fn: Reads one line given a prompt. Defaults to ``input``.
        output_fn: Writes one line. Defaults to ``print``.
        max_attempts: Tries per question. Defaults to the game settings.
        settings: Game settings. Global settings if omitted.
    """

    def __init__(
        self,
        name: str | None = None,
        *,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
        max_attempts: int | None = None,
        settings: GameSettings | None = None,
    ) -> None:
        super().__init__(name)
        settings = settings or get_settings().game
        self.input_fn = input_fn
        self.output_fn = output_fn
        self.max_attempts = settings.console_max_attempts if max_attempts is None else max_attempts

    def decide(
        self,
        actor: Actor,
        allies: Sequence[Actor],
        enemies: Sequence[Actor],
        turn_state: TurnState,
    ) -> DecisionPayload:
        self.output_fn(f"{actor.name}, choose your action ({actor.hp_current}/{actor.hp_max} HP):")
        self.output_fn("  1. attack")
        self.output_fn("  2. heal")
        kind = self._ask("Action: ", lambda answer: _ACTION_CHOICES.get(answer.casefold()))

        candidates = enemies if kind is ActionKind.ATTACK else allies
        living = [candidate for candidate in candidates if candidate.is_alive]
        if not living:
            self.output_fn("No valid targets.")
            return DecisionPayload(action_kind=kind.value)

        self.output_fn("Choose a target:")
        for index, candidate in enumerate(living, start=1):
            self.output_fn(f"  {index}. {candidate.status_line()}")
        target = self._ask("Target: ", lambda answer: _pick(answer, living))

        return DecisionPayload(action_kind=kind.value, target_name=target.name)

    def _ask(self, prompt: str, parse: Callable[[str], object]) -> object:
        for _ in range(self.max_attempts):
            try:
                answer = self.input_fn(prompt)
            except (EOFError, KeyboardInterrupt) as exc:
                raise DecisionUnavailableError("Console input closed", source=self.name) from exc

            choice = parse(answer.strip())
            if choice is not None:
                return choice
            self.output_fn("Invalid choice, try again.")

        logger.warning("Console player gave no valid answer", source=self.name, attempts=self.max_attempts)
        raise DecisionUnavailableError(
            "No valid console input",
            source=self.name,
            details={"attempts": self.max_attempts},
        )


def _pick(answer: str, options: Sequence[Actor]) -> Actor | None:
    if answer.isdigit():
        index = int(answer) - 1
        return options[index] if 0 <= index < len(options) else None
    for option in options:
        if option.matches_name(answer):
            return option
    return None


__all__ = [
    "ConsoleDecisionSource",
]
