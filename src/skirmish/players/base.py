"""Decision source interface.

A decision source chooses an action for one actor's turn. The game
controller only ever talks to this interface, so human, rule-based and
LLM players are interchangeable per actor.
"""

from __future__ import annotations

import abc
from collections.abc import Sequence

from skirmish.models.actor import Actor
from skirmish.models.decision import DecisionPayload
from skirmish.models.turn_state import TurnState


class DecisionSource(abc.ABC):
    """Capability that proposes an action for an actor.

    Implementations return a DecisionPayload, which is untrusted and
    validated by the engine. When no payload can be produced at all
    (timeout, transport failure, closed input) they raise
    DecisionUnavailableError.

    Args:
        name: Display name used in logs and reports.
    """

    def __init__(self, name: str | None = None) -> None:
        self._name = name or self.__class__.__name__

    @property
    def name(self) -> str:
        return self._name

    @abc.abstractmethod
    def decide(
        self,
        actor: Actor,
        allies: Sequence[Actor],
        enemies: Sequence[Actor],
        turn_state: TurnState,
    ) -> DecisionPayload:
        """Propose an action for ``actor``.

        Args:
            actor: The actor whose turn it is.
            allies: The actor's team in turn order, including the actor.
            enemies: The opposing team in turn order.
            turn_state: Current turn and round counters.

        Returns:
            The proposed action.

        Raises:
            DecisionUnavailableError: If no decision could be obtained.
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self._name!r})"


__all__ = [
    "DecisionSource",
]
