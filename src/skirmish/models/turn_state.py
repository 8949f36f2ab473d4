"""Turn and round counters for a match.

TurnState is an immutable value. Each transition returns a new instance
and the controller holds exactly one current value; nothing mutates a
TurnState in place.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from skirmish.core.exceptions import InvalidGameStateError


class TurnState(BaseModel):
    """Running counters describing match progress.

    Attributes:
        turn_number: Acting turns taken so far across the whole match.
        round_number: Completed rounds.
        history_length: Size of the command history after the last turn.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    turn_number: Annotated[int, Field(ge=0, description="Turns taken")] = 0
    round_number: Annotated[int, Field(ge=0, description="Rounds completed")] = 0
    history_length: Annotated[int, Field(ge=0, description="Command history size")] = 0

    @classmethod
    def initial(cls) -> TurnState:
        """State before the first turn: all counters at zero."""
        return cls()

    @property
    def can_undo(self) -> bool:
        return self.history_length > 0

    def next_turn(self, history_length: int) -> TurnState:
        """Advance by one acting turn.

        Args:
            history_length: Current size of the invoker's command history.

        Returns:
            A new TurnState with the turn counter incremented.

        Raises:
            InvalidGameStateError: If the history appears to have shrunk.
        """
        if history_length < self.history_length:
            raise InvalidGameStateError(
                "Command history cannot shrink between turns",
                current_state=repr(self),
                details={"history_length": history_length},
            )
        return self.model_copy(
            update={
                "turn_number": self.turn_number + 1,
                "history_length": history_length,
            }
        )

    def next_round(self) -> TurnState:
        """Advance by one round. The turn counter keeps running."""
        return self.model_copy(update={"round_number": self.round_number + 1})


__all__ = [
    "TurnState",
]
