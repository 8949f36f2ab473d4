"""Fixed-rule decision source."""

from __future__ import annotations

from collections.abc import Sequence

from skirmish.core.config import GameSettings, get_settings
from skirmish.engine.validation import select_weakest_enemy
from skirmish.models.actor import Actor
from skirmish.models.decision import DecisionPayload
from skirmish.models.enums import ActionKind, ActorRole
from skirmish.models.turn_state import TurnState
from skirmish.players.base import DecisionSource


class RuleBasedDecisionSource(DecisionSource):
    """Deterministic player.

    A caster heals the living ally with the lowest HP percentage when
    that ally is below the heal threshold. Everyone else, and a caster
    with no ally in danger, attacks the weakest living enemy.

    Args:
        name: Display name.
        heal_threshold_percent: HP percentage that triggers a heal.
            Defaults to the game settings.
        settings: Game settings. Global settings if omitted.
    """

    healer_roles: frozenset[ActorRole] = frozenset({ActorRole.CASTER})

    def __init__(
        self,
        name: str | None = None,
        *,
        heal_threshold_percent: float | None = None,
        settings: GameSettings | None = None,
    ) -> None:
        super().__init__(name)
        settings = settings or get_settings().game
        self.heal_threshold_percent = (
            settings.heal_threshold_percent
            if heal_threshold_percent is None
            else heal_threshold_percent
        )

    def decide(
        self,
        actor: Actor,
        allies: Sequence[Actor],
        enemies: Sequence[Actor],
        turn_state: TurnState,
    ) -> DecisionPayload:
        if actor.role in self.healer_roles:
            patient = self._neediest_ally(allies)
            if patient is not None:
                return DecisionPayload(
                    action_kind=ActionKind.HEAL.value,
                    target_name=patient.name,
                    rationale=f"{patient.name} is at {patient.hp_percentage:.0f}% HP",
                )

        target = select_weakest_enemy(enemies)
        return DecisionPayload(
            action_kind=ActionKind.ATTACK.value,
            target_name=target.name,
            rationale=f"Focus fire on {target.name} ({target.hp_current} HP)",
        )

    def _neediest_ally(self, allies: Sequence[Actor]) -> Actor | None:
        wounded = [
            ally for ally in allies
            if ally.is_alive and ally.hp_percentage < self.heal_threshold_percent
        ]
        if not wounded:
            return None
        return min(wounded, key=lambda ally: ally.hp_percentage)


__all__ = [
    "RuleBasedDecisionSource",
]
