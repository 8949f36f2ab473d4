"""Stat math for attacks and heals.

The engine treats combat math as a collaborator: commands ask it how
much damage an attack deals and delegate the actual hit-point change to
it. Decision sources may call ``compute_attack_damage`` ahead of
deciding to get a damage estimate; that call never mutates anything.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from skirmish.core.logging import get_logger
from skirmish.models.actor import Actor


logger = get_logger(__name__)


@runtime_checkable
class CombatMath(Protocol):
    """Capability used by commands to compute and apply effects."""

    def compute_attack_damage(self, attacker: Actor, target: Actor) -> int:
        """Damage an attack would deal, defence already applied (>= 0)."""
        ...

    def apply_damage(self, target: Actor, amount: int) -> int:
        """Remove hit points, floored at 0. Returns the HP actually removed."""
        ...

    def apply_heal(self, target: Actor, amount: int) -> int:
        """Restore hit points, capped at max. Returns the HP actually restored."""
        ...


class StandardCombatMath:
    """Flat offense-versus-defense damage model.

    Damage is the attacker's offense minus half the target's defense,
    never below zero. Healing a defeated actor does nothing.
    """

    def compute_attack_damage(self, attacker: Actor, target: Actor) -> int:
        return max(0, attacker.offense - target.defense // 2)

    def estimate_damage(self, attacker: Actor, target: Actor) -> int:
        """Read-only damage preview offered to decision sources."""
        return self.compute_attack_damage(attacker, target)

    def apply_damage(self, target: Actor, amount: int) -> int:
        if amount <= 0 or target.is_defeated:
            return 0
        dealt = min(target.hp_current, amount)
        target.hp_current -= dealt
        logger.debug(
            "Damage applied",
            target=target.name,
            amount=dealt,
            hp=target.hp_current,
        )
        return dealt

    def apply_heal(self, target: Actor, amount: int) -> int:
        # Defeat is terminal: no revival through healing
        if amount <= 0 or target.is_defeated:
            return 0
        restored = min(target.hp_max - target.hp_current, amount)
        target.hp_current += restored
        logger.debug(
            "Healing applied",
            target=target.name,
            amount=restored,
            hp=target.hp_current,
        )
        return restored


__all__ = [
    "CombatMath",
    "StandardCombatMath",
]
