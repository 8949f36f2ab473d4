"""Enumeration types for the Skirmish combat engine."""

from __future__ import annotations

from enum import StrEnum


class ActorRole(StrEnum):
    """Tactical role of a combatant.

    A role only carries default tactical guidance (shown to decision
    sources); the engine itself never branches on it.
    """

    TANK = "tank"
    CASTER = "caster"
    RANGED = "ranged"
    SKIRMISHER = "skirmisher"

    @property
    def display_name(self) -> str:
        """Get the capitalised role name (e.g., 'Tank')."""
        return self.value.capitalize()

    @property
    def tactical_guidance(self) -> str:
        """Get the default tactical advice for this role."""
        return _ROLE_GUIDANCE[self]


_ROLE_GUIDANCE: dict[ActorRole, str] = {
    ActorRole.TANK: "Tank damage and protect weaker allies",
    ActorRole.CASTER: "Deal high damage but protect yourself",
    ActorRole.RANGED: "Pick off wounded enemies from range",
    ActorRole.SKIRMISHER: "Target high-value enemies quickly",
}


class ActionKind(StrEnum):
    """Kinds of action a decision can request.

    UNKNOWN is the classification for anything that is not a recognised
    action; it is never executed.
    """

    ATTACK = "attack"
    HEAL = "heal"
    UNKNOWN = "unknown"

    @classmethod
    def executable(cls) -> tuple[ActionKind, ...]:
        """Get the action kinds that map to a command."""
        return (cls.ATTACK, cls.HEAL)


__all__ = [
    "ActorRole",
    "ActionKind",
]
