"""Factories for role-preset actors."""

from __future__ import annotations

from dataclasses import dataclass

from skirmish.models.actor import Actor
from skirmish.models.enums import ActorRole


@dataclass(frozen=True)
class RolePreset:
    """Starting numbers for a role."""

    hp: int
    resource: int
    offense: int
    defense: int


ROLE_PRESETS: dict[ActorRole, RolePreset] = {
    ActorRole.TANK: RolePreset(hp=150, resource=50, offense=40, defense=20),
    ActorRole.CASTER: RolePreset(hp=80, resource=150, offense=60, defense=5),
    ActorRole.RANGED: RolePreset(hp=100, resource=80, offense=50, defense=10),
    ActorRole.SKIRMISHER: RolePreset(hp=90, resource=60, offense=55, defense=8),
}


def create_actor(name: str, role: ActorRole | str) -> Actor:
    """Create a full-health actor from its role preset.

    Args:
        name: Display name.
        role: Role tag or its string value.

    Returns:
        A new Actor at maximum hit points and resource.
    """
    role = ActorRole(role)
    preset = ROLE_PRESETS[role]
    return Actor(
        name=name,
        role=role,
        hp_current=preset.hp,
        hp_max=preset.hp,
        resource_current=preset.resource,
        resource_max=preset.resource,
        offense=preset.offense,
        defense=preset.defense,
    )


def create_tank(name: str) -> Actor:
    return create_actor(name, ActorRole.TANK)


def create_caster(name: str) -> Actor:
    return create_actor(name, ActorRole.CASTER)


def create_ranged(name: str) -> Actor:
    return create_actor(name, ActorRole.RANGED)


def create_skirmisher(name: str) -> Actor:
    return create_actor(name, ActorRole.SKIRMISHER)


__all__ = [
    "RolePreset",
    "ROLE_PRESETS",
    "create_actor",
    "create_tank",
    "create_caster",
    "create_ranged",
    "create_skirmisher",
]
