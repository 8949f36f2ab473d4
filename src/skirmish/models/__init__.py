"""Pydantic V2 schemas for the Skirmish combat engine.

Submodules:
    enums: ActorRole and ActionKind.
    actor: Actor and Team.
    decision: DecisionPayload, the untrusted output of a decision source.
    turn_state: TurnState counters with pure transitions.
    factory: Role-preset actor factories.

Example:
    >>> from skirmish.models import Team, create_tank, create_caster
    >>> team = Team(name="Blue", members=(create_tank("Bob"), create_caster("Wizard")))
    >>> team.living_count
    2
"""

from __future__ import annotations

from skirmish.models.actor import Actor, Team
from skirmish.models.decision import DecisionPayload
from skirmish.models.enums import ActionKind, ActorRole
from skirmish.models.factory import (
    ROLE_PRESETS,
    RolePreset,
    create_actor,
    create_caster,
    create_ranged,
    create_skirmisher,
    create_tank,
)
from skirmish.models.turn_state import TurnState


__all__ = [
    # Enumerations
    "ActorRole",
    "ActionKind",
    # Entities
    "Actor",
    "Team",
    # Decisions
    "DecisionPayload",
    # Turn state
    "TurnState",
    # Factories
    "RolePreset",
    "ROLE_PRESETS",
    "create_actor",
    "create_tank",
    "create_caster",
    "create_ranged",
    "create_skirmisher",
]
