"""Pydantic V2 schemas for combatants and teams.

Actors are plain records of identity and numbers. Liveness is never
stored: ``is_alive`` and ``is_defeated`` are recomputed from hit points
on every read, and teams keep defeated members in place so that turn
order and display indexing stay stable.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from skirmish.models.enums import ActorRole


class Actor(BaseModel):
    """A combatant in a match.

    Attributes:
        name: Unique display name (looked up case-insensitively).
        role: Tactical role tag.
        hp_current: Current hit points.
        hp_max: Maximum hit points.
        resource_current: Current resource pool (e.g. mana).
        resource_max: Maximum resource pool.
        offense: Offense rating used by the combat math.
        defense: Defense rating used by the combat math.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
    )

    name: str = Field(min_length=1, max_length=64, description="Display name")
    role: ActorRole = Field(description="Tactical role")
    hp_current: Annotated[int, Field(ge=0, description="Current HP")]
    hp_max: Annotated[int, Field(ge=1, description="Maximum HP")]
    resource_current: Annotated[int, Field(ge=0, description="Current resource")] = 0
    resource_max: Annotated[int, Field(ge=0, description="Maximum resource")] = 0
    offense: Annotated[int, Field(ge=0, description="Offense rating")] = 0
    defense: Annotated[int, Field(ge=0, description="Defense rating")] = 0

    @field_validator("name", mode="after")
    @classmethod
    def strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("name must not be blank")
        return stripped

    @model_validator(mode="after")
    def check_pools(self) -> "Actor":
        """Enforce ``0 <= current <= max`` for hit points and resource."""
        if self.hp_current > self.hp_max:
            raise ValueError(
                f"hp_current ({self.hp_current}) exceeds hp_max ({self.hp_max})"
            )
        if self.resource_current > self.resource_max:
            raise ValueError(
                f"resource_current ({self.resource_current}) exceeds "
                f"resource_max ({self.resource_max})"
            )
        return self

    @property
    def is_defeated(self) -> bool:
        """True once hit points reach zero; defeat is permanent."""
        return self.hp_current == 0

    @property
    def is_alive(self) -> bool:
        return self.hp_current > 0

    @property
    def hp_percentage(self) -> float:
        return (self.hp_current / self.hp_max) * 100

    def matches_name(self, name: str | None) -> bool:
        """Check a free-text name against this actor, ignoring case and padding.

        Args:
            name: Candidate name, possibly None or padded.

        Returns:
            True if the name refers to this actor.
        """
        if name is None:
            return False
        return self.name.casefold() == name.strip().casefold()

    def status_line(self) -> str:
        """One-line status used by displays and prompts."""
        status = "Alive" if self.is_alive else "Defeated"
        return f"{self.name} ({self.role.display_name}): {self.hp_current}/{self.hp_max} HP - {status}"


class Team(BaseModel):
    """An ordered, fixed-membership group of actors.

    Insertion order is turn order. Members are never removed; defeat is
    represented by an actor's hit points only.

    Attributes:
        name: Team display name.
        members: Actors in turn order.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    name: str = Field(min_length=1, max_length=64, description="Team name")
    members: tuple[Actor, ...] = Field(default=(), description="Actors in turn order")

    @property
    def living_members(self) -> list[Actor]:
        return [member for member in self.members if member.is_alive]

    @property
    def living_count(self) -> int:
        return sum(1 for member in self.members if member.is_alive)

    @property
    def is_eliminated(self) -> bool:
        """True when no member has hit points left."""
        return self.living_count == 0

    def find_member(self, name: str | None) -> Actor | None:
        """Find a member by case-insensitive name, living or not."""
        for member in self.members:
            if member.matches_name(name):
                return member
        return None

    @property
    def size(self) -> int:
        return len(self.members)


__all__ = [
    "Actor",
    "Team",
]
