"""Untrusted decision payload returned by a decision source.

The payload is deliberately permissive: every field may be missing,
null, blank, of the wrong type or name an actor that does not exist.
Turning it into something executable is the job of the validation
pipeline, not of this model.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class DecisionPayload(BaseModel):
    """Raw action proposal for one actor's turn.

    Accepts both the engine field names and the short wire names used in
    LLM prompts (``action``, ``target``, ``reasoning``).

    Attributes:
        action_kind: Requested action, free text.
        target_name: Name of the intended target, free text.
        rationale: Explanation for audit/display only.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    action_kind: str | None = Field(
        default=None,
        validation_alias=AliasChoices("action_kind", "action", "actionKind"),
    )
    target_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("target_name", "target", "targetName"),
    )
    rationale: str | None = Field(
        default=None,
        validation_alias=AliasChoices("rationale", "reasoning", "reason"),
    )

    @field_validator("action_kind", "target_name", "rationale", mode="before")
    @classmethod
    def drop_non_strings(cls, value: Any) -> str | None:
        # Numbers, lists and objects from a confused model carry no usable intent
        return value if isinstance(value, str) else None

    @classmethod
    def empty(cls) -> DecisionPayload:
        """Payload with every field unset."""
        return cls()

    @property
    def has_target(self) -> bool:
        return bool(self.target_name and self.target_name.strip())


__all__ = [
    "DecisionPayload",
]
