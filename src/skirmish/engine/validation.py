"""Decision validation pipeline.

Turns an untrusted DecisionPayload into an executable command. The
pipeline is total: any payload, including ``None`` or the failure of a
decision source, yields a command. Well-formed intent is preserved;
anything that cannot be honoured degrades to the default action, an
attack on the weakest living enemy.

Example:
    >>> validator = DecisionValidator()
    >>> decision = validator.validate(
    ...     DecisionPayload(action="heal", target="alicE"),
    ...     actor=wizard, allies=[alice, wizard], enemies=[orc],
    ... )
    >>> decision.command.target is alice
    True
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from skirmish.core.config import GameSettings, get_settings
from skirmish.core.exceptions import MatchConfigurationError
from skirmish.core.logging import get_logger
from skirmish.engine.combat_math import CombatMath, StandardCombatMath
from skirmish.engine.commands import AttackCommand, GameCommand, HealCommand
from skirmish.models.actor import Actor
from skirmish.models.decision import DecisionPayload
from skirmish.models.enums import ActionKind


logger = get_logger(__name__)


class FallbackReason(StrEnum):
    """Why a payload was not honoured as given."""

    NONE = "none"
    SOURCE_UNAVAILABLE = "source_unavailable"
    MISSING_PAYLOAD = "missing_payload"
    UNKNOWN_ACTION = "unknown_action"
    MISSING_TARGET = "missing_target"
    TARGET_NOT_FOUND = "target_not_found"
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class ValidatedDecision:
    """Output of the pipeline: the command plus how it was reached.

    Attributes:
        command: Executable command, never None.
        action_kind: Kind of the produced command.
        fallback_reason: NONE when the payload was honoured exactly.
        rationale: Rationale carried by the payload, if any.
    """

    command: GameCommand
    action_kind: ActionKind
    fallback_reason: FallbackReason = FallbackReason.NONE
    rationale: str | None = None

    @property
    def used_fallback(self) -> bool:
        return self.fallback_reason is not FallbackReason.NONE

    @property
    def target(self) -> Actor:
        return self.command.target


# =============================================================================
# Pure helpers
# =============================================================================


def normalize_action_kind(raw: str | None) -> ActionKind:
    """Classify a free-text action against the executable kinds.

    Args:
        raw: Action text from the payload.

    Returns:
        ATTACK or HEAL on a case-insensitive match, UNKNOWN otherwise.
    """
    if raw is None:
        return ActionKind.UNKNOWN
    cleaned = raw.strip().casefold()
    for kind in ActionKind.executable():
        if cleaned == kind.value:
            return kind
    return ActionKind.UNKNOWN


def resolve_target(name: str | None, candidates: Sequence[Actor]) -> tuple[Actor, bool]:
    """Resolve a target name against a candidate list.

    Resolution order: exact case-insensitive match among living
    candidates, then the first living candidate, then the first
    candidate regardless of status.

    Args:
        name: Requested target name.
        candidates: Allies or enemies in list order.

    Returns:
        Tuple of (resolved actor, whether the name matched).

    Raises:
        MatchConfigurationError: If there are no candidates at all.
    """
    if not candidates:
        raise MatchConfigurationError("Cannot resolve a target from an empty candidate list")

    living = [candidate for candidate in candidates if candidate.is_alive]
    for candidate in living:
        if candidate.matches_name(name):
            return candidate, True

    if living:
        return living[0], False
    return candidates[0], False


def select_weakest_enemy(enemies: Sequence[Actor]) -> Actor:
    """Pick the living enemy with the fewest hit points.

    Ties go to the earlier enemy in list order. With no living enemy the
    first enemy is returned.

    Raises:
        MatchConfigurationError: If the enemy list is empty.
    """
    if not enemies:
        raise MatchConfigurationError("Cannot select a target from an empty enemy list")

    weakest: Actor | None = None
    for enemy in enemies:
        if enemy.is_alive and (weakest is None or enemy.hp_current < weakest.hp_current):
            weakest = enemy
    return weakest if weakest is not None else enemies[0]


# =============================================================================
# Validator
# =============================================================================


class DecisionValidator:
    """Convert decision payloads into commands.

    Args:
        combat_math: Math handed to every command built.
        settings: Game settings (heal amount). Defaults to global settings.
    """

    def __init__(
        self,
        combat_math: CombatMath | None = None,
        settings: GameSettings | None = None,
    ) -> None:
        self.combat_math = combat_math or StandardCombatMath()
        self.settings = settings or get_settings().game

    @property
    def heal_amount(self) -> int:
        return self.settings.heal_amount

    def validate(
        self,
        payload: DecisionPayload | None,
        actor: Actor,
        allies: Sequence[Actor],
        enemies: Sequence[Actor],
        *,
        source_error: BaseException | None = None,
    ) -> ValidatedDecision:
        """Validate a payload and build the command for this turn.

        Args:
            payload: Raw decision, or None if the source produced nothing.
            actor: Acting actor.
            allies: Acting actor's team in list order.
            enemies: Opposing team in list order.
            source_error: Failure raised by the decision source, if any.

        Returns:
            ValidatedDecision whose command is always executable.

        Raises:
            MatchConfigurationError: If the enemy list is empty, which a
                validated match never produces.
        """
        rationale = payload.rationale if payload is not None else None
        if rationale:
            logger.info("Decision rationale", actor=actor.name, rationale=rationale)

        if source_error is not None:
            logger.warning(
                "Decision source failed, using default action",
                actor=actor.name,
                error=str(source_error),
                error_type=type(source_error).__name__,
            )
            return self._default(actor, enemies, FallbackReason.SOURCE_UNAVAILABLE, rationale)

        if payload is None:
            return self._default(actor, enemies, FallbackReason.MISSING_PAYLOAD, rationale)

        try:
            kind = normalize_action_kind(payload.action_kind)
            if kind is ActionKind.UNKNOWN:
                logger.info(
                    "Unrecognised action, using default action",
                    actor=actor.name,
                    action=payload.action_kind,
                )
                return self._default(actor, enemies, FallbackReason.UNKNOWN_ACTION, rationale)

            if not payload.has_target:
                logger.info(
                    "Decision has no target, using default action",
                    actor=actor.name,
                    action=kind.value,
                )
                return self._default(actor, enemies, FallbackReason.MISSING_TARGET, rationale)

            candidates = enemies if kind is ActionKind.ATTACK else allies
            target, matched = resolve_target(payload.target_name, candidates)
        except Exception:
            logger.exception("Decision validation failed, using default action", actor=actor.name)
            return self._default(actor, enemies, FallbackReason.INTERNAL_ERROR, rationale)

        reason = FallbackReason.NONE
        if not matched:
            reason = FallbackReason.TARGET_NOT_FOUND
            logger.info(
                "Target not found, using fallback target",
                actor=actor.name,
                requested=payload.target_name,
                resolved=target.name,
            )

        return ValidatedDecision(
            command=self._build(kind, actor, target),
            action_kind=kind,
            fallback_reason=reason,
            rationale=rationale,
        )

    def default_command(self, actor: Actor, enemies: Sequence[Actor]) -> GameCommand:
        """The canonical safe action: attack the weakest living enemy."""
        return AttackCommand(actor, select_weakest_enemy(enemies), self.combat_math)

    def _default(
        self,
        actor: Actor,
        enemies: Sequence[Actor],
        reason: FallbackReason,
        rationale: str | None,
    ) -> ValidatedDecision:
        return ValidatedDecision(
            command=self.default_command(actor, enemies),
            action_kind=ActionKind.ATTACK,
            fallback_reason=reason,
            rationale=rationale,
        )

    def _build(self, kind: ActionKind, actor: Actor, target: Actor) -> GameCommand:
        if kind is ActionKind.HEAL:
            return HealCommand(actor, target, self.heal_amount, self.combat_math)
        return AttackCommand(actor, target, self.combat_math)


__all__ = [
    "FallbackReason",
    "ValidatedDecision",
    "normalize_action_kind",
    "resolve_target",
    "select_weakest_enemy",
    "DecisionValidator",
]
