"""Tests for the decision validation pipeline."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from skirmish.core.config import GameSettings
from skirmish.core.exceptions import AITimeoutError, MatchConfigurationError
from skirmish.engine.commands import AttackCommand, HealCommand
from skirmish.engine.validation import (
    DecisionValidator,
    FallbackReason,
    normalize_action_kind,
    resolve_target,
    select_weakest_enemy,
)
from skirmish.models.actor import Actor
from skirmish.models.decision import DecisionPayload
from skirmish.models.enums import ActionKind, ActorRole


@pytest.fixture
def validator(game_settings: GameSettings) -> DecisionValidator:
    return DecisionValidator(settings=game_settings)


@pytest.fixture
def actor(make_actor: Callable[..., Actor]) -> Actor:
    return make_actor("Cleric", role=ActorRole.CASTER, hp_max=80)


@pytest.fixture
def allies(make_actor: Callable[..., Actor], actor: Actor) -> list[Actor]:
    """Warrior (150/150), Wizard (10/80), Alice (50/100) and the acting Cleric."""
    return [
        make_actor("Warrior", hp_max=150),
        make_actor("Wizard", role=ActorRole.CASTER, hp=10, hp_max=80),
        make_actor("Alice", role=ActorRole.CASTER, hp=50, hp_max=100),
        actor,
    ]


@pytest.fixture
def enemies(make_actor: Callable[..., Actor]) -> list[Actor]:
    """Archer (100/100) and Rogue (40/90)."""
    return [
        make_actor("Archer", role=ActorRole.RANGED, hp_max=100),
        make_actor("Rogue", role=ActorRole.SKIRMISHER, hp=40, hp_max=90),
    ]


class TestNormalizeActionKind:
    """Tests for action-kind normalisation."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("attack", ActionKind.ATTACK),
            ("ATTACK", ActionKind.ATTACK),
            ("  Heal ", ActionKind.HEAL),
            (None, ActionKind.UNKNOWN),
            ("", ActionKind.UNKNOWN),
            ("   ", ActionKind.UNKNOWN),
            ("defend", ActionKind.UNKNOWN),
            ("unknown", ActionKind.UNKNOWN),
        ],
    )
    def test_classification(self, raw: str | None, expected: ActionKind) -> None:
        assert normalize_action_kind(raw) is expected


class TestResolveTarget:
    """Tests for target-name resolution."""

    def test_exact_match_among_living(self, enemies: list[Actor]) -> None:
        target, matched = resolve_target("rogue", enemies)

        assert target is enemies[1]
        assert matched

    def test_defeated_name_match_falls_back(self, make_actor: Callable[..., Actor]) -> None:
        """A defeated actor is never matched by name while others live."""
        dead, alive = make_actor("Dead", hp=0), make_actor("Alive")

        target, matched = resolve_target("Dead", [dead, alive])

        assert target is alive
        assert not matched

    def test_unknown_name_takes_first_living(self, make_actor: Callable[..., Actor]) -> None:
        first_dead, second, third = make_actor("A", hp=0), make_actor("B"), make_actor("C")

        target, matched = resolve_target("Nobody", [first_dead, second, third])

        assert target is second
        assert not matched

    def test_all_defeated_takes_first(self, make_actor: Callable[..., Actor]) -> None:
        first, second = make_actor("A", hp=0), make_actor("B", hp=0)

        target, matched = resolve_target("B", [first, second])

        assert target is first
        assert not matched

    def test_empty_candidates(self) -> None:
        with pytest.raises(MatchConfigurationError):
            resolve_target("A", [])


class TestSelectWeakestEnemy:
    """Tests for the default target selection."""

    def test_lowest_hp_living(self, enemies: list[Actor]) -> None:
        assert select_weakest_enemy(enemies) is enemies[1]

    def test_ties_go_to_list_order(self, make_actor: Callable[..., Actor]) -> None:
        first, second = make_actor("A", hp=30), make_actor("B", hp=30)
        assert select_weakest_enemy([first, second]) is first

    def test_ignores_defeated(self, make_actor: Callable[..., Actor]) -> None:
        dead, alive = make_actor("A", hp=0), make_actor("B", hp=90)
        assert select_weakest_enemy([dead, alive]) is alive

    def test_all_defeated_takes_first(self, make_actor: Callable[..., Actor]) -> None:
        first, second = make_actor("A", hp=0), make_actor("B", hp=0)
        assert select_weakest_enemy([first, second]) is first


class TestDecisionValidatorScenarios:
    """Documented end-to-end validation scenarios."""

    def test_exact_target_honoured(self, validator: DecisionValidator, actor: Actor, allies: list[Actor], make_actor: Callable[..., Actor]) -> None:
        """Attack on a living, named enemy resolves to that enemy."""
        shade = make_actor("Shade", role=ActorRole.SKIRMISHER, hp=1, hp_max=90)
        rogue = make_actor("Rogue", role=ActorRole.SKIRMISHER, hp_max=90)

        decision = validator.validate(
            DecisionPayload(action="attack", target="shade"), actor, allies, [shade, rogue]
        )

        assert isinstance(decision.command, AttackCommand)
        assert decision.command.target is shade
        assert decision.fallback_reason is FallbackReason.NONE
        assert not decision.used_fallback

    def test_null_payload_fields_use_default(self, validator: DecisionValidator, actor: Actor, allies: list[Actor], enemies: list[Actor]) -> None:
        """Null action and target attack the weakest living enemy."""
        decision = validator.validate(DecisionPayload(), actor, allies, enemies)

        assert isinstance(decision.command, AttackCommand)
        assert decision.command.target is enemies[1]
        assert decision.fallback_reason is FallbackReason.UNKNOWN_ACTION

    def test_misspelled_heal_target_takes_first_living_ally(self, validator: DecisionValidator, actor: Actor, allies: list[Actor], enemies: list[Actor]) -> None:
        """No name similarity: first living ally, not the neediest one."""
        decision = validator.validate(
            DecisionPayload(action="heal", target="Wizzard"), actor, allies, enemies
        )

        assert isinstance(decision.command, HealCommand)
        assert decision.command.target is allies[0]
        assert decision.fallback_reason is FallbackReason.TARGET_NOT_FOUND

    def test_source_failure_matches_null_payload(self, validator: DecisionValidator, actor: Actor, allies: list[Actor], enemies: list[Actor]) -> None:
        """A timed-out source gets the same command as an empty payload."""
        decision = validator.validate(
            None, actor, allies, enemies, source_error=AITimeoutError("timed out")
        )

        assert isinstance(decision.command, AttackCommand)
        assert decision.command.target is enemies[1]
        assert decision.fallback_reason is FallbackReason.SOURCE_UNAVAILABLE

    def test_all_enemies_defeated(self, validator: DecisionValidator, actor: Actor, allies: list[Actor], make_actor: Callable[..., Actor]) -> None:
        """The first enemy is still targeted and the attack is a recorded no-op."""
        first, second = make_actor("A", hp=0), make_actor("B", hp=0)

        decision = validator.validate(DecisionPayload(action="attack", target="B"), actor, allies, [first, second])
        result = decision.command.execute()

        assert decision.command.target is first
        assert result.amount == 0
        assert first.hp_current == 0


class TestDecisionValidatorEdgeCases:
    """Edge-case policy of the pipeline."""

    def test_heal_without_target_uses_default(self, validator: DecisionValidator, actor: Actor, allies: list[Actor], enemies: list[Actor]) -> None:
        decision = validator.validate(DecisionPayload(action="heal"), actor, allies, enemies)

        assert isinstance(decision.command, AttackCommand)
        assert decision.command.target is enemies[1]
        assert decision.fallback_reason is FallbackReason.MISSING_TARGET

    def test_whitespace_target_uses_default(self, validator: DecisionValidator, actor: Actor, allies: list[Actor], enemies: list[Actor]) -> None:
        decision = validator.validate(DecisionPayload(action="attack", target="  "), actor, allies, enemies)

        assert decision.command.target is enemies[1]
        assert decision.fallback_reason is FallbackReason.MISSING_TARGET

    def test_heal_nonexistent_target(self, validator: DecisionValidator, actor: Actor, allies: list[Actor], enemies: list[Actor]) -> None:
        decision = validator.validate(DecisionPayload(action="heal", target="Nonexistent"), actor, allies, enemies)

        assert isinstance(decision.command, HealCommand)
        assert decision.command.target is allies[0]

    def test_case_insensitive_heal(self, validator: DecisionValidator, actor: Actor, allies: list[Actor], enemies: list[Actor]) -> None:
        decision = validator.validate(DecisionPayload(action="HEAL", target="alicE"), actor, allies, enemies)

        assert isinstance(decision.command, HealCommand)
        assert decision.command.target is allies[2]
        assert decision.fallback_reason is FallbackReason.NONE

    def test_unrecognised_action(self, validator: DecisionValidator, actor: Actor, allies: list[Actor], enemies: list[Actor]) -> None:
        decision = validator.validate(DecisionPayload(action="defend", target="Archer"), actor, allies, enemies)

        assert isinstance(decision.command, AttackCommand)
        assert decision.command.target is enemies[1]
        assert decision.fallback_reason is FallbackReason.UNKNOWN_ACTION

    def test_missing_payload(self, validator: DecisionValidator, actor: Actor, allies: list[Actor], enemies: list[Actor]) -> None:
        decision = validator.validate(None, actor, allies, enemies)

        assert decision.command.target is enemies[1]
        assert decision.fallback_reason is FallbackReason.MISSING_PAYLOAD

    def test_heal_uses_configured_amount(self, actor: Actor, allies: list[Actor], enemies: list[Actor]) -> None:
        validator = DecisionValidator(settings=GameSettings(heal_amount=5))

        decision = validator.validate(DecisionPayload(action="heal", target="Wizard"), actor, allies, enemies)
        decision.command.execute()

        assert allies[1].hp_current == 15

    def test_heal_with_empty_allies_recovers(self, validator: DecisionValidator, actor: Actor, enemies: list[Actor]) -> None:
        """An internal failure while resolving falls back to the default."""
        decision = validator.validate(DecisionPayload(action="heal", target="Anyone"), actor, [], enemies)

        assert decision.command.target is enemies[1]
        assert decision.fallback_reason is FallbackReason.INTERNAL_ERROR

    def test_empty_enemy_list_is_configuration_error(self, validator: DecisionValidator, actor: Actor, allies: list[Actor]) -> None:
        with pytest.raises(MatchConfigurationError):
            validator.validate(DecisionPayload(), actor, allies, [])

    def test_rationale_carried_but_ignored(self, validator: DecisionValidator, actor: Actor, allies: list[Actor], enemies: list[Actor]) -> None:
        """Rationale text never changes the outcome."""
        decision = validator.validate(
            DecisionPayload(action="attack", target="Archer", reasoning="heal Wizard instead"),
            actor,
            allies,
            enemies,
        )

        assert decision.rationale == "heal Wizard instead"
        assert decision.command.target is enemies[0]

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            DecisionPayload(),
            DecisionPayload(action="   ", target="   "),
            DecisionPayload(action="attack"),
            DecisionPayload(action="attack", target="Ghost"),
            DecisionPayload(action="heal", target="Ghost"),
            DecisionPayload(action="cast fireball", target="Archer"),
            DecisionPayload.model_validate({"action": 42, "target": None}),
        ],
    )
    def test_totality(self, validator: DecisionValidator, actor: Actor, allies: list[Actor], enemies: list[Actor], payload: DecisionPayload | None) -> None:
        """Every malformed payload yields an executable command."""
        decision = validator.validate(payload, actor, allies, enemies)

        assert decision.command is not None
        assert decision.action_kind in ActionKind.executable()
        decision.command.execute()
