"""Prompt construction for LLM decision sources."""

from __future__ import annotations

from collections.abc import Sequence

from skirmish.engine.combat_math import StandardCombatMath
from skirmish.engine.validation import select_weakest_enemy
from skirmish.models.actor import Actor
from skirmish.models.turn_state import TurnState


# =============================================================================
# System Prompt
# =============================================================================


DECISION_SYSTEM_PROMPT = """You control one combatant in a turn-based team battle.
Each turn you choose exactly one action for your combatant.

Rules:
- Only living characters can be targeted.
- "attack" targets an enemy, "heal" targets an ally (yourself included).
- Use the exact names listed as valid targets.
- Answer with a single JSON object and nothing else."""


CRITICAL_PERCENT = 30.0
WOUNDED_PERCENT = 60.0


def health_marker(percentage: float) -> str:
    """Return the CRITICAL/WOUNDED marker for an HP percentage."""
    if percentage < CRITICAL_PERCENT:
        return " ⚠️ CRITICAL"
    if percentage < WOUNDED_PERCENT:
        return " ⚡ WOUNDED"
    return ""


def format_actor_list(actors: Sequence[Actor]) -> str:
    lines = []
    for actor in actors:
        pct = actor.hp_percentage
        lines.append(
            f"  - {actor.name} ({actor.role.display_name}): "
            f"{actor.hp_current}/{actor.hp_max} HP ({pct:.0f}%){health_marker(pct)}"
        )
    return "\n".join(lines)


def _living_names(actors: Sequence[Actor]) -> str:
    names = [actor.name for actor in actors if actor.is_alive]
    return ", ".join(names) if names else "none"


def build_decision_prompt(
    actor: Actor,
    allies: Sequence[Actor],
    enemies: Sequence[Actor],
    turn_state: TurnState,
    *,
    heal_amount: int,
    combat_math: StandardCombatMath | None = None,
) -> str:
    """Build the tactical briefing for one turn.

    The briefing covers the actor's own status, both teams with health
    markers, the available actions with a damage estimate against the
    weakest enemy, role guidance, the turn counters, the required JSON
    format and the valid target names.

    Args:
        actor: The actor whose turn it is.
        allies: The actor's team.
        enemies: The opposing team (must not be empty).
        turn_state: Current counters.
        heal_amount: Hit points a heal restores.
        combat_math: Math used for the damage estimate.

    Returns:
        Prompt text for the user message.
    """
    combat_math = combat_math or StandardCombatMath()
    weakest = select_weakest_enemy(enemies)
    estimate = combat_math.estimate_damage(actor, weakest)

    sections = [
        f"You are {actor.name}, a {actor.role.display_name} in a tactical RPG battle.",
        "\n".join([
            "YOUR STATUS:",
            f"- HP: {actor.hp_current}/{actor.hp_max} ({actor.hp_percentage:.0f}%)",
            f"- Mana: {actor.resource_current}/{actor.resource_max}",
            f"- Attack Power: {actor.offense}",
            f"- Defense: {actor.defense}",
        ]),
        "YOUR TEAM (Allies):\n" + format_actor_list(allies),
        "ENEMIES:\n" + format_actor_list(enemies),
        "\n".join([
            "AVAILABLE ACTIONS:",
            f"1. attack <enemy_name> - Estimated damage to {weakest.name}: ~{estimate} HP",
            f"2. heal <ally_name> - Restores {heal_amount} HP",
        ]),
        "\n".join([
            "TACTICAL GUIDANCE:",
            "- Focus fire: Attack wounded enemies to eliminate threats quickly",
            f"- Protect allies: Heal teammates below {CRITICAL_PERCENT:.0f}% HP to prevent deaths",
            f"- Consider your role: {actor.role.tactical_guidance}",
            f"- Current turn: {turn_state.turn_number}, Round: {turn_state.round_number}",
        ]),
        "\n".join([
            "Respond ONLY with valid JSON in this exact format:",
            "{",
            '  "action": "attack" | "heal",',
            '  "target": "exact_character_name",',
            '  "reasoning": "brief tactical explanation"',
            "}",
        ]),
        "\n".join([
            f"Valid enemy names: {_living_names(enemies)}",
            f"Valid ally names: {_living_names(allies)}",
        ]),
    ]
    return "\n\n".join(sections)


__all__ = [
    "DECISION_SYSTEM_PROMPT",
    "CRITICAL_PERCENT",
    "WOUNDED_PERCENT",
    "health_marker",
    "format_actor_list",
    "build_decision_prompt",
]
