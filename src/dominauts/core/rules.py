"""Rule configuration for a match.

A :class:`RuleSet` is an immutable bag of rule parameters.  Every variant has
a preset; the ``strict`` flag selects the tournament reading of the rules the
variants disagree on (opening with the highest double, filling a spinner
before playing elsewhere, covering a double before moving on), while
``strict=False`` selects the relaxed house reading.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any

from dominauts.core.enums import TiePolicy, Variant


@dataclass(frozen=True, slots=True)
class RuleSet:
    """Immutable rule parameters for one match."""

    variant: Variant
    max_pip: int = 6
    hand_size: int = 7
    min_players: int = 2
    max_players: int = 4
    can_draw: bool = True
    # None = keep drawing until a tile fits.
    draws_per_turn: int | None = None
    opening_highest_double: bool = False
    opening_requires_double: bool = False
    spinner_fill_required: bool = False
    spinner_branches: int = 4
    branch_cap: int = 4
    foot_size: int = 3
    double_grants_extra_play: bool = False
    double_must_be_satisfied: bool = False
    block_tie_policy: TiePolicy = TiePolicy.SPLIT
    target_score: int | None = None
    round_count: int | None = None
    double_ends_count_twice: bool = False
    double_blank_penalty: int = 0
    turn_seconds: float | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.variant, Variant):
            object.__setattr__(self, "variant", Variant.parse(str(self.variant)))
        if not isinstance(self.block_tie_policy, TiePolicy):
            object.__setattr__(
                self, "block_tie_policy", TiePolicy(str(self.block_tie_policy))
            )
        if self.max_pip < 1:
            raise ValueError("max_pip must be >= 1")
        if self.hand_size < 1:
            raise ValueError("hand_size must be >= 1")
        if not 1 <= self.min_players <= self.max_players:
            raise ValueError("Need 1 <= min_players <= max_players")
        if self.draws_per_turn is not None and self.draws_per_turn < 1:
            raise ValueError("draws_per_turn must be >= 1 or None")
        if self.spinner_branches < 1 or self.branch_cap < 1 or self.foot_size < 1:
            raise ValueError("spinner_branches, branch_cap and foot_size must be >= 1")
        if self.target_score is not None and self.target_score <= 0:
            raise ValueError("target_score must be positive")
        if self.round_count is not None and self.round_count <= 0:
            raise ValueError("round_count must be positive")
        if (
            self.variant == Variant.MEXICAN_TRAIN
            and self.round_count is not None
            and self.round_count > self.max_pip + 1
        ):
            raise ValueError("Mexican Train has at most one round per engine double")
        if self.turn_seconds is not None and self.turn_seconds <= 0:
            raise ValueError("turn_seconds must be positive")

    # ── Presets ──────────────────────────────────────────────────────────

    @classmethod
    def all_fives(cls, strict: bool = True, **overrides: Any) -> RuleSet:
        base = cls(
            Variant.ALL_FIVES,
            opening_highest_double=strict,
            target_score=150,
        )
        return base.with_(**overrides)

    @classmethod
    def block(cls, strict: bool = True, **overrides: Any) -> RuleSet:
        base = cls(
            Variant.BLOCK,
            can_draw=False,
            opening_highest_double=strict,
            target_score=100,
        )
        return base.with_(**overrides)

    @classmethod
    def cuban(cls, strict: bool = True, **overrides: Any) -> RuleSet:
        base = cls(
            Variant.CUBAN,
            max_pip=9,
            hand_size=10,
            can_draw=False,
            opening_highest_double=strict,
            spinner_fill_required=strict,
            target_score=150,
        )
        return base.with_(**overrides)

    @classmethod
    def chicken_foot(cls, strict: bool = True, **overrides: Any) -> RuleSet:
        base = cls(
            Variant.CHICKEN_FOOT,
            max_pip=9,
            max_players=8,
            draws_per_turn=1,
            opening_requires_double=True,
            opening_highest_double=strict,
            spinner_fill_required=strict,
            double_blank_penalty=50,
            target_score=150,
        )
        return base.with_(**overrides)

    @classmethod
    def mexican_train(cls, strict: bool = True, **overrides: Any) -> RuleSet:
        max_pip = overrides.get("max_pip", 12)
        overrides.setdefault("round_count", max_pip + 1)
        base = cls(
            Variant.MEXICAN_TRAIN,
            max_pip=12,
            hand_size=10,
            max_players=8,
            draws_per_turn=1,
            double_grants_extra_play=True,
            double_must_be_satisfied=strict,
            round_count=13,
        )
        return base.with_(**overrides)

    @classmethod
    def for_variant(
        cls, variant: Variant | str, strict: bool = True, **overrides: Any
    ) -> RuleSet:
        """Preset for *variant* with optional field overrides."""
        if not isinstance(variant, Variant):
            variant = Variant.parse(variant)
        return _PRESETS[variant](strict, **overrides)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RuleSet:
        """Build a rule set from session configuration (e.g. decoded JSON).

        ``variant`` is required; ``strict`` selects the preset flavour and
        every other key overrides a field of that preset.
        """
        if "variant" not in data:
            raise ValueError("Session configuration lacks a 'variant'")
        known = {f.name for f in fields(cls)}
        overrides = {k: v for k, v in data.items() if k not in ("variant", "strict")}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ValueError(f"Unknown rule parameters: {', '.join(unknown)}")
        return cls.for_variant(
            str(data["variant"]), bool(data.get("strict", True)), **overrides
        )

    def with_(self, **changes: Any) -> RuleSet:
        """Copy with *changes* applied (re-validated)."""
        return replace(self, **changes) if changes else self

    # ── Derived ──────────────────────────────────────────────────────────

    @property
    def tile_count(self) -> int:
        return (self.max_pip + 1) * (self.max_pip + 2) // 2

    def engine_pip(self, round_number: int) -> int:
        """Mexican Train hub double for *round_number* (1-based, descending)."""
        return (self.max_pip - (round_number - 1)) % (self.max_pip + 1)


_PRESETS = {
    Variant.ALL_FIVES: RuleSet.all_fives,
    Variant.BLOCK: RuleSet.block,
    Variant.CUBAN: RuleSet.cuban,
    Variant.CHICKEN_FOOT: RuleSet.chicken_foot,
    Variant.MEXICAN_TRAIN: RuleSet.mexican_train,
}
