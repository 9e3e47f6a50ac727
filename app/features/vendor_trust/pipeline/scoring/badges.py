"""
Badge rules.

Each rule is a pure predicate over a BadgeInputs snapshot plus the display
metadata of the badge it grants. A vendor's badge set is the union of the
rules that hold, rebuilt from scratch on every metrics run.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime

from app.features.vendor_trust.domain import Badge, BadgeColor, BadgeType


@dataclass(frozen=True, slots=True)
class BadgeInputs:
    average_response_minutes: float | None
    response_rate: float
    trust_score: int
    activity_score: int
    feedback_count: int


@dataclass(frozen=True, slots=True)
class BadgeRule:
    type: BadgeType
    label: str
    icon: str
    color: BadgeColor
    criteria: str
    predicate: Callable[[BadgeInputs], bool]

    def applies(self, inputs: BadgeInputs) -> bool:
        return self.predicate(inputs)

    def award(self, earned_at: datetime) -> Badge:
        return Badge(
            type=self.type,
            label=self.label,
            icon=self.icon,
            color=self.color,
            criteria=self.criteria,
            earned_at=earned_at,
        )


def _quick_response(inputs: BadgeInputs) -> bool:
    return (
        inputs.average_response_minutes is not None
        and inputs.average_response_minutes < 30
        and inputs.response_rate > 80
        and inputs.feedback_count >= 5
    )


def _reliable(inputs: BadgeInputs) -> bool:
    return inputs.response_rate > 90 and inputs.feedback_count >= 5


def _top_rated(inputs: BadgeInputs) -> bool:
    return inputs.trust_score > 80 and inputs.feedback_count >= 10


def _active_now(inputs: BadgeInputs) -> bool:
    return inputs.activity_score == 100


BADGE_RULES: tuple[BadgeRule, ...] = (
    BadgeRule(
        type=BadgeType.QUICK_RESPONSE,
        label="Quick Response",
        icon="⚡",
        color=BadgeColor.YELLOW,
        criteria="Responds in under 30 minutes",
        predicate=_quick_response,
    ),
    BadgeRule(
        type=BadgeType.RELIABLE,
        label="Reliable",
        icon="✅",
        color=BadgeColor.GREEN,
        criteria="90%+ response rate",
        predicate=_reliable,
    ),
    BadgeRule(
        type=BadgeType.TOP_RATED,
        label="Top Rated",
        icon="🏆",
        color=BadgeColor.GOLD,
        criteria="Excellent overall performance",
        predicate=_top_rated,
    ),
    BadgeRule(
        type=BadgeType.ACTIVE_NOW,
        label="Active Now",
        icon="🟢",
        color=BadgeColor.GREEN,
        criteria="Online in the last 30 minutes",
        predicate=_active_now,
    ),
)


def evaluate_badges(
    inputs: BadgeInputs, earned_at: datetime, rules: Sequence[BadgeRule] = BADGE_RULES
) -> list[Badge]:
    """Return the badges whose rules hold, in rule order."""
    return [rule.award(earned_at) for rule in rules if rule.applies(inputs)]
