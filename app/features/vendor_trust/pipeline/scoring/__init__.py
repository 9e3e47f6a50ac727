"""
Vendor scoring package.

Provides the metrics calculator that scores vendors from contact feedback
and the badge rules it evaluates.
"""

from .badges import BADGE_RULES, BadgeInputs, BadgeRule, evaluate_badges
from .service import MetricsCalculator, metrics_calculator

__all__ = [
    "BADGE_RULES",
    "BadgeInputs",
    "BadgeRule",
    "MetricsCalculator",
    "evaluate_badges",
    "metrics_calculator",
]
