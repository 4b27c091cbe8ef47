"""
Rating Rules — ELO-style constants and pure formulas (single source of truth)

K-factor tiers and the rating bounds are project constants, not a published
standard. They live in RatingConfig so deployments can override them.
"""

import math
import os
from dataclasses import dataclass
from typing import Literal

ExpectedOutcome = Literal["win", "loss", "even"]

DEFAULT_RATING = 1500
RATING_FLOOR = 1000
RATING_CEILING = 2000


@dataclass(frozen=True)
class RatingConfig:
    default_rating: int = DEFAULT_RATING
    rating_floor: int = RATING_FLOOR
    rating_ceiling: int = RATING_CEILING
    # (upper bound exclusive, K); ratings at or above the last bound use fallback_k
    k_tiers: tuple = ((1500, 40), (1800, 32))
    fallback_k: int = 24
    favourite_threshold: float = 0.6
    underdog_threshold: float = 0.4

    @classmethod
    def from_env(cls) -> "RatingConfig":
        """Defaults overridden by RATING_DEFAULT / RATING_FLOOR / RATING_CEILING."""
        return cls(
            default_rating=int(os.getenv("RATING_DEFAULT", DEFAULT_RATING)),
            rating_floor=int(os.getenv("RATING_FLOOR", RATING_FLOOR)),
            rating_ceiling=int(os.getenv("RATING_CEILING", RATING_CEILING)),
        )


DEFAULT_CONFIG = RatingConfig()

# Deployment settings shared by player validation, draw seeding and score entry
RATING_CONFIG = RatingConfig.from_env()


def expected_score(rating_a: float, rating_b: float) -> float:
    """
    Expected score for side A against side B.

    Formula: E_A = 1 / (1 + 10^((R_B - R_A) / 400))
    """
    return 1 / (1 + 10 ** ((rating_b - rating_a) / 400))


def classify_expectation(expected: float, config: RatingConfig = DEFAULT_CONFIG) -> ExpectedOutcome:
    if expected > config.favourite_threshold:
        return "win"
    if expected < config.underdog_threshold:
        return "loss"
    return "even"


def k_factor(rating: float, config: RatingConfig = DEFAULT_CONFIG) -> int:
    """40 below 1500, 32 below 1800, 24 otherwise (with default tiers)."""
    for upper_bound, k in config.k_tiers:
        if rating < upper_bound:
            return k
    return config.fallback_k


def round_half_up(value: float) -> int:
    """Round to nearest integer, halves toward +inf (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def clamp_rating(rating: float, config: RatingConfig = DEFAULT_CONFIG) -> int:
    return int(max(config.rating_floor, min(config.rating_ceiling, rating)))


def rating_delta(rating: float, actual: float, expected: float, config: RatingConfig = DEFAULT_CONFIG) -> int:
    """round(K * (actual - expected)) with K chosen from the player's own rating."""
    return round_half_up(k_factor(rating, config) * (actual - expected))
