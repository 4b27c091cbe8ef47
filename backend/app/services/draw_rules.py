"""
Draw Rules — round-robin rotation and draw constants (single source of truth)

Singles players and fixed doubles partnerships both rotate through the same
circle method with the same bye formula. Mixer doubles reuse the constants.
"""

from typing import List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

# =============================================================================
# Draw Constants
# =============================================================================

MIN_SINGLES_PLAYERS = 2
MIN_DOUBLES_PLAYERS = 4

# Female pool shuffle seed = round_number + offset, so both pools never share a permutation
MIXER_FEMALE_SEED_OFFSET = 1000


# =============================================================================
# Bye Rotation
# =============================================================================

def bye_index(round_number: int, pool_size: int) -> int:
    """
    Index of the entry sitting out in a 1-based round.

    (round_number - 1) mod pool_size: across any pool_size consecutive rounds
    every entry sits exactly once.
    """
    if pool_size < 1:
        raise ValueError(f"pool_size must be >= 1, got {pool_size}")
    return (round_number - 1) % pool_size


# =============================================================================
# Circle Method
# =============================================================================

def rotate_circle(entries: Sequence[T], steps: int) -> List[T]:
    """Keep position 0 fixed and rotate all other positions `steps` times."""
    positions = list(entries)
    if len(positions) < 3:
        return positions
    for _ in range(steps):
        # Keep 0, move last to second, shift others
        positions = [positions[0]] + [positions[-1]] + positions[1:-1]
    return positions


def circle_pairings(entries: Sequence[T], round_number: int) -> List[Tuple[T, T]]:
    """
    Pairings for one round of an even-sized pool.

    Rotate by (round_number - 1) mod (n - 1) steps, then pair position i with
    position n-1-i. For n even, rounds 1..n-1 never repeat a pairing.
    """
    n = len(entries)
    if n < 2:
        return []
    if n % 2 != 0:
        raise ValueError(f"circle_pairings requires an even pool, got {n}")
    positions = rotate_circle(entries, (round_number - 1) % (n - 1))
    return [(positions[i], positions[n - 1 - i]) for i in range(n // 2)]


def round_robin_round(entries: Sequence[T], round_number: int) -> Tuple[List[Tuple[T, T]], Optional[T]]:
    """
    Pairings and bye for one round over a pool of any size.

    Odd pools drop the bye entry first, then the remaining even pool is
    paired with the circle method.

    Returns:
        (pairs, bye_entry) where bye_entry is None for even pools
    """
    if round_number < 1:
        raise ValueError(f"round_number must be >= 1, got {round_number}")
    pool = list(entries)
    bye: Optional[T] = None
    if len(pool) % 2 == 1:
        bye = pool.pop(bye_index(round_number, len(pool)))
    return circle_pairings(pool, round_number), bye
