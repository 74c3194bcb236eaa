"""
Generation parameters for the Sprout staking system.

The protocol values are kept as module constants. GenerationConfig bundles
them so that scenarios can run the engine with a different base rate or lock
period without touching the defaults.
"""

from dataclasses import dataclass

from ray_math import MAX_UINT256, RAY, WAD_RAY_RATIO, ray_mul

SECONDS_PER_DAY = 24 * 60 * 60
# 365.25 days, an exact number of seconds
SECONDS_PER_YEAR = 31_557_600

# Nominal generation rate applied before the user share cut (200%)
BASE_RATE = 2 * RAY

# Lock window during which no bonus accrues and withdrawals are blocked
MIN_STAKE_DURATION = 90 * SECONDS_PER_DAY

# Ray-scaled rate increment per second staked beyond the lock window
GENERATION_BONUS_PER_SECOND = 1584404390701447512

# Bonus stops growing 20 years after the lock window (ray-scaled seconds)
MAX_BONUS_PERIOD = 20 * SECONDS_PER_YEAR * RAY

# Percentage of the gross generation credited to the staker
USER_SHARE = 90

# Longest mint interval a stake must be able to accrue over without overflow
MAX_ACCRUAL_YEARS = 1000


@dataclass(frozen=True)
class GenerationConfig:
    """
    Parameters of the generation rate model and the accrual function.

    The defaults are the deployed protocol values. Rates are ray-scaled,
    durations are plain seconds except max_bonus_period, which is a ray-scaled
    second count like the on-chain constant.
    """
    base_rate: int = BASE_RATE
    min_stake_duration: int = MIN_STAKE_DURATION
    generation_bonus_per_second: int = GENERATION_BONUS_PER_SECOND
    max_bonus_period: int = MAX_BONUS_PERIOD
    seconds_per_year: int = SECONDS_PER_YEAR
    user_share: int = USER_SHARE

    def __post_init__(self):
        if self.base_rate < 0:
            raise ValueError(f"Base rate must be non-negative, got {self.base_rate}")
        if self.min_stake_duration < 0:
            raise ValueError(f"Minimum stake duration must be non-negative, got {self.min_stake_duration}")
        if self.generation_bonus_per_second < 0:
            raise ValueError("Generation bonus per second must be non-negative")
        if self.max_bonus_period < 0:
            raise ValueError("Maximum bonus period must be non-negative")
        if self.seconds_per_year <= 0:
            raise ValueError(f"Seconds per year must be positive, got {self.seconds_per_year}")
        if not 0 <= self.user_share <= 100:
            raise ValueError(f"User share must be between 0 and 100, got {self.user_share}")

    @property
    def max_generation_rate(self) -> int:
        """Rate reached once the bonus period is exhausted."""
        return self.base_rate + ray_mul(self.generation_bonus_per_second, self.max_bonus_period)

    @property
    def max_stake_balance(self) -> int:
        """
        Largest stake (wei) whose generation fits in 256 bits.

        The widest intermediate is the lifted stake times the capped rate
        pro-rated over MAX_ACCRUAL_YEARS.
        """
        widest_rate = max(self.max_generation_rate, 1) * MAX_ACCRUAL_YEARS
        return MAX_UINT256 // (WAD_RAY_RATIO * widest_rate)


DEFAULT_GENERATION_CONFIG = GenerationConfig()
