"""
Generation engine for the Sprout staking system.

This module computes how many SPRT a stake of ECO has generated. It is the
single implementation shared by the staking ledger (chain timestamps) and by
the display projection (local clock corrected for skew), so both always agree
to the last wei.

The engine has two parts:
1. The rate model, an annualized generation rate that stays at the base rate
   during the minimum stake duration, then grows linearly with the time the
   stake has been held, and stops growing after the bonus period
2. The accrual function, which pro-rates that rate over the time since the
   last mint, applies it to the stake and keeps the user share

All values are integers. Rates are ray-scaled, amounts are in wei.
"""

from ray_math import RAY, WAD_RAY_RATIO, ray_div, ray_mul, ray_to_wad, wad_to_ray
from generation_config import DEFAULT_GENERATION_CONFIG


def _elapsed(since: int, now: int, label: str) -> int:
    if now < since:
        raise ValueError(f"Timestamp {now} precedes {label} {since}")
    return now - since


def raw_generation_rate(last_deposit: int, now: int, config=DEFAULT_GENERATION_CONFIG, base_rate=None) -> int:
    """
    Calculate the annualized generation rate of a stake.

    The rate is flat at the base rate while the stake is at most
    min_stake_duration old. After that, every additional second adds
    generation_bonus_per_second until max_bonus_period is reached.

    Args:
        last_deposit: Timestamp of the last deposit into the stake
        now: Timestamp at which to evaluate the rate
        config: Generation parameters
        base_rate: Optional ray-scaled base rate overriding config.base_rate

    Returns:
        The ray-scaled annual generation rate
    """
    rate = config.base_rate if base_rate is None else base_rate
    stake_duration = _elapsed(last_deposit, now, "last deposit")

    if stake_duration <= config.min_stake_duration:
        return rate

    bonus_period = (stake_duration - config.min_stake_duration) * RAY
    if bonus_period > config.max_bonus_period:
        bonus_period = config.max_bonus_period

    return rate + ray_mul(config.generation_bonus_per_second, bonus_period)


def year_fraction(last_mint: int, now: int, config=DEFAULT_GENERATION_CONFIG) -> int:
    """Ray-scaled fraction of a year elapsed since the last mint."""
    mint_interval = _elapsed(last_mint, now, "last mint")
    return ray_div(mint_interval * WAD_RAY_RATIO, config.seconds_per_year * WAD_RAY_RATIO)


def calculate_generation_rate(last_deposit: int, last_mint: int, now: int, config=DEFAULT_GENERATION_CONFIG) -> int:
    """Annual rate pro-rated to the interval since the last mint (ray)."""
    return ray_mul(raw_generation_rate(last_deposit, now, config), year_fraction(last_mint, now, config))


def calculate_token_generation(stake_balance: int, last_deposit: int, last_mint: int, now: int,
                               config=DEFAULT_GENERATION_CONFIG) -> int:
    """
    Calculate the SPRT generated by a stake since its last mint.

    The stake is lifted to ray precision, multiplied by the pro-rated rate and
    descaled back to wei. Only the user share of that gross amount is
    returned; the remainder is the protocol's and is not tracked here.

    Callers must not pass an empty stake. The duration bonus of a zero stake
    is computed from a stale deposit timestamp and has no meaning.

    Args:
        stake_balance: Staked ECO in wei
        last_deposit: Timestamp of the last deposit
        last_mint: Timestamp of the last mint
        now: Timestamp at which the generation is realized
        config: Generation parameters

    Returns:
        The SPRT amount (wei) credited to the staker
    """
    rate = calculate_generation_rate(last_deposit, last_mint, now, config)
    generation_amount = ray_to_wad(ray_mul(wad_to_ray(stake_balance), rate))
    return generation_amount * config.user_share // 100


def generation_rate(last_deposit: int, now: int, config=DEFAULT_GENERATION_CONFIG) -> int:
    """Raw generation rate descaled to wad, as shown to users."""
    return raw_generation_rate(last_deposit, now, config) // WAD_RAY_RATIO


def generation_rate_percent(last_deposit: int, now: int, config=DEFAULT_GENERATION_CONFIG) -> float:
    """Raw generation rate as a percentage, e.g. 200.0 for the base rate."""
    return raw_generation_rate(last_deposit, now, config) * 100 / RAY
