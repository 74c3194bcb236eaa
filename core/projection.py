"""
Generation projection for display clients.

A client polls the staking contract for a position snapshot and then keeps
extrapolating the SPRT balance locally between polls. The extrapolation runs
the same generation engine as the contract, evaluated at the local clock
corrected by the skew measured when the snapshot was fetched.

Projection is read only and never raises: an empty stake projects to zero,
an instant earlier than the snapshot is evaluated at the snapshot itself and
a stake whose generation overflows 256 bits projects to zero as well.
"""

from dataclasses import dataclass

from generation import calculate_token_generation, raw_generation_rate
from generation_config import DEFAULT_GENERATION_CONFIG, SECONDS_PER_DAY
from ray_math import RAY, WAD_RAY_RATIO, RayOverflow

PROJECTION_OFFSET_90_DAYS = 90 * SECONDS_PER_DAY


@dataclass(frozen=True)
class GenerationSnapshot:
    """
    Position snapshot as seen by a display client.

    clock_skew is the authoritative time minus the local time at fetch, so
    that local_now + clock_skew estimates the chain time.
    """
    stake_balance: int
    last_deposit: int
    last_mint: int
    clock_skew: int = 0

    @classmethod
    def fetch(cls, staking, account, local_now):
        """Reads an account's position and measures the clock skew."""
        info = staking.generation_extrapolation_information(account)
        return cls(
            stake_balance=info.stake_balance,
            last_deposit=info.last_deposit,
            last_mint=info.last_mint,
            clock_skew=staking.current_time - int(local_now),
        )

    def authoritative_time(self, local_now, offset=0):
        """Estimated chain time, never earlier than the snapshot."""
        estimate = int(local_now) + self.clock_skew + offset
        return max(estimate, self.last_deposit, self.last_mint)


@dataclass(frozen=True)
class GenerationProjection:
    current: int
    in_90_days: int
    in_10_years: int


def project_generation(snapshot, local_now, offset=0, config=DEFAULT_GENERATION_CONFIG):
    """
    Extrapolates the unminted generation of a snapshot.

    Args:
        snapshot: Position snapshot with its clock skew
        local_now: Local wall clock, in seconds
        offset: Seconds to look ahead of now
        config: Generation parameters

    Returns:
        Projected SPRT (wei) generated since the snapshot's last mint
    """
    if snapshot.stake_balance <= 0:
        return 0
    now = snapshot.authoritative_time(local_now, offset)
    try:
        return calculate_token_generation(
            snapshot.stake_balance,
            snapshot.last_deposit,
            snapshot.last_mint,
            now,
            config,
        )
    except RayOverflow:
        # Stake too large for the 256-bit envelope, nothing can be shown
        return 0


def generation_projections(snapshot, local_now, config=DEFAULT_GENERATION_CONFIG):
    """Projected generation now, in 90 days and in 10 years."""
    return GenerationProjection(
        current=project_generation(snapshot, local_now, 0, config),
        in_90_days=project_generation(snapshot, local_now, PROJECTION_OFFSET_90_DAYS, config),
        in_10_years=project_generation(snapshot, local_now, 10 * config.seconds_per_year, config),
    )


def live_generation_rate(snapshot, local_now, config=DEFAULT_GENERATION_CONFIG):
    """Current generation rate of the snapshot, wad scaled."""
    if snapshot.stake_balance <= 0:
        return config.base_rate // WAD_RAY_RATIO
    now = snapshot.authoritative_time(local_now)
    return raw_generation_rate(snapshot.last_deposit, now, config) // WAD_RAY_RATIO


def live_generation_rate_percent(snapshot, local_now, config=DEFAULT_GENERATION_CONFIG):
    # wad scaled rate to percent
    return live_generation_rate(snapshot, local_now, config) * 100 / (RAY // WAD_RAY_RATIO)
