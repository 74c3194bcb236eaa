"""
Stake Position Model for the Sprout staking system.

This module holds the per-account staking record and the transitions that
mutate it. A position is either UNSTAKED (nothing staked) or STAKED. Each
deposit or withdrawal first realizes the generation accrued since the last
mint, then changes the stake:

- deposit: allowed from either state, restarts the stake duration clock
- withdraw: allowed only once the minimum stake duration has elapsed since
  the last deposit, keeps the deposit timestamp

The transitions are pure. They return a new position together with the SPRT
amount to mint, and persisting both is up to the ledger.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterator, Tuple

from generation import calculate_token_generation, raw_generation_rate
from generation_config import DEFAULT_GENERATION_CONFIG
from ray_math import RayOverflow


class PositionStatus(Enum):
    """Lifecycle state of a stake position."""
    UNSTAKED = 0  # Nothing staked, timestamps kept as history
    STAKED = 1    # Non-zero stake accruing generation


class MinStakeDurationNotElapsed(ValueError):
    """Raised when a withdrawal is attempted during the lock window."""

    def __init__(self, unlock_time: int):
        self.unlock_time = unlock_time
        super().__init__("MinStakeDuration not elapsed yet")


class InsufficientStakeBalance(ValueError):
    """Raised when a withdrawal exceeds the staked amount."""

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(f"Insufficient stake balance: requested {requested}, available {available}")


@dataclass(frozen=True)
class StakePosition:
    """
    Snapshot of an account's stake.

    Both timestamps only move forward. last_mint is refreshed on every
    transition, last_deposit only by deposits.
    """
    stake_balance: int = 0  # Staked ECO in wei
    last_deposit: int = 0   # Timestamp of the last deposit
    last_mint: int = 0      # Timestamp of the last generation mint

    @property
    def status(self) -> PositionStatus:
        return PositionStatus.STAKED if self.stake_balance > 0 else PositionStatus.UNSTAKED

    def unlock_time(self, config=DEFAULT_GENERATION_CONFIG) -> int:
        """Earliest timestamp at which a withdrawal is allowed."""
        return self.last_deposit + config.min_stake_duration


def _check_monotonic(position: StakePosition, now: int) -> None:
    latest = max(position.last_deposit, position.last_mint)
    if now < latest:
        raise ValueError(f"Timestamp {now} precedes last position update {latest}")


def pending_generation(position: StakePosition, now: int, config=DEFAULT_GENERATION_CONFIG) -> int:
    """
    Generation accrued by a position but not minted yet.

    Returns 0 for an unstaked position, so the duration bonus is never
    evaluated against a stale deposit timestamp.
    """
    if position.status is PositionStatus.UNSTAKED:
        return 0
    return calculate_token_generation(
        position.stake_balance,
        position.last_deposit,
        position.last_mint,
        now,
        config,
    )


def current_generation_rate(position: StakePosition, now: int, config=DEFAULT_GENERATION_CONFIG) -> int:
    """Ray-scaled rate of a position. An unstaked position earns no bonus."""
    if position.status is PositionStatus.UNSTAKED:
        return config.base_rate
    return raw_generation_rate(position.last_deposit, now, config)


def deposit(position: StakePosition, amount: int, now: int,
            config=DEFAULT_GENERATION_CONFIG) -> Tuple[StakePosition, int]:
    """
    Add ECO to a stake.

    Args:
        position: Current position of the account
        amount: ECO to stake, in wei
        now: Timestamp of the deposit
        config: Generation parameters

    Returns:
        The updated position and the SPRT generation to mint

    Raises:
        RayOverflow: If the new stake exceeds config.max_stake_balance
    """
    if amount <= 0:
        raise ValueError("Amount must be greater than zero")
    _check_monotonic(position, now)

    stake_balance = position.stake_balance + amount
    if stake_balance > config.max_stake_balance:
        raise RayOverflow("deposit", stake_balance)

    minted = pending_generation(position, now, config)
    updated = StakePosition(
        stake_balance=stake_balance,
        last_deposit=now,
        last_mint=now,
    )
    return updated, minted


def withdraw(position: StakePosition, amount: int, now: int,
             config=DEFAULT_GENERATION_CONFIG) -> Tuple[StakePosition, int]:
    """
    Remove ECO from a stake.

    Withdrawals of any size are refused until min_stake_duration has elapsed
    since the last deposit. A withdrawal at exactly the unlock time succeeds.

    Args:
        position: Current position of the account
        amount: ECO to withdraw, in wei
        now: Timestamp of the withdrawal
        config: Generation parameters

    Returns:
        The updated position and the SPRT generation to mint

    Raises:
        MinStakeDurationNotElapsed: If the stake is still locked
        InsufficientStakeBalance: If amount exceeds the stake
    """
    if amount <= 0:
        raise ValueError("Amount must be greater than zero")
    _check_monotonic(position, now)
    if now < position.unlock_time(config):
        raise MinStakeDurationNotElapsed(position.unlock_time(config))
    if amount > position.stake_balance:
        raise InsufficientStakeBalance(amount, position.stake_balance)

    minted = pending_generation(position, now, config)
    updated = replace(
        position,
        stake_balance=position.stake_balance - amount,
        last_mint=now,
    )
    return updated, minted


class StakePositionStore:
    """
    Keyed storage of stake positions.

    Accounts that never staked read as the all-zero position.
    """

    def __init__(self):
        self.positions: Dict[str, StakePosition] = {}

    def get(self, account: str) -> StakePosition:
        return self.positions.get(account, StakePosition())

    def put(self, account: str, position: StakePosition) -> None:
        self.positions[account] = position

    def __contains__(self, account: str) -> bool:
        return account in self.positions

    def __iter__(self) -> Iterator[str]:
        return iter(self.positions)

    def __len__(self) -> int:
        return len(self.positions)

    def total_staked(self) -> int:
        """Sum of all stake balances."""
        return sum(position.stake_balance for position in self.positions.values())
