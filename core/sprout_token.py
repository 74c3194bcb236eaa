"""
Sprout Token Model for the Sprout staking system.

This module simulates the SproutToken contract, which lets ECO holders stake
their tokens and generates SPRT for them over time.

The SproutToken contract is responsible for:
1. Holding the staked ECO and the position of every staker
2. Realizing the generation accrued by a position before its stake changes
3. Minting the realized generation as SPRT
4. Reporting balances that include generation not minted yet
5. Exposing the position snapshot used by clients to extrapolate generation

Chain time is simulated with current_time, which only moves forward.
"""

import itertools
import time
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from eco_token import Token
from generation import raw_generation_rate
from generation_config import DEFAULT_GENERATION_CONFIG
from stake_position import (
    StakePosition,
    StakePositionStore,
    deposit,
    pending_generation,
    withdraw,
)


# Default contract addresses, one per deployment
_deployments = itertools.count(1)


# Operation enum for events and tracking
class Operation(Enum):
    """
    Operations recorded by the staking contract.

    These mirror the events the contract emits so that a simulation can
    replay the history of every position.
    """
    STAKE_DEPOSIT = 0    # ECO added to a stake
    STAKE_WITHDRAW = 1   # ECO removed from a stake
    GENERATION_MINT = 2  # Accrued generation minted as SPRT
    TRANSFER = 3         # Minted SPRT moved between accounts


@dataclass
class StakeEvent:
    operation: Operation
    account: str
    amount: int
    timestamp: int
    recipient: Optional[str] = None


class SproutToken:
    """
    Simulates the SproutToken staking contract.
    """

    def __init__(self, eco_token, owner, config=DEFAULT_GENERATION_CONFIG, start_time=None, address=None):
        # Address of the contract on the ECO ledger, holds the staked ECO
        self.address = f"SproutToken-{next(_deployments)}" if address is None else address
        self.owner = owner
        self.config = config

        # Stake token ledger (external)
        self.eco_token = eco_token

        # Reward token ledger, only this contract mints
        self.sprout = Token("Sprout Token", "SPRT")
        self.sprout.add_minter(self.address)

        # Per-account stake positions
        self.positions = StakePositionStore()

        # Simulated chain timestamp
        self.current_time = int(time.time()) if start_time is None else start_time

        self.events: List[StakeEvent] = []

    @property
    def name(self):
        return self.sprout.name

    @property
    def symbol(self):
        return self.sprout.symbol

    @property
    def decimals(self):
        return self.sprout.decimals

    @property
    def total_supply(self):
        """SPRT minted so far, excluding pending generation."""
        return self.sprout.total_supply

    def update_time(self, seconds):
        """Advances the simulated chain time by the given number of seconds."""
        if seconds < 0:
            raise ValueError("Time can only move forward")
        self.current_time += seconds

    def fast_forward_to(self, timestamp):
        """Sets the timestamp of the next block."""
        if timestamp < self.current_time:
            raise ValueError(f"Timestamp {timestamp} is before current time {self.current_time}")
        self.current_time = timestamp

    def _mint_generation(self, account, amount):
        if amount <= 0:
            return
        self.sprout.mint(self.address, account, amount)
        self.events.append(StakeEvent(Operation.GENERATION_MINT, account, amount, self.current_time))

    def stake_deposit(self, account, amount):
        """
        Stakes ECO for an account.

        The ECO is pulled with the allowance the account gave this contract.
        Generation accrued on the existing stake is minted first, and the
        stake duration restarts.

        Args:
            account: Address of the staker
            amount: ECO to stake, in wei

        Returns:
            SPRT minted by this deposit
        """
        updated, minted = deposit(self.positions.get(account), amount, self.current_time, self.config)

        # Pull the ECO before any state changes
        self.eco_token.transfer_from(self.address, account, self.address, amount)

        self.positions.put(account, updated)
        self._mint_generation(account, minted)
        self.events.append(StakeEvent(Operation.STAKE_DEPOSIT, account, amount, self.current_time))
        return minted

    def stake_withdraw(self, account, amount):
        """
        Returns staked ECO to an account.

        The ECO is sent before any state changes, so a failed transfer leaves
        the position and the SPRT supply untouched.

        Args:
            account: Address of the staker
            amount: ECO to withdraw, in wei

        Returns:
            SPRT minted by this withdrawal

        Raises:
            MinStakeDurationNotElapsed: If the last deposit is too recent
            InsufficientStakeBalance: If amount exceeds the stake
        """
        updated, minted = withdraw(self.positions.get(account), amount, self.current_time, self.config)

        self.eco_token.transfer(self.address, account, amount)

        self.positions.put(account, updated)
        self._mint_generation(account, minted)
        self.events.append(StakeEvent(Operation.STAKE_WITHDRAW, account, amount, self.current_time))
        return minted

    def transfer(self, sender, recipient, amount):
        """Transfers minted SPRT. Pending generation cannot be transferred."""
        self.sprout.transfer(sender, recipient, amount)
        self.events.append(StakeEvent(Operation.TRANSFER, sender, amount, self.current_time, recipient))
        return True

    def pending_generation_of(self, account):
        """Generation accrued by the account and not minted yet."""
        return pending_generation(self.positions.get(account), self.current_time, self.config)

    def balance_of(self, account):
        """Minted SPRT plus pending generation."""
        return self.sprout.balance_of(account) + self.pending_generation_of(account)

    def eco_balance_of(self, account):
        """ECO currently staked by the account."""
        return self.positions.get(account).stake_balance

    def full_balance_of(self, account):
        """SPRT balance including pending generation, plus the staked ECO."""
        return self.balance_of(account) + self.eco_balance_of(account)

    def generation_extrapolation_information(self, account) -> StakePosition:
        """Position snapshot used by clients to extrapolate generation."""
        return self.positions.get(account)

    def raw_generation_rate(self, last_deposit, base_rate=None):
        """Generation rate of a stake deposited at last_deposit, at current time."""
        return raw_generation_rate(last_deposit, self.current_time, self.config, base_rate)

    def total_staked(self):
        return self.positions.total_staked()
