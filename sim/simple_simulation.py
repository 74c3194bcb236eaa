"""
Simple simulation for the Sprout staking system.

This script stakes ECO for a few accounts, moves the chain forward and prints
the SPRT each staker has generated, including a failed early withdrawal.
"""

import sys
import os

import numpy as np

# Add the core directory to the path
sys.path.append(os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "core"))
from generation_config import SECONDS_PER_DAY
from ray_math import WAD
from stake_position import MinStakeDurationNotElapsed
from staking_model import StakingEconomicModel


def run_basic_simulation():
    # Initialize the system
    model = StakingEconomicModel()

    print("Funding and staking accounts...")
    for i in range(3):
        account = f"user{i}"
        amount = int(np.random.uniform(50, 500)) * WAD
        model.fund_account(account, amount)
        model.stake(account, amount)
        print(f"{account}: staked {amount / WAD:.0f} ECO")

    # Withdrawals are locked for the minimum stake duration
    print("\nTrying to withdraw after 30 days...")
    model.advance_time(30 * SECONDS_PER_DAY)
    try:
        model.unstake("user0", 10 * WAD)
    except MinStakeDurationNotElapsed as e:
        print(f"Withdrawal refused: {e}")

    print("\nAdvancing to 91 days...")
    model.advance_time(61 * SECONDS_PER_DAY)
    for account in model.stakers():
        print(f"  {account}: {model.staking.balance_of(account) / WAD:.4f} SPRT")

    # Top-up realizes generation and restarts the stake duration
    print("\nuser1 tops up 10 ECO...")
    model.fund_account("user1", 10 * WAD)
    minted = model.stake("user1", 10 * WAD)
    print(f"  minted {minted / WAD:.4f} SPRT")

    print("\nuser0 withdraws half of the stake...")
    half = model.staking.eco_balance_of("user0") // 2
    minted = model.unstake("user0", half)
    print(f"  minted {minted / WAD:.4f} SPRT, {model.staking.eco_balance_of('user0') / WAD:.2f} ECO still staked")

    print("\nProjected generation for user2:")
    projection = model.projections("user2")
    print(f"  now:          {projection.current / WAD:.4f} SPRT")
    print(f"  in 90 days:   {projection.in_90_days / WAD:.4f} SPRT")
    print(f"  in 10 years:  {projection.in_10_years / WAD:.4f} SPRT")

    # Final state
    print("\nFinal system state:")
    state = model.get_system_state()
    print(f"  Total staked: {state['total_staked'] / WAD:.2f} ECO")
    print(f"  SPRT minted: {state['sprt_minted'] / WAD:.4f}")
    print(f"  SPRT generated (incl. pending): {state['total_generation'] / WAD:.4f}")
    print(f"  Stakers: {state['stakers']}")


if __name__ == "__main__":
    run_basic_simulation()
