"""
Economic Model for the Sprout staking system.

This main module wires the ECO token, the multisig that holds its supply and
the SproutToken staking contract, the same way the deployment script does.
It can be used to simulate how SPRT generation evolves for a set of stakers
and to chart the generation rate curve.
"""

import time

import numpy as np
import matplotlib.pyplot as plt

from eco_token import deploy_eco_token
from generation import generation_rate_percent
from generation_config import DEFAULT_GENERATION_CONFIG, SECONDS_PER_DAY
from projection import GenerationSnapshot, generation_projections
from ray_math import RAY, WAD
from sprout_token import SproutToken
from stake_position import current_generation_rate

ECO_MULTISIG = "EcoMultisig"


def generation_rate_curve(days, config=DEFAULT_GENERATION_CONFIG):
    """
    Generation rate, in percent, of a stake held for each number of days.

    Args:
        days: Iterable of stake durations in days
        config: Generation parameters

    Returns:
        numpy array of rates in percent
    """
    return np.array([
        generation_rate_percent(0, int(day * SECONDS_PER_DAY), config)
        for day in days
    ])


class StakingEconomicModel:
    """
    Complete economic model of the Sprout staking system.
    Combines all components and provides simulation capabilities.
    """

    def __init__(self, config=DEFAULT_GENERATION_CONFIG, start_time=None):
        self.config = config
        self.multisig = ECO_MULTISIG

        # Current time for simulation
        self.current_time = int(time.time()) if start_time is None else start_time

        # Deploy tokens
        self.eco_token = deploy_eco_token(self.multisig)
        self.staking = SproutToken(self.eco_token, self.multisig, config, self.current_time)

        # History tracking for simulations
        self.time_history = []
        self.total_staked_history = []
        self.total_generation_history = []
        self.rate_history = {}

    def fund_account(self, account, amount):
        """Sends ECO (wei) from the multisig to an account."""
        return self.eco_token.transfer(self.multisig, account, amount)

    def stake(self, account, amount):
        """
        Approves and stakes ECO for an account.

        Returns:
            SPRT minted by the deposit
        """
        self.eco_token.approve(account, self.staking.address, amount)
        return self.staking.stake_deposit(account, amount)

    def unstake(self, account, amount):
        """Withdraws staked ECO. Returns the SPRT minted by the withdrawal."""
        return self.staking.stake_withdraw(account, amount)

    def advance_time(self, seconds):
        """Advances the simulation and chain time."""
        self.staking.update_time(seconds)
        self.current_time = self.staking.current_time

    def stakers(self):
        return list(self.staking.positions)

    def get_system_state(self):
        """
        Returns a summary of the current system state.

        Generation figures include pending generation, so they match what the
        stakers see in their balances.
        """
        total_generation = sum(self.staking.balance_of(account) for account in self.stakers())
        return {
            'time': self.current_time,
            'total_staked': self.staking.total_staked(),
            'sprt_minted': self.staking.total_supply,
            'total_generation': total_generation,
            'stakers': len(self.stakers()),
        }

    def _update_history(self):
        state = self.get_system_state()
        self.time_history.append(state['time'])
        self.total_staked_history.append(state['total_staked'])
        self.total_generation_history.append(state['total_generation'])
        for account in self.stakers():
            position = self.staking.generation_extrapolation_information(account)
            rate = current_generation_rate(position, self.current_time, self.config) * 100 / RAY
            self.rate_history.setdefault(account, []).append(rate)

    def projections(self, account, local_now=None):
        """Projected generation for an account as a display client would show it."""
        local_now = self.current_time if local_now is None else local_now
        snapshot = GenerationSnapshot.fetch(self.staking, account, local_now)
        return generation_projections(snapshot, local_now, self.config)

    def simulate_staking_scenario(self, years, step_days=30, plot_results=True):
        """
        Advances time in fixed steps and records the generation of all stakers.

        Args:
            years: Number of years to simulate
            step_days: Days between two samples
            plot_results: Whether to plot the results

        Returns:
            Dictionary with simulation results
        """
        steps = int(years * 365.25 / step_days)
        step_size = step_days * SECONDS_PER_DAY
        start_time = self.current_time

        # Reset history
        self.time_history = []
        self.total_staked_history = []
        self.total_generation_history = []
        self.rate_history = {}

        time_points = np.zeros(steps)
        for i in range(steps):
            self.advance_time(step_size)
            self._update_history()
            time_points[i] = (self.current_time - start_time) / SECONDS_PER_DAY

        generation_points = np.array(self.total_generation_history, dtype=float) / WAD
        staked_points = np.array(self.total_staked_history, dtype=float) / WAD

        if plot_results:
            fig, axs = plt.subplots(3, 1, figsize=(12, 12), sharex=True)

            # Plot generation rate per staker
            for account, rates in self.rate_history.items():
                axs[0].plot(time_points, rates, label=account)
            axs[0].set_title('Generation Rate')
            axs[0].set_ylabel('%')
            if self.rate_history:
                axs[0].legend()

            # Plot total staked ECO
            axs[1].plot(time_points, staked_points)
            axs[1].set_title('Total Staked')
            axs[1].set_ylabel('ECO')

            # Plot SPRT generated, minted or pending
            axs[2].plot(time_points, generation_points)
            axs[2].set_title('SPRT Generated')
            axs[2].set_ylabel('SPRT')
            axs[2].set_xlabel('Days')

            plt.tight_layout()
            plt.show()

        final_state = self.get_system_state()

        return {
            'days': time_points,
            'total_generation': generation_points,
            'final_total_staked': final_state['total_staked'],
            'final_total_generation': final_state['total_generation'],
            'sprt_minted': final_state['sprt_minted'],
            'stakers': final_state['stakers'],
        }
