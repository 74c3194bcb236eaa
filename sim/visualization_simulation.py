"""
Visualization simulation for the Sprout staking system.

This script charts the generation rate curve and runs a multi-year staking
scenario with plots.
"""

import numpy as np
import matplotlib.pyplot as plt
import sys
import os

# Add the core directory to the path
sys.path.append(os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "core"))
from ray_math import WAD
from staking_model import StakingEconomicModel, generation_rate_curve


def plot_generation_rate_curve(years=25):
    days = np.arange(0, int(years * 365.25) + 1, 5)
    rates = generation_rate_curve(days)

    plt.figure(figsize=(12, 6))
    plt.plot(days / 365.25, rates)
    plt.title('Generation Rate by Stake Duration')
    plt.xlabel('Years staked')
    plt.ylabel('%')
    plt.tight_layout()
    plt.show()


def run_visualization_simulation():
    model = StakingEconomicModel()

    print("Staking for 5 accounts...")
    for i in range(5):
        amount = int(np.random.uniform(100, 1000)) * WAD
        model.fund_account(f"user{i}", amount)
        model.stake(f"user{i}", amount)
        print(f"user{i}: {amount / WAD:.0f} ECO")

    print("\nRunning simulation with visualizations...")
    results = model.simulate_staking_scenario(years=5, step_days=15, plot_results=True)

    print("\nSimulation Results:")
    print(f"  final_total_staked: {results['final_total_staked'] / WAD:.2f} ECO")
    print(f"  final_total_generation: {results['final_total_generation'] / WAD:.4f} SPRT")
    print(f"  sprt_minted: {results['sprt_minted'] / WAD:.4f} SPRT")
    print(f"  stakers: {results['stakers']}")


if __name__ == "__main__":
    plot_generation_rate_curve()
    run_visualization_simulation()
