"""
Unit tests for the SproutToken staking contract model.

This module follows the contract test suite: an account stakes 100 ECO and
its SPRT balance is checked as the chain moves forward.
"""

import unittest
import sys
import os

# Add the core directory to the path
sys.path.append(os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "core"))

from eco_token import ECO_TOTAL_SUPPLY, deploy_eco_token
from generation import calculate_token_generation
from generation_config import BASE_RATE, SECONDS_PER_DAY
from ray_math import WAD
from sprout_token import Operation, SproutToken
from stake_position import InsufficientStakeBalance, MinStakeDurationNotElapsed, StakePosition

T0 = 1_700_000_000


def days(n):
    return int(round(n * SECONDS_PER_DAY))


class TestEcoToken(unittest.TestCase):
    def setUp(self):
        self.eco_token = deploy_eco_token("EcoMultisig")

    def test_supply_held_by_multisig(self):
        self.assertEqual(self.eco_token.decimals, 18)
        self.assertEqual(self.eco_token.total_supply, ECO_TOTAL_SUPPLY)
        self.assertEqual(self.eco_token.balance_of("EcoMultisig"), 10_000_000 * WAD)

    def test_no_further_minting(self):
        with self.assertRaises(ValueError):
            self.eco_token.mint("EcoMultisig", "EcoMultisig", WAD)

    def test_transfer_from_requires_allowance(self):
        self.eco_token.transfer("EcoMultisig", "alice", 10 * WAD)

        with self.assertRaises(ValueError) as context:
            self.eco_token.transfer_from("spender", "alice", "bob", WAD)
        self.assertIn("insufficient allowance", str(context.exception).lower())

        self.eco_token.approve("alice", "spender", 4 * WAD)
        self.eco_token.transfer_from("spender", "alice", "bob", 3 * WAD)
        self.assertEqual(self.eco_token.balance_of("bob"), 3 * WAD)
        self.assertEqual(self.eco_token.allowance("alice", "spender"), WAD)

    def test_transfer_from_keeps_allowance_on_failure(self):
        self.eco_token.approve("carol", "spender", 5 * WAD)
        with self.assertRaises(ValueError):
            self.eco_token.transfer_from("spender", "carol", "bob", 5 * WAD)
        self.assertEqual(self.eco_token.allowance("carol", "spender"), 5 * WAD)


class TestSproutToken(unittest.TestCase):
    def setUp(self):
        self.multisig = "EcoMultisig"
        self.account = "EcoTestAccount"

        self.eco_token = deploy_eco_token(self.multisig)
        self.eco_token.transfer(self.multisig, self.account, 1000 * WAD)

        self.sprout = SproutToken(self.eco_token, self.multisig, start_time=T0)

        # approve, stake
        self.eco_token.approve(self.account, self.sprout.address, 100 * WAD)
        self.sprout.stake_deposit(self.account, 100 * WAD)

    def test_deposit_moves_eco(self):
        self.assertEqual(self.sprout.eco_balance_of(self.account), 100 * WAD)
        self.assertEqual(self.eco_token.balance_of(self.account), 900 * WAD)
        self.assertEqual(self.eco_token.balance_of(self.sprout.address), 100 * WAD)
        self.assertEqual(self.sprout.balance_of(self.account), 0)

    def test_fails_to_withdraw_too_early(self):
        with self.assertRaises(MinStakeDurationNotElapsed) as context:
            self.sprout.stake_withdraw(self.account, 10 * WAD)
        self.assertEqual(str(context.exception), "MinStakeDuration not elapsed yet")
        self.assertEqual(self.sprout.eco_balance_of(self.account), 100 * WAD)

    def test_generation_extrapolation_information(self):
        info = self.sprout.generation_extrapolation_information(self.account)
        self.assertEqual(info, StakePosition(100 * WAD, T0, T0))

    def test_balance_includes_pending_generation(self):
        for time_stop in [91, 365.25, 3652.25]:
            self.sprout.fast_forward_to(T0 + days(time_stop))
            expected = calculate_token_generation(100 * WAD, T0, T0, T0 + days(time_stop))
            self.assertEqual(self.sprout.balance_of(self.account), expected,
                             f"SPRT is not correct after {time_stop} days")

        # Nothing is minted until the position changes
        self.assertEqual(self.sprout.total_supply, 0)

    def test_balance_after_one_year(self):
        self.sprout.update_time(days(365.25))
        self.assertEqual(self.sprout.balance_of(self.account), 183391170431211498973)

    def test_raw_generation_rate(self):
        test_cases = [
            (4, BASE_RATE),
            (89, BASE_RATE),
            (91, 4000273785078713210130073601 // 2),
            (365.25, 4075359342915811088302758401 // 2),
            (365.25 * 30, 3000000000000000000093824000),
        ]
        for after, expected in test_cases:
            self.sprout.fast_forward_to(T0 + days(after))
            self.assertEqual(self.sprout.raw_generation_rate(T0), expected,
                             f"incorrect generation rate after {after} days")

    def test_withdraw_mints_generation(self):
        self.sprout.update_time(days(91))
        pending = self.sprout.balance_of(self.account)

        minted = self.sprout.stake_withdraw(self.account, 40 * WAD)

        self.assertEqual(minted, pending)
        self.assertEqual(self.sprout.sprout.balance_of(self.account), pending)
        self.assertEqual(self.sprout.balance_of(self.account), pending)
        self.assertEqual(self.sprout.eco_balance_of(self.account), 60 * WAD)
        self.assertEqual(self.eco_token.balance_of(self.account), 940 * WAD)

        operations = [event.operation for event in self.sprout.events]
        self.assertEqual(operations, [
            Operation.STAKE_DEPOSIT,
            Operation.GENERATION_MINT,
            Operation.STAKE_WITHDRAW,
        ])

    def test_withdraw_more_than_staked(self):
        self.sprout.update_time(days(91))
        with self.assertRaises(InsufficientStakeBalance):
            self.sprout.stake_withdraw(self.account, 101 * WAD)
        self.assertEqual(self.sprout.total_supply, 0)

    def test_deposit_without_allowance_changes_nothing(self):
        self.sprout.update_time(days(100))
        events_before = len(self.sprout.events)

        with self.assertRaises(ValueError):
            self.sprout.stake_deposit(self.account, 10 * WAD)

        self.assertEqual(self.sprout.eco_balance_of(self.account), 100 * WAD)
        self.assertEqual(self.sprout.generation_extrapolation_information(self.account).last_deposit, T0)
        self.assertEqual(self.sprout.total_supply, 0)
        self.assertEqual(len(self.sprout.events), events_before)

    def test_top_up_mints_and_restarts_lock(self):
        self.sprout.update_time(days(120))
        self.eco_token.approve(self.account, self.sprout.address, 10 * WAD)

        minted = self.sprout.stake_deposit(self.account, 10 * WAD)

        self.assertGreater(minted, 0)
        self.assertEqual(self.sprout.eco_balance_of(self.account), 110 * WAD)
        with self.assertRaises(MinStakeDurationNotElapsed):
            self.sprout.stake_withdraw(self.account, 10 * WAD)

    def test_transfer_only_moves_minted_sprt(self):
        self.sprout.update_time(days(100))
        minted = self.sprout.stake_withdraw(self.account, 100 * WAD)

        self.sprout.transfer(self.account, "friend", minted // 2)
        self.assertEqual(self.sprout.balance_of("friend"), minted // 2)
        self.assertEqual(self.sprout.events[-1].operation, Operation.TRANSFER)
        self.assertEqual(self.sprout.events[-1].recipient, "friend")

        with self.assertRaises(ValueError):
            self.sprout.transfer(self.account, "friend", minted)

    def test_full_balance(self):
        self.sprout.update_time(days(91))
        self.assertEqual(
            self.sprout.full_balance_of(self.account),
            self.sprout.balance_of(self.account) + 100 * WAD,
        )

    def test_time_only_moves_forward(self):
        with self.assertRaises(ValueError):
            self.sprout.fast_forward_to(T0 - 1)
        with self.assertRaises(ValueError):
            self.sprout.update_time(-1)

    def test_contracts_on_one_ledger_hold_separate_eco(self):
        other = SproutToken(self.eco_token, self.multisig, start_time=T0)
        self.assertNotEqual(other.address, self.sprout.address)

        self.eco_token.transfer(self.multisig, "bob", 50 * WAD)
        self.eco_token.approve("bob", other.address, 50 * WAD)
        other.stake_deposit("bob", 50 * WAD)

        self.assertEqual(self.eco_token.balance_of(self.sprout.address), 100 * WAD)
        self.assertEqual(self.eco_token.balance_of(other.address), 50 * WAD)

        # The first contract cannot spend ECO staked in the second
        self.sprout.update_time(days(100))
        self.sprout.stake_withdraw(self.account, 100 * WAD)
        self.assertEqual(self.eco_token.balance_of(self.sprout.address), 0)
        self.assertEqual(self.eco_token.balance_of(other.address), 50 * WAD)

    def test_explicit_address(self):
        sprout = SproutToken(self.eco_token, self.multisig, start_time=T0, address="SproutStaking")
        self.assertEqual(sprout.address, "SproutStaking")

    def test_failed_eco_transfer_leaves_position_unchanged(self):
        self.sprout.update_time(days(100))
        pending = self.sprout.balance_of(self.account)
        events_before = len(self.sprout.events)

        # Contract custody drained by another ledger operation
        self.eco_token.transfer(self.sprout.address, "elsewhere", 100 * WAD)

        with self.assertRaises(ValueError):
            self.sprout.stake_withdraw(self.account, 100 * WAD)

        self.assertEqual(self.sprout.generation_extrapolation_information(self.account),
                         StakePosition(100 * WAD, T0, T0))
        self.assertEqual(self.sprout.total_supply, 0)
        self.assertEqual(self.sprout.balance_of(self.account), pending)
        self.assertEqual(len(self.sprout.events), events_before)


if __name__ == "__main__":
    unittest.main()
