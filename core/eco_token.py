"""
Token Model for the Sprout staking system.

This module simulates the two tokens of the system:
- ECO, the stake token, with its whole supply minted to the multisig
- SPRT, the reward token, minted only by the staking contract

Only the ledger operations the staking contract relies on are modelled:
balances, transfers, allowances and minting.
"""

from typing import Dict, Set, Tuple

DECIMALS = 18
ECO_TOTAL_SUPPLY = 10_000_000 * 10**DECIMALS


class Token:
    """
    Simulates an 18 decimals token ledger.
    """

    def __init__(self, name, symbol, decimals=DECIMALS):
        self.name = name
        self.symbol = symbol
        self.decimals = decimals

        # Total token supply
        self.total_supply = 0

        # Mapping of addresses to token balances
        self.balances: Dict[str, int] = {}

        # Mapping of (owner, spender) to approved amounts
        self.allowances: Dict[Tuple[str, str], int] = {}

        # Accounts that are allowed to mint tokens
        self.minters: Set[str] = set()

    def add_minter(self, minter):
        """Allows an address to mint tokens."""
        self.minters.add(minter)

    def balance_of(self, account):
        """Returns the token balance of the given account."""
        return self.balances.get(account, 0)

    def allowance(self, owner, spender):
        """Returns the amount spender may still move on behalf of owner."""
        return self.allowances.get((owner, spender), 0)

    def approve(self, owner, spender, amount):
        """
        Sets the amount spender may transfer from owner.

        Args:
            owner: Address owning the tokens
            spender: Address allowed to move them
            amount: Approved amount, replacing any previous approval

        Returns:
            True if successful
        """
        if amount < 0:
            raise ValueError("Amount must not be negative")

        self.allowances[(owner, spender)] = amount
        return True

    def transfer(self, sender, recipient, amount):
        """
        Transfers tokens from sender to recipient.

        Args:
            sender: Address sending the tokens
            recipient: Address receiving the tokens
            amount: Amount of tokens to transfer

        Returns:
            True if successful
        """
        if amount <= 0:
            raise ValueError("Amount must be greater than zero")

        sender_balance = self.balances.get(sender, 0)

        if sender_balance < amount:
            raise ValueError("Insufficient balance")

        # Update balances
        self.balances[sender] = sender_balance - amount
        self.balances[recipient] = self.balances.get(recipient, 0) + amount

        return True

    def transfer_from(self, spender, owner, recipient, amount):
        """
        Transfers tokens from owner to recipient using spender's allowance.

        The allowance is checked before the balance, and neither is touched
        when the transfer fails.
        """
        approved = self.allowance(owner, spender)

        if approved < amount:
            raise ValueError("Insufficient allowance")

        self.transfer(owner, recipient, amount)
        self.allowances[(owner, spender)] = approved - amount

        return True

    def mint(self, minter, recipient, amount):
        """
        Mints new tokens to the recipient account.
        Only callable by authorized minters.

        Args:
            minter: Address requesting the mint
            recipient: Address receiving the minted tokens
            amount: Amount of tokens to mint

        Returns:
            True if successful
        """
        if minter not in self.minters:
            raise ValueError(f"{minter} is not allowed to mint {self.symbol}")

        if amount <= 0:
            raise ValueError("Amount must be greater than zero")

        # Update recipient balance
        self.balances[recipient] = self.balances.get(recipient, 0) + amount

        # Update total supply
        self.total_supply += amount

        return True


def deploy_eco_token(multisig):
    """Creates the ECO token with its full supply held by the multisig."""
    token = Token("EcoFi Token", "ECO")
    token.add_minter(multisig)
    token.mint(multisig, multisig, ECO_TOTAL_SUPPLY)
    token.minters.clear()
    return token
