"""Pydantic models for Solana JSON-RPC and Helius DAS responses."""

from decimal import Decimal

from pydantic import BaseModel


class TokenAccountBalance(BaseModel):
    """Entry of getTokenLargestAccounts / DAS getTokenAccounts.

    Plain RPC only knows the token account; DAS also reports its owner.
    """

    address: str
    owner: str | None = None
    amount: Decimal = Decimal(0)  # ui amount (decimals applied)

    model_config = {"extra": "ignore"}

    @property
    def holder(self) -> str:
        return self.owner or self.address


class TokenSupply(BaseModel):
    amount: Decimal = Decimal(0)  # ui amount
    decimals: int = 0

    model_config = {"extra": "ignore"}


class DasAsset(BaseModel):
    """Subset of the DAS getAsset result used for token metadata."""

    id: str
    name: str | None = None
    symbol: str | None = None
    decimals: int | None = None
    verified: bool = False

    model_config = {"extra": "ignore"}
