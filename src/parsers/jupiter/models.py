"""Pydantic models for the Jupiter Tokens API v2."""

from decimal import Decimal

from pydantic import BaseModel


class JupiterToken(BaseModel):
    """Token entry from /tokens/v2/search."""

    id: str  # mint address
    name: str | None = None
    symbol: str | None = None
    decimals: int | None = None
    icon: str | None = None
    isVerified: bool | None = None
    tags: list[str] = []
    holderCount: int | None = None
    organicScore: Decimal | None = None
    usdPrice: Decimal | None = None

    model_config = {"extra": "ignore"}

    @property
    def verified(self) -> bool:
        return bool(self.isVerified) or "verified" in self.tags or "strict" in self.tags
