"""Pydantic models for Birdeye Data Services API responses."""

from decimal import Decimal

from pydantic import BaseModel


class BirdeyeTokenOverview(BaseModel):
    """Response from /defi/token_overview.

    Carries both the registry fields (name, symbol, decimals) and the pool-level
    market numbers, so it backs metadata and pool lookups alike. 30 CU per call.
    """

    address: str = ""
    name: str | None = None
    symbol: str | None = None
    decimals: int | None = None

    price: Decimal | None = None
    marketCap: Decimal | None = None
    liquidity: Decimal | None = None
    holder: int | None = None

    # Volume in USD by time window
    v5mUSD: Decimal | None = None
    v1hUSD: Decimal | None = None
    v6hUSD: Decimal | None = None
    v24hUSD: Decimal | None = None

    # Trade counts by time window
    buy1h: int | None = None
    sell1h: int | None = None
    buy24h: int | None = None
    sell24h: int | None = None

    # Price changes
    priceChange5mPercent: Decimal | None = None
    priceChange1hPercent: Decimal | None = None
    priceChange6hPercent: Decimal | None = None
    priceChange24hPercent: Decimal | None = None

    model_config = {"extra": "ignore"}


class BirdeyeTokenSecurity(BaseModel):
    """Response from /defi/token_security. 50 CU."""

    ownerAddress: str | None = None
    creatorAddress: str | None = None
    creationTime: int | None = None
    top10HolderPercent: Decimal | None = None
    totalSupply: Decimal | None = None
    isToken2022: bool | None = None
    freezeAuthority: str | None = None
    mintAuthority: str | None = None
    transferFeeEnable: bool | None = None
    transferFeeData: dict | None = None
    nonTransferable: bool | None = None
    mutableMetadata: bool | None = None

    model_config = {"extra": "ignore"}

    @property
    def is_mintable(self) -> bool:
        return self.mintAuthority is not None

    @property
    def is_freezable(self) -> bool:
        return self.freezeAuthority is not None

    @property
    def transfer_fee_pct(self) -> float | None:
        """Token-2022 transfer fee in percent, when the fee extension is set."""
        if not self.transferFeeEnable:
            return 0.0 if self.transferFeeEnable is False else None
        fee = (self.transferFeeData or {}).get("newer_transfer_fee") or {}
        bps = fee.get("transfer_fee_basis_points")
        try:
            return float(bps) / 100 if bps is not None else None
        except (TypeError, ValueError):
            return None


class BirdeyeMarketToken(BaseModel):
    """Row of /defi/tokenlist, /defi/token_trending and /defi/v2/tokens/new_listing.

    The three endpoints name their volume and change fields differently; the
    aliases here cover all of them.
    """

    address: str = ""
    name: str | None = None
    symbol: str | None = None
    price: Decimal | None = None
    liquidity: Decimal | None = None
    v24hUSD: Decimal | None = None
    volume24hUSD: Decimal | None = None
    v24hChangePercent: Decimal | None = None
    price24hChangePercent: Decimal | None = None
    mc: Decimal | None = None
    rank: int | None = None
    liquidityAddedAt: str | None = None  # ISO timestamp on new listings

    model_config = {"extra": "ignore"}

    @property
    def volume_24h(self) -> Decimal | None:
        return self.v24hUSD if self.v24hUSD is not None else self.volume24hUSD


class BirdeyeHolder(BaseModel):
    """Item of /defi/v3/token/holder."""

    owner: str = ""
    ui_amount: Decimal | None = None

    model_config = {"extra": "ignore"}
