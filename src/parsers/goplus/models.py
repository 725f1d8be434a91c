"""Data models for GoPlus Security API responses."""

from dataclasses import dataclass


@dataclass
class GoPlusReport:
    """Token security report from GoPlus API.

    GoPlus exposes contract-level flags only; nothing here comes from an
    executed buy or sell.
    """

    is_honeypot: bool | None = None
    is_mintable: bool | None = None
    is_freezable: bool | None = None  # freeze authority can block accounts
    owner_can_change_balance: bool | None = None
    non_transferable: bool | None = None
    cannot_buy: bool | None = None
    cannot_sell_all: bool | None = None
    is_blacklisted: bool | None = None
    buy_tax: float | None = None  # percentage (0-100)
    sell_tax: float | None = None  # percentage (0-100)
    transfer_fee_pct: float | None = None
    transfer_pausable: bool | None = None
    trading_cooldown: bool | None = None
    is_anti_whale: bool | None = None
    holder_count: int | None = None
