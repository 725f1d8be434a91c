"""Holder-distribution risk: concentration, whales, dev wallets, holder count."""

from dataclasses import dataclass

from src.risk.models import FactorCollector, RiskCategory, SubScore, missing_input
from src.routing.payloads import HolderBalance, HolderData

WHALE_MULTIPLIER = 10.0  # whale = balance >= 10x the mean balance
DEV_WALLET_MIN_PCT = 5.0
SINGLE_WALLET_ALERT_PCT = 20.0


@dataclass(frozen=True)
class Whale:
    owner: str
    balance: float
    share_pct: float


def find_whales(data: HolderData) -> list[Whale]:
    if not data.holders:
        return []
    mean = sum(h.balance for h in data.holders) / len(data.holders)
    threshold = mean * WHALE_MULTIPLIER
    return [
        Whale(owner=h.owner, balance=h.balance, share_pct=data.share_pct(h.balance))
        for h in data.holders
        if h.balance >= threshold and h.balance > 0
    ]


def top_holders_pct(data: HolderData, n: int = 10) -> float:
    return sum(data.share_pct(h.balance) for h in data.holders[:n])


def _band(pct: float) -> int:
    if pct > 80:
        return 90
    if pct > 60:
        return 70
    if pct > 40:
        return 50
    if pct > 20:
        return 30
    return 10


def concentration_risk(data: HolderData | None) -> SubScore:
    if data is None or not data.holders:
        return missing_input("concentration", RiskCategory.TOKENOMICS, "Holder list")

    top10 = top_holders_pct(data)
    whales = find_whales(data)
    total = data.total_holders or len(data.holders)
    whale_ratio = len(whales) / total if total else 0.0

    f = FactorCollector(RiskCategory.TOKENOMICS)
    base = _band(top10)
    if top10 > 20:
        f.add("top10_concentration", base, f"Top 10 holders own {top10:.1f}% of supply")
    else:
        f.points = base

    if whale_ratio > 0.1:
        f.add("whale_ratio_high", 10, f"{len(whales)} whales among {total} holders")
    elif whale_ratio > 0.05:
        f.add("whale_ratio_elevated", 5, f"{len(whales)} whales among {total} holders")

    return f.result(
        "concentration",
        details={"top10_pct": round(top10, 2), "whale_count": len(whales), "whale_ratio": round(whale_ratio, 4)},
    )


def whale_influence_risk(data: HolderData | None) -> SubScore:
    if data is None or not data.holders:
        return missing_input("whale_influence", RiskCategory.TOKENOMICS, "Holder list")

    whales = find_whales(data)
    whale_pct = sum(w.share_pct for w in whales)

    f = FactorCollector(RiskCategory.TOKENOMICS)
    if whale_pct > 50:
        f.add("whales_dominant", 90, f"Whales control {whale_pct:.1f}% of supply")
    elif whale_pct > 30:
        f.add("whales_heavy", 70, f"Whales control {whale_pct:.1f}% of supply")
    elif whale_pct > 15:
        f.add("whales_significant", 50, f"Whales control {whale_pct:.1f}% of supply")
    elif whale_pct > 5:
        f.add("whales_present", 30, f"Whales control {whale_pct:.1f}% of supply")
    else:
        f.points = 10

    return f.result(
        "whale_influence",
        details={
            "whale_pct": round(whale_pct, 2),
            "whales": [{"owner": w.owner, "share_pct": round(w.share_pct, 2)} for w in whales[:10]],
        },
    )


def holder_count_risk(data: HolderData | None) -> SubScore:
    if data is None or data.total_holders is None:
        return missing_input("holder_count", RiskCategory.COMMUNITY, "Holder count")

    count = data.total_holders
    f = FactorCollector(RiskCategory.COMMUNITY)
    if count < 100:
        f.add("holders_very_few", 80, f"Only {count} holders")
    elif count < 500:
        f.add("holders_few", 50, f"Small holder base ({count})")
    elif count < 1_000:
        f.add("holders_modest", 30, f"Modest holder base ({count})")
    elif count < 5_000:
        f.points = 15
    else:
        f.points = 5
    return f.result("holder_count", details={"total_holders": count})


def dev_wallet_risk(data: HolderData | None) -> SubScore:
    """Large early wallets (above 5% each) treated as potential developer wallets."""
    if data is None or not data.holders:
        return missing_input("dev_wallet", RiskCategory.SECURITY, "Holder list")

    candidates: list[tuple[HolderBalance, float]] = [
        (h, data.share_pct(h.balance)) for h in data.holders if data.share_pct(h.balance) > DEV_WALLET_MIN_PCT
    ]
    dev_pct = sum(pct for _, pct in candidates)

    f = FactorCollector(RiskCategory.SECURITY)
    band = _band(dev_pct)
    if dev_pct > 20:
        f.add("dev_wallets_share", band, f"{len(candidates)} large wallets hold {dev_pct:.1f}% of supply")
    else:
        f.points = band

    for holder, pct in candidates:
        if pct > SINGLE_WALLET_ALERT_PCT:
            f.add("single_wallet_dominant", 10, f"Wallet {holder.owner[:8]}... holds {pct:.1f}% of supply")

    return f.result(
        "dev_wallet",
        details={"dev_wallet_count": len(candidates), "dev_wallet_pct": round(dev_pct, 2)},
    )
