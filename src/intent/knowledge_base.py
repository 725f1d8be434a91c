"""Static guidance served for educational queries."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ChecklistItem:
    item: str
    how_to_check: str
    red_flags: tuple[str, ...]
    green_flags: tuple[str, ...]


@dataclass(frozen=True)
class Topic:
    key: str
    title: str
    summary: str
    keywords: tuple[str, ...]
    checklist: tuple[ChecklistItem, ...] = ()
    tips: tuple[str, ...] = ()


TOPICS: tuple[Topic, ...] = (
    Topic(
        key="lp_lock",
        title="Liquidity locks",
        summary=(
            "A liquidity lock keeps the pool's LP tokens out of the deployer's reach for a "
            "period, so the pool cannot be drained overnight. Lock status reported here is "
            "an estimate from pool size, age and turnover, not an on-chain attestation."
        ),
        keywords=("lock", "liquidity", "lp", "pool"),
        checklist=(
            ChecklistItem(
                item="LP lock status",
                how_to_check="Look up the lock duration and the share of LP tokens locked or burned",
                red_flags=("LP unlocked", "Lock shorter than 6 months", "Small locked share"),
                green_flags=("Locked 6+ months", "Most LP burned or locked", "Multiple lockers"),
            ),
        ),
        tips=("Thin pools under $10K can be drained with a single transaction.",),
    ),
    Topic(
        key="honeypot",
        title="Honeypots",
        summary=(
            "A honeypot lets you buy but blocks or heavily taxes selling. Common levers are "
            "disabled transfers, freeze authority, blacklists and sell taxes near 100%."
        ),
        keywords=("honeypot", "honey pot", "sell", "blacklist", "tax"),
        checklist=(
            ChecklistItem(
                item="Sellability",
                how_to_check="Check sell tax, transfer restrictions and freeze/blacklist authority",
                red_flags=("Cannot sell", "Sell tax above 20%", "Freeze authority retained"),
                green_flags=("Normal buy and sell", "Low taxes", "No blacklist function"),
            ),
        ),
        tips=("A contract that can pause transfers can turn into a honeypot at any time.",),
    ),
    Topic(
        key="rug_pull",
        title="Rug pulls",
        summary=(
            "A rug pull happens when insiders pull liquidity or dump a concentrated supply. "
            "Warning signs are new pairs, thin liquidity, dominant wallets and unlocked LP."
        ),
        keywords=("rug", "scam", "red flag"),
        checklist=(
            ChecklistItem(
                item="Contract ownership",
                how_to_check="Check mint and freeze authorities and who holds them",
                red_flags=("Owner can mint", "Owner can pause", "Fresh deployer wallet"),
                green_flags=("Authorities revoked", "Multi-sig ownership", "Known team"),
            ),
        ),
        tips=("Tokens under 24 hours old carry the highest rug risk.",),
    ),
    Topic(
        key="holders",
        title="Holder distribution",
        summary=(
            "Concentrated supply lets a few wallets move the price. A whale is any wallet "
            "holding at least ten times the average balance."
        ),
        keywords=("holder", "whale", "distribution", "wallet"),
        checklist=(
            ChecklistItem(
                item="Supply distribution",
                how_to_check="Sum the top 10 holders' share of supply",
                red_flags=("Single holder above 20%", "Top 10 above 60%", "Whale clusters"),
                green_flags=("Top holder below 10%", "Many small holders", "Even spread"),
            ),
        ),
    ),
    Topic(
        key="volume",
        title="Volume and manipulation",
        summary=(
            "Volume far above pool liquidity, or spikes without matching trade counts, often "
            "points to wash trading or a coordinated pump."
        ),
        keywords=("volume", "spike", "pump", "wash"),
        checklist=(
            ChecklistItem(
                item="Volume analysis",
                how_to_check="Compare 24h volume with liquidity and with hourly volume",
                red_flags=("Volume above 10x liquidity", "Spikes without trades", "Pump then dump"),
                green_flags=("Steady volume", "Organic growth", "Balanced buys and sells"),
            ),
        ),
    ),
)

GENERAL_TOPIC = Topic(
    key="checklist",
    title="Token safety checklist",
    summary=(
        "Before buying, check liquidity depth and lock, contract authorities, holder "
        "concentration, taxes and trading history. No single check proves a token safe."
    ),
    keywords=(),
    checklist=tuple(item for topic in TOPICS for item in topic.checklist),
    tips=(
        "Never invest more than you can afford to lose.",
        "Cross-check any single data source before acting on it.",
    ),
)


def find_topic(text: str) -> Topic:
    """Best-matching topic by keyword hits; the general checklist when nothing matches."""
    lowered = text.lower()
    best, best_hits = GENERAL_TOPIC, 0
    for topic in TOPICS:
        hits = sum(1 for keyword in topic.keywords if keyword in lowered)
        if hits > best_hits:
            best, best_hits = topic, hits
    return best
