from enum import StrEnum


class Capability(StrEnum):
    TOKEN_METADATA = "token_metadata"
    POOL_DATA = "pool_data"
    HOLDER_DATA = "holder_data"
    SECURITY = "security"
    VOLUME_SPIKES = "volume_spikes"
    TRENDING = "trending"
    NEW_PAIRS = "new_pairs"


# Free sources first; quota-limited ones close each chain.
SOURCE_PRIORITY: dict[Capability, tuple[str, ...]] = {
    Capability.TOKEN_METADATA: ("jupiter", "dexscreener", "birdeye", "helius"),
    Capability.POOL_DATA: ("dexscreener", "raydium", "birdeye"),
    Capability.HOLDER_DATA: ("solana_rpc", "helius", "birdeye"),
    Capability.SECURITY: ("goplus", "birdeye"),
    Capability.VOLUME_SPIKES: ("dexscreener", "birdeye"),
    Capability.TRENDING: ("dexscreener", "birdeye"),
    Capability.NEW_PAIRS: ("dexscreener", "birdeye"),
}

QUOTA_LIMITED_SOURCES: frozenset[str] = frozenset({"birdeye", "helius"})

# Subject id used for capabilities that scan the whole market
MARKET_SUBJECT = "solana"
