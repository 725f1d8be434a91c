from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Helius (DAS + RPC, quota-limited)
    helius_api_key: str = ""
    helius_rpc_url: str = ""
    helius_max_rps: float = 10.0

    # Public Solana RPC (free holder data)
    solana_rpc_url: str = "https://api.mainnet-beta.solana.com"
    solana_rpc_max_rps: float = 4.0

    # Birdeye Data Services API (quota-limited)
    birdeye_api_key: str = ""
    birdeye_max_rps: float = 15.0

    # Free sources
    dexscreener_max_rps: float = 4.0
    jupiter_api_key: str = ""
    jupiter_max_rps: float = 1.0
    raydium_max_rps: float = 5.0
    goplus_max_rps: float = 0.5

    # Source resolution
    allow_quota_limited_sources: bool = True
    default_daily_quota: int = 1000
    source_daily_quotas: dict[str, int] = {}  # JSON in env, e.g. {"birdeye": 300}
    # Per-capability order override, e.g. {"pool_data": ["raydium", "dexscreener"]}
    source_priority: dict[str, list[str]] = {}
    adapter_timeout_sec: float = 20.0  # whole adapter attempt, retries included
    provider_http_timeout_sec: float = 10.0

    # Retry policy for a single adapter attempt
    provider_max_attempts: int = 3
    retry_base_delay_sec: float = 1.0
    retry_max_delay_sec: float = 4.0
    rate_limit_delay_sec: float = 5.0
    rate_limit_max_delay_sec: float = 30.0

    # Market scans
    new_token_max_age_hours: float = 24.0
    market_scan_limit: int = 10

    # HTTP API
    api_host: str = "127.0.0.1"
    api_port: int = 8080
    api_rate_limit: str = "30/minute"

    log_level: str = "INFO"
    log_json: bool = False  # serialize log records as JSON lines

    @property
    def effective_helius_rpc_url(self) -> str:
        if self.helius_rpc_url:
            return self.helius_rpc_url
        if self.helius_api_key:
            return f"https://mainnet.helius-rpc.com/?api-key={self.helius_api_key}"
        return ""


settings = Settings()
