"""Honeypot / sellability risk.

Buy and sell "tests" are derived from contract restriction flags and pool
activity reported by providers. No transaction is simulated, so a clean result
means no restriction was reported, not that a sell was proven to work.
"""

from dataclasses import dataclass, field

from src.risk.models import FactorCollector, RiskCategory, SubScore
from src.routing.payloads import PoolData, SecurityData

MAX_TAX_PCT = 50.0
HIGH_SELL_TAX_PCT = 20.0
HIGH_TRANSFER_FEE_PCT = 10.0
HONEYPOT_FLOOR = 85


@dataclass
class SellabilityChecks:
    buy_ok: bool = True
    sell_ok: bool = True
    sell_verified: bool = True
    buy_failures: list[str] = field(default_factory=list)
    sell_failures: list[str] = field(default_factory=list)
    restrictions: list[str] = field(default_factory=list)
    severe_restriction: bool = False
    blacklist_risk: int = 0
    contract_risk: int = 0

    @property
    def classic_honeypot(self) -> bool:
        """Can buy, cannot sell (only when the sell failure was actually reported)."""
        return self.buy_ok and not self.sell_ok and self.sell_verified


def run_checks(security: SecurityData | None, pool: PoolData | None) -> SellabilityChecks:
    checks = SellabilityChecks()

    if pool is None or pool.liquidity_usd is None or pool.liquidity_usd < 100:
        checks.buy_failures.append("Insufficient liquidity to buy")
    if pool is None or pool.volume_h24 is None or pool.volume_h24 < 10:
        checks.buy_failures.append("No recent trading volume")

    if security is None:
        checks.sell_ok = False
        checks.sell_verified = False
        checks.sell_failures.append("Sell restrictions could not be verified")
    else:
        if security.trading_disabled:
            checks.buy_failures.append("Trading is disabled")
            checks.severe_restriction = True
        if (security.buy_tax or 0) > MAX_TAX_PCT:
            checks.buy_failures.append(f"Buy tax {security.buy_tax:.0f}%")

        if security.is_honeypot:
            checks.sell_failures.append("Provider flags the token as a honeypot")
        if security.selling_disabled:
            checks.sell_failures.append("Selling or transfers are disabled")
            checks.severe_restriction = True
        if (security.sell_tax or 0) > MAX_TAX_PCT:
            checks.sell_failures.append(f"Sell tax {security.sell_tax:.0f}%")

        if security.transfer_pausable:
            checks.restrictions.append("Transfers can be paused by the owner")
        if security.trading_cooldown:
            checks.restrictions.append("Trading cooldown between transactions")
        if security.sell_tax is not None and HIGH_SELL_TAX_PCT < security.sell_tax <= MAX_TAX_PCT:
            checks.restrictions.append(f"High sell tax ({security.sell_tax:.0f}%)")
        if (security.transfer_fee_pct or 0) > HIGH_TRANSFER_FEE_PCT:
            checks.restrictions.append(f"Transfer fee {security.transfer_fee_pct:.0f}%")
        if security.anti_whale:
            checks.restrictions.append("Anti-whale limits on transaction size")

        if security.blacklist_enabled:
            checks.blacklist_risk = 90 if security.blacklisted_addresses else 70

        contract = 0
        if (security.transfer_fee_pct or 0) > HIGH_TRANSFER_FEE_PCT:
            contract += 30
        if (security.buy_tax or 0) > HIGH_SELL_TAX_PCT:
            contract += 20
        if security.mintable:
            contract += 15
        if security.balance_mutable:
            contract += 35
        checks.contract_risk = min(100, contract)

    checks.buy_ok = not checks.buy_failures
    if checks.sell_failures:
        checks.sell_ok = False
    return checks


def honeypot_risk(security: SecurityData | None, pool: PoolData | None) -> SubScore:
    checks = run_checks(security, pool)
    f = FactorCollector(RiskCategory.SECURITY)

    for reason in checks.buy_failures:
        f.add("buy_test_failed", 40, f"Buy test failed: {reason}")
    for reason in checks.sell_failures:
        name = "sell_unverified" if not checks.sell_verified else "sell_test_failed"
        f.add(name, 50, f"Sell test failed: {reason}")
    for restriction in checks.restrictions:
        f.add("sell_restriction", 15, restriction)
    if checks.blacklist_risk:
        f.add("blacklist_function", checks.blacklist_risk, "Owner can blacklist or freeze holder accounts")
    if checks.contract_risk:
        f.add("contract_restrictions", checks.contract_risk, "Contract carries owner-controlled fee or supply powers")

    security_score = 100.0
    if not checks.buy_ok:
        security_score -= 40
    if not checks.sell_ok:
        security_score -= 50
    security_score -= 15 * len(checks.restrictions)
    security_score -= 0.3 * checks.blacklist_risk
    security_score -= 0.2 * checks.contract_risk

    is_honeypot = (
        checks.classic_honeypot
        or checks.severe_restriction
        or checks.blacklist_risk > 80
        or checks.contract_risk > 80
    )
    risk = 100.0 - max(0.0, security_score)
    if is_honeypot:
        risk = max(risk, HONEYPOT_FLOOR)

    confidence = min(100, max(0, int(security_score)) + 20 + 5 * len(checks.restrictions))
    return SubScore(
        name="honeypot",
        category=RiskCategory.SECURITY,
        score=risk,
        factors=tuple(f.items),
        details={
            "is_honeypot": is_honeypot,
            "buy_test": checks.buy_ok,
            "sell_test": checks.sell_ok,
            "sell_verified": checks.sell_verified,
            "restrictions": list(checks.restrictions),
            "security_score": max(0, int(round(security_score))),
            "check_confidence": confidence,
        },
        data_backed=security is not None,
    )
