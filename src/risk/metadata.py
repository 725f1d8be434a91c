from src.risk.models import FactorCollector, RiskCategory, SubScore, missing_input
from src.routing.payloads import TokenMetadata


def metadata_risk(metadata: TokenMetadata | None) -> SubScore:
    """Registry hygiene: verified listing and complete name/symbol."""
    if metadata is None:
        return missing_input("metadata", RiskCategory.TECHNICAL, "Token metadata")

    f = FactorCollector(RiskCategory.TECHNICAL)
    if not metadata.verified:
        f.add("token_unverified", 40, "Token is not on a verified token list")
    if not metadata.name:
        f.add("token_unnamed", 20, "Token has no name")
    if not metadata.symbol:
        f.add("token_no_symbol", 20, "Token has no symbol")
    return f.result("metadata", floor=5, details={"verified": metadata.verified})
