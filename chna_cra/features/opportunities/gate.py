from chna_cra.domain.models import Opportunity

TIER_GATE_THRESHOLD = 60


def tier_unlocked(opportunities: list[Opportunity]) -> bool:
    """Financial modeling opens once any opportunity reaches the threshold."""

    return any(o.score >= TIER_GATE_THRESHOLD for o in opportunities)
