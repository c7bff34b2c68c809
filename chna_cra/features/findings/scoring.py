from __future__ import annotations

from chna_cra.domain.enums import Disparity, Recommendation
from chna_cra.domain.models import Finding, TransportSignals, clamp, round_half_up

# Component caps: magnitude 60 + concentration 25 + prominence 15 = 100.
MAGNITUDE_FULL_AT = 30.0
MAGNITUDE_POINTS = 60.0
CONCENTRATION_FULL_AT = 15.0
CONCENTRATION_POINTS = 25.0
PROMINENCE_FULL_AT = 6.0
PROMINENCE_POINTS = 15.0

AMPLIFICATION_BONUS_PER_UNIT = 8.0
AMPLIFICATION_BONUS_CAP = 10.0

ADVANCE_HIGH_AT = 70
ADVANCE_MODERATE_AT = 55


def materiality_score(*, magnitude: float, concentration: float, prominence: float) -> int:
    mag = clamp(magnitude / MAGNITUDE_FULL_AT * MAGNITUDE_POINTS, 0, MAGNITUDE_POINTS)
    conc = clamp(concentration / CONCENTRATION_FULL_AT * CONCENTRATION_POINTS, 0, CONCENTRATION_POINTS)
    prom = clamp(prominence / PROMINENCE_FULL_AT * PROMINENCE_POINTS, 0, PROMINENCE_POINTS)
    return int(clamp(round_half_up(mag + conc + prom), 0, 100))


def amplification_bonus(transport: TransportSignals) -> int:
    amp = transport.amplification
    if amp is None:
        return 0
    return round_half_up(clamp((amp - 1) * AMPLIFICATION_BONUS_PER_UNIT, 0, AMPLIFICATION_BONUS_CAP))


def recommendation_for(score: int) -> Recommendation:
    if score >= ADVANCE_HIGH_AT:
        return Recommendation.advance_high
    if score >= ADVANCE_MODERATE_AT:
        return Recommendation.advance_moderate
    return Recommendation.defer


def score_findings(findings: list[Finding], transport: TransportSignals) -> list[Finding]:
    """Score every finding in place and return them sorted by score, highest first.

    Concentration is the excess of a segment over the Overall finding of the
    same disparity (0 when no Overall exists). Transport findings get a bonus
    when the 65-74 rate amplifies the overall rate. The sort is stable, so
    equal scores keep aggregation order.
    """

    overall_by_key = {f.key: f.magnitude for f in findings if f.is_overall}
    bonus = amplification_bonus(transport)

    for f in findings:
        if f.is_overall or f.key not in overall_by_key:
            f.concentration = 0.0
        else:
            f.concentration = max(0.0, f.magnitude - overall_by_key[f.key])

        score = materiality_score(magnitude=f.magnitude, concentration=f.concentration, prominence=f.prominence)
        if f.key == Disparity.transport:
            score = int(clamp(score + bonus, 0, 100))
        f.score = score
        f.recommendation = recommendation_for(score)

    return sorted(findings, key=lambda f: f.score, reverse=True)
