from __future__ import annotations

import math
from dataclasses import dataclass

from chna_cra.domain.enums import (
    Disparity,
    OpportunityKind,
    Recommendation,
    SEGMENT_OVERALL,
    SourceKind,
    Strength,
)


@dataclass(frozen=True)
class Document:
    name: str
    kind: SourceKind
    page_texts: tuple[str, ...]

    @property
    def page_count(self) -> int:
        return len(self.page_texts)


@dataclass(frozen=True)
class EvidenceRecord:
    disparity: str
    snippet: str
    document: str
    page: int


@dataclass
class Finding:
    """One (disparity, segment) pair per run.

    Mutated by the aggregator while documents are scanned and by the scorer
    once; treated as read-only afterwards.
    """

    key: Disparity
    disparity: str
    segment: str
    magnitude: float
    prominence: int
    evidence_ref: str
    concentration: float = 0.0
    score: int = 0
    recommendation: Recommendation = Recommendation.defer

    @property
    def id(self) -> str:
        return f"{self.key.value}__{self.segment}"

    @property
    def is_overall(self) -> bool:
        return self.segment == SEGMENT_OVERALL


@dataclass(frozen=True)
class Opportunity:
    name: str
    kind: OpportunityKind
    disparity: Disparity
    tests: str
    criterion: str
    strength: Strength
    score: int
    scope: str
    checklist: str


@dataclass(frozen=True)
class TransportSignals:
    overall: float | None = None
    age_65_74: float | None = None

    @property
    def amplification(self) -> float | None:
        if self.overall is None or self.age_65_74 is None or self.overall <= 0:
            return None
        return self.age_65_74 / self.overall


@dataclass(frozen=True)
class ExtractionWarning:
    document: str
    code: str
    message: str


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    # Half-up, not banker's rounding: 14.5 -> 15.
    return math.floor(value + 0.5)
