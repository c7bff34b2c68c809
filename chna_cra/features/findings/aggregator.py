from __future__ import annotations

import logging

from chna_cra.domain.enums import Disparity
from chna_cra.domain.models import Finding

logger = logging.getLogger(__name__)


class FindingAggregator:
    """Keeps at most one Finding per (disparity, segment), in first-seen order.

    A later observation only wins when its magnitude is strictly greater; on
    ties the earliest evidence is kept.
    """

    def __init__(self) -> None:
        self._by_id: dict[str, Finding] = {}

    def add_finding(
        self,
        *,
        key: Disparity,
        label: str,
        segment: str,
        magnitude: float,
        prominence: int,
        evidence_ref: str,
    ) -> Finding:
        fid = f"{key.value}__{segment}"
        existing = self._by_id.get(fid)
        if existing is None:
            f = Finding(
                key=key,
                disparity=label,
                segment=segment,
                magnitude=magnitude,
                prominence=prominence,
                evidence_ref=evidence_ref,
            )
            self._by_id[fid] = f
            return f

        if magnitude > existing.magnitude:
            logger.debug("Finding %s raised %.2f -> %.2f (%s)", fid, existing.magnitude, magnitude, evidence_ref)
            existing.magnitude = magnitude
            existing.evidence_ref = evidence_ref
            existing.prominence = max(existing.prominence, prominence)
        return existing

    @classmethod
    def from_findings(cls, findings: list[Finding]) -> FindingAggregator:
        agg = cls()
        for f in findings:
            agg._by_id.setdefault(f.id, f)
        return agg

    def findings(self) -> list[Finding]:
        return list(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)
