"""
Matching pipeline: resolve the required rank, assess every doctor for the day, pick a winner.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence

from .capacity import daily_capacity
from .eligibility import check_eligibility, resolve_required_rank
from .errors import NoTreatmentsSelectedError
from .models import (
    DailyAssessment,
    Doctor,
    MatchError,
    MatchRequest,
    MatchVerdict,
    RequiredRank,
    Treatment,
)
from .scoring import ScoringEngine

logger = logging.getLogger(__name__)


@dataclass
class MatchOutcome:
    request: MatchRequest
    treatments: List[Treatment]
    required_rank: RequiredRank
    assessments: List[DailyAssessment]
    verdict: MatchVerdict

    @property
    def winner(self) -> Optional[DailyAssessment]:
        return self.verdict if isinstance(self.verdict, DailyAssessment) else None

    @property
    def error(self) -> Optional[MatchError]:
        return self.verdict if isinstance(self.verdict, MatchError) else None


def rank_candidates(assessments: Sequence[DailyAssessment]) -> List[DailyAssessment]:
    eligible = [a for a in assessments if a.total_score >= 0]
    # sorted() is stable with reverse=True, so equal scores keep roster order.
    return sorted(eligible, key=lambda a: a.total_score, reverse=True)


def select_winner(assessments: Sequence[DailyAssessment], day: Optional[date] = None) -> MatchVerdict:
    ranked = rank_candidates(assessments)
    if not ranked:
        when = day.isoformat() if day else "the requested date"
        return MatchError(f"No doctor meets the rank, department or daily capacity requirements for {when}")
    return ranked[0]


def select_treatments(catalog: Sequence[Treatment], treatment_ids: Sequence[str]) -> List[Treatment]:
    known = {t.treatment_id for t in catalog}
    unknown = [tid for tid in treatment_ids if tid not in known]
    if unknown:
        logger.warning("Ignoring unknown treatment ids: %s", ", ".join(unknown))
    wanted = set(treatment_ids)
    return [t for t in catalog if t.treatment_id in wanted]


@dataclass
class MatchEngine:
    scoring: ScoringEngine = field(default_factory=ScoringEngine)

    def assess(
        self,
        doctors: Sequence[Doctor],
        treatments: Sequence[Treatment],
        required: RequiredRank,
        day: date,
    ) -> List[DailyAssessment]:
        assessments = []
        for doc in doctors:
            count = daily_capacity(doc.doctor_id, day)
            check = check_eligibility(doc, count, required, treatments)
            if not check.eligible:
                assessments.append(DailyAssessment(doctor=doc, daily_count=count, eligibility=check))
                continue
            scores = self.scoring.score(doc, treatments)
            assessments.append(
                DailyAssessment(
                    doctor=doc,
                    daily_count=count,
                    eligibility=check,
                    urgency_score=scores.urgency,
                    load_score=scores.load,
                    total_score=scores.total,
                )
            )
        return assessments

    def match(
        self, request: MatchRequest, doctors: Sequence[Doctor], catalog: Sequence[Treatment]
    ) -> MatchOutcome:
        treatments = select_treatments(catalog, request.treatment_ids)
        required = resolve_required_rank(treatments)
        if required is None:
            raise NoTreatmentsSelectedError()

        assessments = self.assess(doctors, treatments, required, request.day)
        verdict = select_winner(assessments, request.day)
        if isinstance(verdict, MatchError):
            logger.info("No match on %s for %s", request.day, [t.name for t in treatments])
        else:
            logger.info(
                "Matched %s (id=%d) on %s with total %.2f",
                verdict.name,
                verdict.doctor_id,
                request.day,
                verdict.total_score,
            )
        return MatchOutcome(
            request=request,
            treatments=treatments,
            required_rank=required,
            assessments=assessments,
            verdict=verdict,
        )
