"""
Hard constraints: the minimum rank a request needs and which doctors may take it.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .config import DAILY_SLOT_CEILING
from .models import Doctor, EligibilityResult, RequiredRank, Treatment


def resolve_required_rank(treatments: Sequence[Treatment]) -> Optional[RequiredRank]:
    """Highest ``min_rank`` among the selection, or None when nothing is selected.

    Only a strictly greater level replaces the running maximum, so the first
    treatment wins if two ranks ever share a level.
    """
    best: Optional[Treatment] = None
    for t in treatments:
        if best is None or t.min_rank.level > best.min_rank.level:
            best = t
    return RequiredRank(best.min_rank) if best is not None else None


def check_eligibility(
    doctor: Doctor,
    daily_count: int,
    required: RequiredRank,
    treatments: Sequence[Treatment],
) -> EligibilityResult:
    return EligibilityResult(
        rank_ok=doctor.rank.level >= required.level,
        capacity_ok=daily_count < DAILY_SLOT_CEILING,
        dept_ok=any(doctor.covers(t.dept) for t in treatments),
    )


def is_eligible(
    doctor: Doctor,
    daily_count: int,
    required: RequiredRank,
    treatments: Sequence[Treatment],
) -> bool:
    return check_eligibility(doctor, daily_count, required, treatments).eligible
