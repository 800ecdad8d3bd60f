"""
Human-readable justification for a selected doctor.

The matching core never depends on this text; callers request it after the
winner is fixed and may swap in any object satisfying ``ExplanationRequester``
(for example a client for a remote language-model service).
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Protocol, Sequence

from .models import DailyAssessment, Treatment


def _fmt_score(score: Optional[float]) -> str:
    return f"{score:.1f}" if isinstance(score, (int, float)) else "N/A"


class ExplanationRequester(Protocol):
    async def explain(
        self,
        winner: DailyAssessment,
        patient_name: str,
        treatments: Sequence[Treatment],
        day: date,
    ) -> str:
        ...


class TemplateExplainer:
    """Builds the explanation locally from the winner's scores and case progress."""

    async def explain(
        self,
        winner: DailyAssessment,
        patient_name: str,
        treatments: Sequence[Treatment],
        day: date,
    ) -> str:
        doc = winner.doctor
        progress: List[str] = []
        for t in treatments:
            progress.append(f"{t.name} {doc.current_for(t.name)}/{doc.target_for(t.name)} cases")
        return (
            f"Dr. {doc.name} ({doc.rank.label}, {doc.dept}) is recommended for {patient_name} "
            f"on {day.isoformat()}. Progress toward monthly targets: {'; '.join(progress)}, "
            f"giving an urgency score of {_fmt_score(winner.urgency_score)}. "
            f"With {doc.monthly_total} cases booked this month the load score is "
            f"{_fmt_score(winner.load_score)}, and {winner.daily_count} of the day's slots are taken. "
            f"Weighted total: {_fmt_score(winner.total_score)}."
        )
