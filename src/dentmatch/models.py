"""
Typed containers shared by the matching pipeline.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .config import RANK_LEVELS
from .errors import MalformedDateError


class Rank(Enum):
    INTERN = "Intern"
    PGY = "PGY"
    FR = "FR"
    VS = "VS"

    @property
    def label(self) -> str:
        return self.value

    @property
    def level(self) -> int:
        return RANK_LEVELS[self.value]

    @classmethod
    def parse(cls, text: str) -> "Rank":
        wanted = str(text).strip().lower()
        for rank in cls:
            if rank.value.lower() == wanted:
                return rank
        raise ValueError(f"Unknown rank {text!r}; expected one of {[r.value for r in cls]}")


@dataclass(frozen=True)
class Doctor:
    doctor_id: int
    name: str
    rank: Rank
    dept: str  # may list several departments, e.g. "Endo/OD"
    monthly_total: int
    targets: Dict[str, int] = field(default_factory=dict)
    current_cases: Dict[str, int] = field(default_factory=dict)

    def target_for(self, treatment_name: str) -> int:
        # Missing or zero targets count as 1 so progress ratios stay defined.
        return self.targets.get(treatment_name) or 1

    def current_for(self, treatment_name: str) -> int:
        return self.current_cases.get(treatment_name) or 0

    def covers(self, dept: str) -> bool:
        return dept in self.dept


@dataclass(frozen=True)
class Treatment:
    treatment_id: str
    name: str
    dept: str
    min_rank: Rank


@dataclass(frozen=True)
class RequiredRank:
    rank: Rank

    @property
    def name(self) -> str:
        return self.rank.label

    @property
    def level(self) -> int:
        return self.rank.level


@dataclass(frozen=True)
class EligibilityResult:
    rank_ok: bool
    capacity_ok: bool
    dept_ok: bool

    @property
    def eligible(self) -> bool:
        return self.rank_ok and self.capacity_ok and self.dept_ok

    def reasons(self) -> List[str]:
        failed = []
        if not self.rank_ok:
            failed.append("rank below requirement")
        if not self.capacity_ok:
            failed.append("fully booked for the day")
        if not self.dept_ok:
            failed.append("department does not match")
        return failed


@dataclass(frozen=True)
class DailyAssessment:
    """A doctor annotated with the derived values for one match request."""

    doctor: Doctor
    daily_count: int
    eligibility: EligibilityResult
    urgency_score: Optional[float] = None
    load_score: Optional[float] = None
    total_score: float = -1.0

    @property
    def doctor_id(self) -> int:
        return self.doctor.doctor_id

    @property
    def name(self) -> str:
        return self.doctor.name

    @property
    def points(self) -> int:
        # Halves round up for display; selection uses the raw total.
        return math.floor(self.total_score + 0.5)

    def to_dict(self) -> dict:
        return {
            "doctor_id": self.doctor.doctor_id,
            "name": self.doctor.name,
            "rank": self.doctor.rank.label,
            "dept": self.doctor.dept,
            "monthly_total": self.doctor.monthly_total,
            "targets": dict(self.doctor.targets),
            "current_cases": dict(self.doctor.current_cases),
            "daily_count": self.daily_count,
            "eligible": self.eligibility.eligible,
            "urgency_score": self.urgency_score,
            "load_score": self.load_score,
            "total_score": self.total_score,
        }


@dataclass(frozen=True)
class MatchError:
    message: str

    def to_dict(self) -> dict:
        return {"error": self.message}


@dataclass(frozen=True)
class MatchRequest:
    day: date
    treatment_ids: Tuple[str, ...]
    patient_name: str = ""

    @classmethod
    def parse(
        cls, day: Union[str, date], treatment_ids: Iterable[str], patient_name: Optional[str] = None
    ) -> "MatchRequest":
        if isinstance(day, datetime):
            parsed = day.date()
        elif isinstance(day, date):
            parsed = day
        else:
            try:
                parsed = datetime.strptime(str(day).strip(), "%Y-%m-%d").date()
            except ValueError as exc:
                raise MalformedDateError(str(day)) from exc
        ids: List[str] = []
        for tid in treatment_ids:
            if tid not in ids:
                ids.append(tid)
        return cls(day=parsed, treatment_ids=tuple(ids), patient_name=(patient_name or "").strip())


MatchVerdict = Union[DailyAssessment, MatchError]
