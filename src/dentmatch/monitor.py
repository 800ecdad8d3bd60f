"""
Per-doctor load snapshot for a date, independent of any match request.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence

import pandas as pd

from .capacity import daily_capacity
from .config import DAILY_SLOT_CEILING
from .models import DailyAssessment, Doctor, RequiredRank


@dataclass(frozen=True)
class TargetProgress:
    treatment: str
    current: int
    target: int

    @property
    def percent(self) -> float:
        return self.current / self.target * 100

    @property
    def met(self) -> bool:
        return self.current >= self.target


@dataclass(frozen=True)
class DoctorLoad:
    doctor: Doctor
    daily_count: int
    is_full: bool
    is_low_rank: bool
    progress: List[TargetProgress]

    @property
    def available(self) -> bool:
        return not (self.is_full or self.is_low_rank)


def doctor_load(doctor: Doctor, day: date, required: Optional[RequiredRank] = None) -> DoctorLoad:
    count = daily_capacity(doctor.doctor_id, day)
    progress = [
        TargetProgress(name, doctor.current_for(name), doctor.target_for(name)) for name in doctor.targets
    ]
    return DoctorLoad(
        doctor=doctor,
        daily_count=count,
        is_full=count >= DAILY_SLOT_CEILING,
        is_low_rank=required is not None and doctor.rank.level < required.level,
        progress=progress,
    )


def roster_load(
    doctors: Sequence[Doctor], day: date, required: Optional[RequiredRank] = None
) -> List[DoctorLoad]:
    return [doctor_load(doc, day, required) for doc in doctors]


def loads_to_df(loads: Sequence[DoctorLoad]) -> pd.DataFrame:
    records = []
    for load in loads:
        records.append(
            {
                "doctor_id": load.doctor.doctor_id,
                "name": load.doctor.name,
                "rank": load.doctor.rank.label,
                "dept": load.doctor.dept,
                "daily_count": load.daily_count,
                "is_full": load.is_full,
                "is_low_rank": load.is_low_rank,
                "monthly_total": load.doctor.monthly_total,
                "targets_met": sum(p.met for p in load.progress),
                "targets": len(load.progress),
            }
        )
    return pd.DataFrame.from_records(records)


def assessments_to_df(assessments: Sequence[DailyAssessment]) -> pd.DataFrame:
    return pd.DataFrame.from_records([a.to_dict() for a in assessments])
