"""
Scoring: weigh how far a doctor is behind on case targets against monthly workload.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from .config import LOAD_WEIGHT, MONTHLY_CAPACITY, URGENCY_WEIGHT
from .models import Doctor, Treatment


@dataclass(frozen=True)
class Scores:
    urgency: float
    load: float
    total: float


@dataclass
class ScoringEngine:
    urgency_weight: float = URGENCY_WEIGHT
    load_weight: float = LOAD_WEIGHT
    monthly_capacity: int = MONTHLY_CAPACITY

    def treatment_urgency(self, doctor: Doctor, treatment: Treatment) -> float:
        target = doctor.target_for(treatment.name)
        return (target - doctor.current_for(treatment.name)) / target * 100

    def urgency(self, doctor: Doctor, treatments: Sequence[Treatment]) -> float:
        # Unclamped: over-target goes negative, far under-target exceeds 100.
        contributions: List[float] = [self.treatment_urgency(doctor, t) for t in treatments]
        return float(np.mean(contributions))

    def load(self, doctor: Doctor) -> float:
        return (self.monthly_capacity - doctor.monthly_total) / self.monthly_capacity * 100

    def score(self, doctor: Doctor, treatments: Sequence[Treatment]) -> Scores:
        if not treatments:
            raise ValueError("cannot score a doctor against an empty treatment selection")
        urgency = self.urgency(doctor, treatments)
        load = self.load(doctor)
        total = urgency * self.urgency_weight + load * self.load_weight
        return Scores(urgency=urgency, load=load, total=total)
