"""
Centralized matching constants and runtime defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


RANK_LEVELS: Dict[str, int] = {"Intern": 1, "PGY": 2, "FR": 3, "VS": 4}

DAILY_SLOT_CEILING: int = 5  # booked slots at which a doctor is full for the day
CAPACITY_MODULUS: int = 6
MONTHLY_CAPACITY: int = 150  # cases per month before load score hits zero
URGENCY_WEIGHT: float = 0.7
LOAD_WEIGHT: float = 0.3


@dataclass
class MatchConfig:
    explain_timeout: float = 5.0  # seconds before falling back
    anonymous_patient: str = "Unnamed patient"
    fallback_explanation: str = (
        "Selected by highest weighted score of case-target urgency and monthly load."
    )
