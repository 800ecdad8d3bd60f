"""Pytest configuration and shared fixtures for matching tests.

Provides common fixtures for:
- A small treatment catalog covering every rank
- Doctors built around the 2024-03-15 reference date (date seed 2042)
- The bundled sample roster
"""

from datetime import date
from typing import List

import pytest

from dentmatch.models import Doctor, MatchRequest, Rank, Treatment
from dentmatch.roster import sample_roster

REFERENCE_DAY = date(2024, 3, 15)


@pytest.fixture
def reference_day() -> date:
    """2024-03-15: doctor ids 1 and 7 have 3 booked slots, id 3 is full."""
    return REFERENCE_DAY


@pytest.fixture
def implant() -> Treatment:
    return Treatment("t-implant", "Implant", "Ortho", Rank.VS)


@pytest.fixture
def catalog(implant) -> List[Treatment]:
    """Treatment catalog with one entry per rank.

    Returns:
        List of treatments in catalog order
    """
    return [
        Treatment("t-scaling", "Scaling", "Perio", Rank.INTERN),
        Treatment("t-rct", "Root Canal", "Endo", Rank.PGY),
        Treatment("t-braces", "Braces", "Ortho", Rank.FR),
        implant,
    ]


def make_doctor(doctor_id: int, **overrides) -> Doctor:
    fields = dict(
        doctor_id=doctor_id,
        name=f"Doctor {doctor_id}",
        rank=Rank.VS,
        dept="Ortho",
        monthly_total=60,
        targets={"Implant": 5},
        current_cases={"Implant": 2},
    )
    fields.update(overrides)
    return Doctor(**fields)


@pytest.fixture
def doctor_factory():
    return make_doctor


@pytest.fixture
def ortho_vs() -> Doctor:
    """Doctor scoring exactly 60 on an implant request."""
    return make_doctor(1, name="Ortho VS")


@pytest.fixture
def implant_request(reference_day) -> MatchRequest:
    return MatchRequest.parse(reference_day.isoformat(), ["t-implant"], "Alice")


@pytest.fixture
def sample():
    return sample_roster()
