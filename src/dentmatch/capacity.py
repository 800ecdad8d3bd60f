"""
Deterministic stand-in for an appointment calendar: booked slots per doctor per day.
"""

from __future__ import annotations

from datetime import date

from .config import CAPACITY_MODULUS


def date_seed(day: date) -> int:
    return day.year + day.month + day.day


def daily_capacity(doctor_id: int, day: date) -> int:
    """Booked-slot count for ``doctor_id`` on ``day``, always in [0, 5]."""
    return (doctor_id + date_seed(day)) % CAPACITY_MODULUS
