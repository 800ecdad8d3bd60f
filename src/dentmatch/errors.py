"""
Exceptions raised at the edges of the matching core.
"""

from __future__ import annotations


class DentmatchError(Exception):
    """Base class for recoverable, caller-facing failures."""


class MalformedDateError(DentmatchError, ValueError):
    def __init__(self, text: str):
        super().__init__(f"Expected an ISO date (YYYY-MM-DD), got {text!r}")
        self.text = text


class NoTreatmentsSelectedError(DentmatchError):
    def __init__(self) -> None:
        super().__init__("Select at least one treatment before matching")


class MatchInFlightError(DentmatchError):
    def __init__(self) -> None:
        super().__init__("A match request is already in progress")


class RosterError(DentmatchError):
    pass
