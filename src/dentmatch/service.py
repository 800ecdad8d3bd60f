"""
Async front door: one match at a time, selection first, explanation second.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .config import MatchConfig
from .explain import ExplanationRequester, TemplateExplainer
from .matching import MatchEngine, MatchOutcome
from .models import DailyAssessment, Doctor, MatchRequest, Treatment
from .errors import MatchInFlightError

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    outcome: MatchOutcome
    explanation: Optional[str] = None
    explanation_fallback: bool = False

    @property
    def winner(self) -> Optional[DailyAssessment]:
        return self.outcome.winner

    def to_dict(self) -> dict:
        if self.outcome.error is not None:
            return self.outcome.error.to_dict()
        return {"winner": self.outcome.winner.to_dict(), "explanation": self.explanation}


class MatchService:
    def __init__(
        self,
        doctors: Sequence[Doctor],
        treatments: Sequence[Treatment],
        explainer: Optional[ExplanationRequester] = None,
        cfg: Optional[MatchConfig] = None,
        engine: Optional[MatchEngine] = None,
    ):
        self.doctors: List[Doctor] = list(doctors)
        self.treatments: List[Treatment] = list(treatments)
        self.explainer = explainer or TemplateExplainer()
        self.cfg = cfg or MatchConfig()
        self.engine = engine or MatchEngine()
        self.current: Optional[MatchResult] = None
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def reset(self) -> None:
        """Drop the displayed match, e.g. after the date or selection changed."""
        self.current = None

    async def handle(self, request: MatchRequest) -> MatchResult:
        if self._lock.locked():
            raise MatchInFlightError()
        async with self._lock:
            self.current = None
            outcome = self.engine.match(request, self.doctors, self.treatments)
            result = MatchResult(outcome=outcome)
            if outcome.winner is not None:
                result.explanation, result.explanation_fallback = await self._explain(outcome)
            self.current = result
            return result

    async def _explain(self, outcome: MatchOutcome):
        patient = outcome.request.patient_name or self.cfg.anonymous_patient
        try:
            text = await asyncio.wait_for(
                self.explainer.explain(outcome.winner, patient, outcome.treatments, outcome.request.day),
                timeout=self.cfg.explain_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Explanation timed out after %.1fs; using fallback", self.cfg.explain_timeout)
            return self.cfg.fallback_explanation, True
        except Exception:
            logger.exception("Explanation request failed; using fallback")
            return self.cfg.fallback_explanation, True
        if not text:
            return self.cfg.fallback_explanation, True
        return text, False
