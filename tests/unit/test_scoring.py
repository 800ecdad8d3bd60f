"""Unit tests for the urgency/load scoring."""

import pytest

from dentmatch.models import Rank, Treatment
from dentmatch.scoring import ScoringEngine


@pytest.mark.unit
class TestScoringEngine:
    def test_reference_scores(self, ortho_vs, implant):
        scores = ScoringEngine().score(ortho_vs, [implant])
        assert scores.urgency == pytest.approx(60.0)
        assert scores.load == pytest.approx(60.0)
        assert scores.total == pytest.approx(60.0)

    def test_missing_target_defaults_to_one(self, doctor_factory, implant):
        doc = doctor_factory(2, targets={}, current_cases={})
        assert ScoringEngine().urgency(doc, [implant]) == pytest.approx(100.0)

    def test_zero_target_treated_as_one(self, doctor_factory, implant):
        doc = doctor_factory(2, targets={"Implant": 0}, current_cases={"Implant": 1})
        assert ScoringEngine().urgency(doc, [implant]) == pytest.approx(0.0)

    def test_over_target_goes_negative(self, doctor_factory, implant):
        doc = doctor_factory(2, targets={"Implant": 5}, current_cases={"Implant": 10})
        assert ScoringEngine().urgency(doc, [implant]) == pytest.approx(-100.0)

    def test_urgency_is_mean_over_treatments(self, doctor_factory, implant):
        braces = Treatment("t-braces", "Braces", "Ortho", Rank.FR)
        doc = doctor_factory(
            2,
            targets={"Implant": 5, "Braces": 10},
            current_cases={"Implant": 2, "Braces": 10},
        )
        assert ScoringEngine().urgency(doc, [implant, braces]) == pytest.approx(30.0)

    def test_load_unclamped_above_capacity(self, doctor_factory):
        doc = doctor_factory(2, monthly_total=180)
        assert ScoringEngine().load(doc) == pytest.approx(-20.0)

    def test_weights(self, doctor_factory, implant):
        # urgency 100, load 0
        doc = doctor_factory(2, targets={"Implant": 4}, current_cases={}, monthly_total=150)
        scores = ScoringEngine().score(doc, [implant])
        assert scores.total == pytest.approx(70.0)

    def test_empty_selection_rejected(self, ortho_vs):
        with pytest.raises(ValueError):
            ScoringEngine().score(ortho_vs, [])
