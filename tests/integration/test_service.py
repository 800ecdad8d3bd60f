"""Integration tests for the async match service: ordering, guard and fallbacks."""

import asyncio

import pytest

from dentmatch.config import MatchConfig
from dentmatch.errors import MatchInFlightError, NoTreatmentsSelectedError
from dentmatch.models import MatchRequest
from dentmatch.service import MatchService


class RecordingExplainer:
    def __init__(self):
        self.calls = []

    async def explain(self, winner, patient_name, treatments, day):
        self.calls.append((winner.doctor_id, patient_name, [t.name for t in treatments], day))
        return f"picked {winner.name}"


class FailingExplainer:
    async def explain(self, winner, patient_name, treatments, day):
        raise ConnectionError("service down")


class SlowExplainer:
    async def explain(self, winner, patient_name, treatments, day):
        await asyncio.sleep(5)
        return "too late"


@pytest.mark.integration
class TestMatchService:
    def test_template_explanation(self, ortho_vs, catalog, implant_request):
        service = MatchService([ortho_vs], catalog)
        result = asyncio.run(service.handle(implant_request))

        assert result.winner.doctor_id == 1
        assert not result.explanation_fallback
        assert "Ortho VS" in result.explanation
        assert "Alice" in result.explanation
        assert "Implant 2/5" in result.explanation
        assert service.current is result

    def test_placeholder_patient_name(self, ortho_vs, catalog, reference_day):
        explainer = RecordingExplainer()
        service = MatchService([ortho_vs], catalog, explainer=explainer)
        request = MatchRequest.parse(reference_day, ["t-implant"], "")
        asyncio.run(service.handle(request))
        assert explainer.calls == [(1, MatchConfig().anonymous_patient, ["Implant"], reference_day)]

    def test_no_match_skips_explanation(self, doctor_factory, catalog, implant_request):
        explainer = RecordingExplainer()
        service = MatchService([doctor_factory(3)], catalog, explainer=explainer)
        result = asyncio.run(service.handle(implant_request))

        assert result.winner is None
        assert explainer.calls == []
        assert set(result.to_dict()) == {"error"}

    def test_failure_falls_back(self, ortho_vs, catalog, implant_request):
        cfg = MatchConfig()
        service = MatchService([ortho_vs], catalog, explainer=FailingExplainer(), cfg=cfg)
        result = asyncio.run(service.handle(implant_request))

        assert result.winner.doctor_id == 1
        assert result.explanation == cfg.fallback_explanation
        assert result.explanation_fallback
        assert result.to_dict()["winner"]["total_score"] == pytest.approx(60.0)

    def test_timeout_falls_back(self, ortho_vs, catalog, implant_request):
        cfg = MatchConfig(explain_timeout=0.01)
        service = MatchService([ortho_vs], catalog, explainer=SlowExplainer(), cfg=cfg)
        result = asyncio.run(service.handle(implant_request))

        assert result.winner.doctor_id == 1
        assert result.explanation_fallback

    def test_rejects_overlapping_requests(self, ortho_vs, catalog, implant_request):
        async def scenario():
            gate = asyncio.Event()

            class GatedExplainer:
                async def explain(self, winner, patient_name, treatments, day):
                    await gate.wait()
                    return "done"

            service = MatchService([ortho_vs], catalog, explainer=GatedExplainer())
            first = asyncio.create_task(service.handle(implant_request))
            await asyncio.sleep(0)
            assert service.busy
            with pytest.raises(MatchInFlightError):
                await service.handle(implant_request)
            gate.set()
            result = await first
            assert not service.busy
            return result

        result = asyncio.run(scenario())
        assert result.explanation == "done"

    def test_precondition_releases_guard(self, ortho_vs, catalog):
        async def scenario():
            service = MatchService([ortho_vs], catalog)
            with pytest.raises(NoTreatmentsSelectedError):
                await service.handle(MatchRequest.parse("2024-03-15", []))
            assert not service.busy

        asyncio.run(scenario())

    def test_reset_clears_current(self, ortho_vs, catalog, implant_request):
        service = MatchService([ortho_vs], catalog)
        asyncio.run(service.handle(implant_request))
        service.reset()
        assert service.current is None
